from __future__ import annotations

from pathlib import Path

import pytest

from tgalab.config import AppConfig


class TestAppConfig:
    def test_defaults(self):
        config = AppConfig.from_env({})
        assert config == AppConfig()
        assert config.examples_dir is None

    def test_from_env(self):
        config = AppConfig.from_env(
            {
                "TGALAB_LAYERS_DIR": "/data/in",
                "TGALAB_OUTPUT_DIR": "/data/out",
                "TGALAB_EXAMPLES_DIR": "/data/ref",
                "TGALAB_WORKERS": "4",
                "TGALAB_LOG_LEVEL": "debug",
            }
        )
        assert config.layers_dir == Path("/data/in")
        assert config.output_dir == Path("/data/out")
        assert config.examples_dir == Path("/data/ref")
        assert config.workers == 4
        assert config.log_level == "debug"

    @pytest.mark.parametrize(
        "env", [{"TGALAB_WORKERS": "many"}, {"TGALAB_WORKERS": "0"}, {"TGALAB_LOG_LEVEL": "LOUD"}]
    )
    def test_invalid_values(self, env):
        with pytest.raises(ValueError):
            AppConfig.from_env(env)

    def test_merged_ignores_none(self):
        config = AppConfig(workers=3).merged(workers=None, output_dir=Path("x"))
        assert config.workers == 3
        assert config.output_dir == Path("x")
