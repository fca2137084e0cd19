"""Пакетный режим: прогон каталога рецептов над каталогом слоёв."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tgalab.config import AppConfig, setup_logging
from tgalab.services.compositor import CompositorService
from tgalab.services.layer_store import LayerStore
from tgalab.services.recipe_service import RECIPES, RecipeRunner, find_recipes

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tgalab-batch",
        description="Строит составные изображения из именованных слоёв TGA.",
    )
    parser.add_argument("--layers", type=Path, help="каталог исходных слоёв")
    parser.add_argument("--output", type=Path, help="каталог для результатов")
    parser.add_argument("--examples", type=Path, help="каталог эталонов EXAMPLE_<имя>.tga")
    parser.add_argument("--workers", type=int, help="потоков на операцию")
    parser.add_argument("--log-level", help="уровень логирования (DEBUG, INFO, ...)")
    parser.add_argument("--only", nargs="+", metavar="NAME", help="выполнить только эти рецепты")
    parser.add_argument("--list", action="store_true", help="показать рецепты и выйти")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = AppConfig.from_env().merged(
        layers_dir=args.layers,
        output_dir=args.output,
        examples_dir=args.examples,
        workers=args.workers,
        log_level=args.log_level,
    )
    setup_logging(config.log_level)

    if args.list:
        for recipe in RECIPES:
            print(f"{recipe.number:>2}  {recipe.output_name}")
        return 0

    try:
        recipes = find_recipes(args.only) if args.only else list(RECIPES)
    except KeyError as exc:
        logger.error("%s", exc.args[0])
        return 2

    with CompositorService(workers=config.workers) as compositor:
        runner = RecipeRunner(
            layers=LayerStore(config.layers_dir),
            outputs=LayerStore(config.output_dir, check_profile=False),
            compositor=compositor,
            references=LayerStore(config.examples_dir) if config.examples_dir else None,
        )
        results = runner.run(recipes)
    failed = [r.recipe.output_name for r in results if not r.ok]
    if failed:
        logger.warning("%d of %d recipes failed: %s", len(failed), len(results), ", ".join(failed))
        return 1
    logger.info("All %d recipes succeeded", len(results))
    return 0


if __name__ == "__main__":
    sys.exit(main())
