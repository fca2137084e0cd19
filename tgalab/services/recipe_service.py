"""Каталог рецептов: какие операции к каким именованным слоям применить.

Каждый рецепт строит один выходной слой из слоёв хранилища. `RecipeRunner`
сохраняет результаты и, если задан каталог эталонов, сравнивает их побайтово.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

from tgalab.models.errors import TgaLabError
from tgalab.models.image_model import Channel, RasterImage
from tgalab.services.compare_service import Comparison, compare_bytes
from tgalab.services.compositor import Adjustment, CompositorService
from tgalab.services.image_codec import encode_image
from tgalab.services.layer_store import LayerStore
from tgalab.services.pixel_ops import BlendMode

logger = logging.getLogger(__name__)

REFERENCE_PREFIX = "EXAMPLE_"

Builder = Callable[[LayerStore, CompositorService], RasterImage]


@dataclass(frozen=True)
class Recipe:
    number: int
    output_name: str
    build: Builder


@dataclass(frozen=True)
class RecipeResult:
    recipe: Recipe
    output_path: Optional[str] = None
    comparison: Optional[Comparison] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        """Рецепт выполнен, и эталон (если был) совпал."""
        if self.error is not None:
            return False
        return self.comparison is None or self.comparison.matches


def _isolate(keep: Channel) -> Builder:
    """Оставляет один канал слоя car, два других обнуляются."""
    def build(store: LayerStore, comp: CompositorService) -> RasterImage:
        zeroed = [Adjustment(ch, 0.0) for ch in Channel if ch is not keep]
        return comp.chain(store.load_layer("car"), *zeroed)
    return build


RECIPES: Tuple[Recipe, ...] = (
    Recipe(1, "part1", lambda s, c: c.blend(BlendMode.MULTIPLY, s.load_layer("layer1"), s.load_layer("pattern1"))),
    Recipe(2, "part2", lambda s, c: c.blend(BlendMode.SUBTRACT, s.load_layer("layer2"), s.load_layer("car"))),
    Recipe(3, "part3", lambda s, c: c.blend(
        BlendMode.SCREEN,
        s.load_layer("text"),
        c.blend(BlendMode.MULTIPLY, s.load_layer("layer1"), s.load_layer("pattern2")),
    )),
    Recipe(4, "part4", lambda s, c: c.blend(
        BlendMode.SUBTRACT,
        s.load_layer("pattern2"),
        c.blend(BlendMode.MULTIPLY, s.load_layer("layer2"), s.load_layer("circles")),
    )),
    Recipe(5, "part5", lambda s, c: c.blend(BlendMode.OVERLAY, s.load_layer("layer1"), s.load_layer("pattern1"))),
    Recipe(6, "part6", lambda s, c: c.adjust(s.load_layer("car"), Channel.RED, 1.0, (0, 200, 0))),
    Recipe(7, "part7", lambda s, c: c.chain(
        s.load_layer("car"), Adjustment(Channel.GREEN, 4.0), Adjustment(Channel.BLUE, 0.0),
    )),
    Recipe(8, "part8_r", _isolate(Channel.RED)),
    Recipe(8, "part8_g", _isolate(Channel.GREEN)),
    Recipe(8, "part8_b", _isolate(Channel.BLUE)),
    Recipe(9, "part9", lambda s, c: c.blend(
        BlendMode.ADD,
        c.blend(BlendMode.ADD, s.load_layer("layer_red"), s.load_layer("layer_blue")),
        s.load_layer("layer_green"),
    )),
    Recipe(10, "part10", lambda s, c: c.rotate_half_turn(s.load_layer("text2"))),
)


def find_recipes(names: Iterable[str]) -> List[Recipe]:
    """Отбирает рецепты по именам выходов; неизвестное имя — `KeyError`."""
    by_name = {r.output_name: r for r in RECIPES}
    missing = [n for n in names if n not in by_name]
    if missing:
        raise KeyError(f"Неизвестные рецепты: {', '.join(missing)}")
    return [by_name[n] for n in names]


class RecipeRunner:
    def __init__(
        self,
        layers: LayerStore,
        outputs: LayerStore,
        compositor: Optional[CompositorService] = None,
        references: Optional[LayerStore] = None,
    ) -> None:
        self.layers = layers
        self.outputs = outputs
        self.compositor = compositor or CompositorService()
        self.references = references

    def run(self, recipes: Iterable[Recipe] = RECIPES) -> List[RecipeResult]:
        """Выполняет рецепты; сбой одного не останавливает остальные."""
        results: List[RecipeResult] = []
        for recipe in recipes:
            result = self.run_one(recipe)
            if result.error is not None:
                logger.error("Task #%d (%s) failed: %s", recipe.number, recipe.output_name, result.error)
            elif result.comparison is not None:
                logger.info("Task #%d Test: %s", recipe.number, result.comparison.matches)
            else:
                logger.info("Task #%d written to %s", recipe.number, result.output_path)
            results.append(result)
        return results

    def run_one(self, recipe: Recipe) -> RecipeResult:
        try:
            image = recipe.build(self.layers, self.compositor)
            path = self.outputs.save_layer(recipe.output_name, image)
            comparison = self._compare(recipe, image)
        except (TgaLabError, OSError) as exc:
            return RecipeResult(recipe, error=f"{type(exc).__name__}: {exc}")
        return RecipeResult(recipe, output_path=str(path), comparison=comparison)

    def _compare(self, recipe: Recipe, image: RasterImage) -> Optional[Comparison]:
        if self.references is None:
            return None
        ref_path = self.references.path_for(REFERENCE_PREFIX + recipe.output_name)
        if not ref_path.is_file():
            logger.warning("No reference for %s at %s", recipe.output_name, ref_path)
            return None
        comparison = compare_bytes(encode_image(image), ref_path.read_bytes())
        if not comparison.matches:
            logger.debug("%s differs at byte %s", recipe.output_name, comparison.first_mismatch)
        return comparison
