from __future__ import annotations

"""JSON scene description: named parts, each a stack of footprint shapes."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from shapely.geometry import LinearRing

from .config import SolidConfig
from .geometry.errors import ContourError
from .geometry.primitives import ProfileBuilder

logger = logging.getLogger(__name__)

_REQUIRED_KEYS = {
    "rectangle": ("center", "width", "height"),
    "circle": ("center", "diameter"),
    "capsule": ("center", "width", "length"),
    "polygon": ("points",),
}


@dataclass(frozen=True)
class PartSpec:
    name: str
    bottom: float
    height: float
    color: tuple[float, ...] | None
    shapes: tuple[dict, ...]


@dataclass(frozen=True)
class Scene:
    parts: tuple[PartSpec, ...]


def load_scene(path: Path) -> Scene:
    logger.info("Loading scene: %s", path)
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return scene_from_dict(data)


def scene_from_dict(data: dict) -> Scene:
    raw_parts = data.get("parts")
    if not isinstance(raw_parts, list) or not raw_parts:
        raise ValueError("scene must define a non-empty 'parts' list")
    parts = []
    for i, raw in enumerate(raw_parts):
        name = str(raw.get("name", f"part{i}"))
        if "height" not in raw:
            raise ValueError(f"part '{name}' is missing 'height'")
        shapes = raw.get("shapes", [])
        for shape in shapes:
            _check_shape(name, shape)
        color = raw.get("color")
        parts.append(
            PartSpec(
                name=name,
                bottom=float(raw.get("bottom", 0.0)),
                height=float(raw["height"]),
                color=tuple(float(c) for c in color) if color is not None else None,
                shapes=tuple(shapes),
            )
        )
    return Scene(parts=tuple(parts))


def build_part(part: PartSpec, config: SolidConfig) -> ProfileBuilder:
    builder = ProfileBuilder(config)
    for shape in part.shapes:
        kind = shape["type"]
        center = shape.get("center", (0.0, 0.0))
        angle = float(shape.get("angle", 0.0))
        if kind == "rectangle":
            builder.add_rectangle(center, float(shape["width"]), float(shape["height"]), angle)
        elif kind == "circle":
            builder.add_circle(center, float(shape["diameter"]), shape.get("segments"))
        elif kind == "capsule":
            builder.add_capsule(
                center,
                float(shape["width"]),
                float(shape["length"]),
                angle,
                shape.get("segments"),
            )
        else:
            builder.add_polygon(shape["points"], center, angle)
    if config.check_simple_contours:
        check_simple_contours(builder.contours, part.name)
    logger.info("Part '%s': shapes=%s", part.name, len(part.shapes))
    return builder


def check_simple_contours(contours, label: str = "") -> None:
    for i, contour in enumerate(contours):
        if len(contour) < 3 or LinearRing(contour).convex_hull.area == 0:
            continue
        if not LinearRing(contour).is_simple:
            raise ContourError(f"part '{label}': contour {i} is self-intersecting")


def _check_shape(part_name: str, shape: dict) -> None:
    kind = shape.get("type")
    required = _REQUIRED_KEYS.get(kind)
    if required is None:
        supported = ", ".join(sorted(_REQUIRED_KEYS))
        raise ValueError(f"part '{part_name}': unknown shape type '{kind}'. Supported: {supported}")
    missing = [key for key in required if key not in shape]
    if missing:
        raise ValueError(f"part '{part_name}': {kind} is missing {', '.join(missing)}")
