from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable


@dataclass(frozen=True)
class SolidConfig:
    circle_segments: int
    capsule_segments: int
    output_format: str
    obj_precision: int
    default_color: tuple[float, ...]
    check_simple_contours: bool
    translate_to_origin: bool
    validate_export: bool

    @staticmethod
    def default_path(project_root: Path) -> Path:
        return _user_config_dir() / "solidforge.json"

    @staticmethod
    def load_default(project_root: Path) -> "SolidConfig":
        user_path = SolidConfig.default_path(project_root)
        if user_path.exists():
            return SolidConfig.from_json(user_path)
        bundled_path = project_root / "config" / "solidforge.json"
        if bundled_path.exists():
            return SolidConfig.from_json(bundled_path)
        return SolidConfig.from_dict({})

    @staticmethod
    def from_json(path: Path) -> "SolidConfig":
        data = json.loads(path.read_text(encoding="utf-8"))
        return SolidConfig.from_dict(data)

    @staticmethod
    def from_dict(data: dict) -> "SolidConfig":
        circle_segments = int(data.get("circle_segments", 48))
        capsule_segments = int(data.get("capsule_segments", 24))
        output_format = str(data.get("output_format", "obj")).lower()
        obj_precision = int(data.get("obj_precision", 3))
        default_color = _ensure_floats(data.get("default_color", (0.0, 1.0, 0.0)))
        check_simple_contours = bool(data.get("check_simple_contours", True))
        translate_to_origin = bool(data.get("translate_to_origin", False))
        validate_export = bool(data.get("validate_export", True))
        return SolidConfig(
            circle_segments=circle_segments,
            capsule_segments=capsule_segments,
            output_format=output_format,
            obj_precision=obj_precision,
            default_color=default_color,
            check_simple_contours=check_simple_contours,
            translate_to_origin=translate_to_origin,
            validate_export=validate_export,
        )

    def validate(self) -> None:
        if self.circle_segments < 3:
            raise ValueError("circle_segments must be >= 3")
        if self.capsule_segments < 2:
            raise ValueError("capsule_segments must be >= 2")
        if self.output_format not in {"obj", "stl"}:
            raise ValueError("output_format must be obj or stl")
        if not 0 <= self.obj_precision <= 17:
            raise ValueError("obj_precision must be in [0, 17]")
        if len(self.default_color) not in (3, 4):
            raise ValueError("default_color must have 3 or 4 channels")
        if any(not 0.0 <= c <= 1.0 for c in self.default_color):
            raise ValueError("default_color channels must be in [0, 1]")


def _ensure_floats(value: Iterable[float] | float | None) -> tuple[float, ...]:
    if value is None:
        return ()
    if isinstance(value, (int, float)):
        return (float(value),)
    return tuple(float(v) for v in value)


def _user_config_dir() -> Path:
    if os.name == "nt":
        base = os.environ.get("APPDATA") or os.environ.get("USERPROFILE")
        if base:
            return Path(base) / "SolidForge"
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / "solidforge"
    return Path.home() / ".config" / "solidforge"
