from __future__ import annotations

"""Parametric footprints -> closed 2D contours."""

import logging
import math

import numpy as np
from shapely.geometry import LinearRing

from ..config import SolidConfig

logger = logging.getLogger(__name__)

DEFAULT_CIRCLE_SEGMENTS = 48
DEFAULT_CAPSULE_SEGMENTS = 24


def rotate_translate(points, angle_deg: float, center) -> np.ndarray:
    # Rotate about the local origin, then move to center
    pts = np.asarray(points, dtype=float).reshape(-1, 2)
    rad = angle_deg * math.pi / 180.0
    cos_a = math.cos(rad)
    sin_a = math.sin(rad)
    rot = np.array([[cos_a, sin_a], [-sin_a, cos_a]])
    return pts @ rot + np.asarray(center, dtype=float)


class ProfileBuilder:
    """Collects the footprint contours of one extruded part."""

    def __init__(self, config: SolidConfig | None = None) -> None:
        self._config = config
        self._contours: list[np.ndarray] = []

    @property
    def contours(self) -> list[np.ndarray]:
        return list(self._contours)

    def __len__(self) -> int:
        return len(self._contours)

    def clear(self) -> None:
        self._contours = []

    def add_rectangle(self, center, width: float, height: float, angle: float = 0.0) -> np.ndarray:
        w = width * 0.5
        h = height * 0.5
        local = [(-w, -h), (w, -h), (w, h), (-w, h)]
        return self._append(rotate_translate(local, angle, center))

    def add_circle(self, center, diameter: float, segments: int | None = None) -> np.ndarray:
        segments = self._segments(segments, "circle_segments", DEFAULT_CIRCLE_SEGMENTS)
        r = diameter / 2.0
        th = 2.0 * np.pi * np.arange(max(segments, 0)) / max(segments, 1)
        local = np.column_stack((r * np.cos(th), r * np.sin(th)))
        return self._append(local + np.asarray(center, dtype=float))

    def add_capsule(
        self,
        center,
        width: float,
        length: float,
        angle: float = 0.0,
        segments: int | None = None,
    ) -> np.ndarray:
        # Two half circles joined by straight sides, long axis along local x
        segments = self._segments(segments, "capsule_segments", DEFAULT_CAPSULE_SEGMENTS)
        r = width / 2.0
        ofs_x = 0.0 if length < width else (length - width) / 2.0
        steps = np.pi * np.arange(max(segments, 0)) / max(segments, 1)
        right = np.column_stack((r * np.cos(steps - np.pi / 2) + ofs_x, r * np.sin(steps - np.pi / 2)))
        left = np.column_stack((r * np.cos(steps + np.pi / 2) - ofs_x, r * np.sin(steps + np.pi / 2)))
        return self._append(rotate_translate(np.vstack((right, left)), angle, center))

    def add_polygon(self, points, center=(0.0, 0.0), angle: float = 0.0) -> np.ndarray:
        """Add a caller-supplied outline, normalized to counter-clockwise."""
        loop: list[tuple[float, float]] = []
        for pt in points:
            xy = (float(pt[0]), float(pt[1]))
            if loop and loop[-1] == xy:
                continue
            loop.append(xy)
        if len(loop) > 1 and loop[0] == loop[-1]:
            loop.pop()
        if len(loop) >= 3 and not LinearRing(loop).is_ccw:
            loop.reverse()
        return self._append(rotate_translate(loop, angle, center))

    def extrude(self, bottom: float, height: float, name: str = "", color=None):
        from ..pipeline.extrude import extrude

        return extrude(self._contours, bottom, height, name=name, color=color)

    def _segments(self, segments: int | None, field: str, default: int) -> int:
        if segments is not None:
            return int(segments)
        if self._config is not None:
            return int(getattr(self._config, field))
        return default

    def _append(self, contour: np.ndarray) -> np.ndarray:
        if len(contour) < 3:
            logger.debug("Degenerate contour with %s points kept as empty", len(contour))
        self._contours.append(contour)
        return contour
