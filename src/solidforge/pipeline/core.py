from __future__ import annotations

from pathlib import Path
import logging
import time

from ..config import SolidConfig
from ..scene import Scene, build_part, load_scene
from .engine import export_mesh
from .extrude import extrude
from .mesh import Color, Mesh, merge_meshes, translate_to_origin

logger = logging.getLogger(__name__)


def build_scene(scene: Scene, config: SolidConfig) -> Mesh:
    meshes = []
    for part in scene.parts:
        # Each part becomes one extruded solid with its own group
        builder = build_part(part, config)
        color = Color.from_value(part.color if part.color is not None else config.default_color)
        t0 = time.perf_counter()
        mesh = extrude(builder.contours, part.bottom, part.height, name=part.name, color=color)
        logger.info("Part '%s' extrusion in %.3fs", part.name, time.perf_counter() - t0)
        meshes.append(mesh)
    return merge_meshes(meshes)


def generate_model(scene_path: Path, output_path: Path, config: SolidConfig, output_format: str | None = None) -> Mesh:
    # Scene file -> footprints -> extruded parts -> merged mesh -> file
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
    config.validate()
    logger.info("Generating model from %s", scene_path)
    logger.info("Output: %s", output_path)

    scene = load_scene(scene_path)
    mesh = build_scene(scene, config)
    if mesh.is_empty:
        raise ValueError("Scene produced an empty mesh; check part shapes.")
    logger.info("Merged mesh: parts=%s vertices=%s faces=%s", len(scene.parts), len(mesh.vertices), len(mesh.faces))

    if config.translate_to_origin:
        mesh = translate_to_origin(mesh)
    written = export_mesh(mesh, output_path, config, output_format)
    logger.info("Wrote %s", ", ".join(p.name for p in written))
    return mesh
