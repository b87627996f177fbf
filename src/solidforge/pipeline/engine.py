from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import time
from typing import Protocol

import trimesh

from ..config import SolidConfig
from .mesh import Mesh, mesh_stats
from .objfile import format_mtl, format_obj, load_mtl, load_obj

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineExportInput:
    mesh: Mesh
    output_path: Path
    config: SolidConfig


class ModelEngine(Protocol):
    name: str

    def export(self, data: EngineExportInput) -> list[Path]:
        ...


class ObjEngine:
    name = "obj"

    def export(self, data: EngineExportInput) -> list[Path]:
        cfg = data.config
        obj_path = data.output_path
        mtl_path = obj_path.with_suffix(".mtl")
        obj_path.parent.mkdir(parents=True, exist_ok=True)

        t0 = time.perf_counter()
        obj_text = format_obj(data.mesh, mtl_path.name, cfg.obj_precision)
        mtl_text = format_mtl(data.mesh.materials)
        obj_path.write_text(obj_text, encoding="utf-8")
        mtl_path.write_text(mtl_text, encoding="utf-8")
        logger.info("OBJ export write in %.3fs", time.perf_counter() - t0)
        logger.info("OBJ size: %s bytes, MTL size: %s bytes", obj_path.stat().st_size, mtl_path.stat().st_size)

        if cfg.validate_export:
            try:
                check = load_obj(
                    obj_path.read_text(encoding="utf-8"),
                    load_mtl(mtl_path.read_text(encoding="utf-8")),
                )
            except ValueError as exc:
                raise ValueError(f"Failed to validate exported OBJ: {exc}") from exc
            logger.info("OBJ check: faces=%s groups=%s", len(check.faces), len(check.groups))
            expected = sum(g.count for g in data.mesh.groups if g.visible)
            if len(check.faces) != expected:
                raise ValueError(f"Exported OBJ has {len(check.faces)} faces, expected {expected}.")
        logger.info("OBJ export complete")
        return [obj_path, mtl_path]


class StlEngine:
    name = "stl"

    def export(self, data: EngineExportInput) -> list[Path]:
        cfg = data.config
        if data.mesh.is_empty:
            raise ValueError("Generated mesh is empty; check footprint contours.")
        data.output_path.parent.mkdir(parents=True, exist_ok=True)

        mesh = data.mesh.to_trimesh()
        t0 = time.perf_counter()
        mesh.export(data.output_path, file_type="stl")
        logger.info("STL export write (binary) in %.3fs", time.perf_counter() - t0)

        try:
            size = data.output_path.stat().st_size
        except OSError:
            size = 0
        logger.info("STL size: %s bytes", size)
        if size <= 0:
            raise ValueError("Exported STL file is empty.")

        if cfg.validate_export:
            try:
                t0 = time.perf_counter()
                check_mesh = trimesh.load_mesh(data.output_path, force="mesh")
                faces = getattr(check_mesh, "faces", None)
                face_count = int(faces.shape[0]) if faces is not None else 0
                logger.info("STL reload check in %.3fs", time.perf_counter() - t0)
                logger.info("STL check: faces=%s", face_count)
                if face_count == 0:
                    raise ValueError("Exported STL has no faces; check geometry.")
            except Exception as exc:
                raise ValueError(f"Failed to validate exported STL: {exc}") from exc

        logger.info("STL export complete")
        return [data.output_path]


_ENGINES: dict[str, ModelEngine] = {
    "obj": ObjEngine(),
    "stl": StlEngine(),
}


def get_model_engine(name: str) -> ModelEngine:
    key = (name or "").strip().lower()
    engine = _ENGINES.get(key)
    if engine is None:
        supported = ", ".join(sorted(_ENGINES.keys()))
        raise ValueError(f"Unsupported output format '{name}'. Supported: {supported}")
    return engine


def export_mesh(mesh: Mesh, output_path: Path, config: SolidConfig, output_format: str | None = None) -> list[Path]:
    engine = get_model_engine(output_format or config.output_format)
    if not mesh.is_empty:
        mesh_stats(mesh)
    return engine.export(EngineExportInput(mesh=mesh, output_path=output_path, config=config))
