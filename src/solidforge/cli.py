from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from .config import SolidConfig
from .pipeline import generate_model


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Extrude a JSON footprint scene into an OBJ or STL mesh.")
    parser.add_argument("scene", type=Path, help="Scene description (.json)")
    parser.add_argument("output", type=Path, help="Output mesh path")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to solidforge.json config",
    )
    parser.add_argument("--format", choices=["obj", "stl"], default=None, help="Override output_format")
    parser.add_argument("--verbose", action="store_true", help="Log kernel debug output")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    project_root = Path.cwd()
    try:
        if args.config is not None:
            config = SolidConfig.from_json(args.config)
        else:
            config = SolidConfig.load_default(project_root)
        generate_model(args.scene, args.output, config, args.format)
    except (ValueError, OSError) as exc:
        print(f"solidforge: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
