#!/usr/bin/env python3

"""Export the objstore OpenAPI schema into a target directory."""

import argparse
import json
from pathlib import Path

from objstore.common.config import Settings
from objstore.main import create_app


def export_openapi(target_dir: Path, filename: str = "openapi.json") -> Path:
    """Generate the schema under target_dir and return the file path.

    The app is built from default settings; the schema does not depend on
    the storage root.
    """
    schema = create_app(Settings()).openapi()

    target_dir.mkdir(parents=True, exist_ok=True)
    output_path = target_dir / filename
    with output_path.open("w", encoding="utf-8") as fp:
        json.dump(schema, fp, ensure_ascii=False, indent=2)
        fp.write("\n")
    return output_path


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Export objstore OpenAPI spec to a directory."
    )
    parser.add_argument(
        "target_dir",
        type=Path,
        help="Directory where the schema will be written (created if missing).",
    )
    parser.add_argument(
        "--filename",
        default="openapi.json",
        help="Output file name (default: %(default)s).",
    )
    args = parser.parse_args()

    output_path = export_openapi(args.target_dir.resolve(), args.filename)
    print(f"OpenAPI schema exported to {output_path}")


if __name__ == "__main__":
    main()
