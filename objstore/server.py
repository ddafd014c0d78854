#!/usr/bin/env python3

"""Command-line entry point: pre-flight the storage root and serve the API."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Sequence

import uvicorn

from objstore.common.config import Settings, get_settings
from objstore.common.logging import setup_logging
from objstore.main import create_app

startup_logger = logging.getLogger("objstore.startup")


class StorageRootMissingError(RuntimeError):
    """Raised when the storage root is absent and creation was not requested."""


def prepare_storage_root(path: Path, *, create: bool) -> Path:
    """Ensure the storage root exists before the server accepts requests.

    Never prompts: either the directory exists, ``create`` allows making it,
    or startup fails.
    """
    if path.is_dir():
        return path
    if path.exists():
        raise StorageRootMissingError(f"Storage path '{path}' is not a directory")
    if not create:
        raise StorageRootMissingError(
            f"Storage directory '{path}' does not exist; "
            "create it or pass --create-storage-dir"
        )
    path.mkdir(mode=0o755, parents=True, exist_ok=True)
    startup_logger.info(
        "已创建存储目录。 [event=storage_root_created] (storage_dir=%s)", path
    )
    return path


def build_parser(defaults: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Serve a minimal bucket/object store from a local directory."
    )
    parser.add_argument(
        "--host", default=defaults.HOST, help="Interface to bind (default: %(default)s)."
    )
    parser.add_argument(
        "--port",
        type=int,
        default=defaults.PORT,
        help="Port number to listen on (default: %(default)s).",
    )
    parser.add_argument(
        "--storage-dir",
        default=defaults.STORAGE_DIR,
        help="Storage directory for uploaded files (default: %(default)s).",
    )
    parser.add_argument(
        "--max-upload-size",
        type=int,
        default=defaults.MAX_UPLOAD_SIZE,
        help="Upload body ceiling in bytes (default: %(default)s).",
    )
    parser.add_argument(
        "--cert-file", default=defaults.TLS_CERT_FILE, help="Path to TLS certificate."
    )
    parser.add_argument(
        "--key-file", default=defaults.TLS_KEY_FILE, help="Path to TLS private key."
    )
    parser.add_argument(
        "--create-storage-dir",
        action="store_true",
        help="Create the storage directory if it does not exist.",
    )
    return parser


def settings_from_args(args: argparse.Namespace, defaults: Settings) -> Settings:
    return dataclasses.replace(
        defaults,
        HOST=args.host,
        PORT=args.port,
        STORAGE_DIR=args.storage_dir,
        MAX_UPLOAD_SIZE=args.max_upload_size,
        TLS_CERT_FILE=args.cert_file or None,
        TLS_KEY_FILE=args.key_file or None,
    )


def main(argv: Sequence[str] | None = None) -> int:
    setup_logging()
    defaults = get_settings()
    parser = build_parser(defaults)
    args = parser.parse_args(argv)

    try:
        settings = settings_from_args(args, defaults)
    except ValueError as exc:
        parser.error(str(exc))

    try:
        prepare_storage_root(settings.storage_root, create=args.create_storage_dir)
    except (StorageRootMissingError, OSError) as exc:
        startup_logger.error(
            "存储目录不可用，服务未启动。 [event=storage_root_unavailable] (error=%s)",
            exc,
        )
        return 1

    app = create_app(settings)
    ssl_options: dict[str, str] = {}
    if settings.tls_enabled:
        ssl_options = {
            "ssl_certfile": settings.TLS_CERT_FILE,
            "ssl_keyfile": settings.TLS_KEY_FILE,
        }
    startup_logger.info(
        "服务启动。 [event=server_starting] (host=%s, port=%s, tls=%s, storage_dir=%s)",
        settings.HOST,
        settings.PORT,
        settings.tls_enabled,
        settings.STORAGE_DIR,
    )
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, **ssl_options)
    return 0


if __name__ == "__main__":
    sys.exit(main())
