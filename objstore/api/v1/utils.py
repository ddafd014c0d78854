from __future__ import annotations

from typing import BinaryIO

from starlette.datastructures import FormData, UploadFile
from starlette.formparsers import MultiPartException
from starlette.requests import Request
from starlette.types import Message

from objstore.app.services.object_writer import InvalidUploadError


class PayloadTooLargeError(MultiPartException):
    """Raised when an upload body exceeds the configured ceiling.

    Deriving from ``MultiPartException`` lets Starlette's multipart parser
    close the part files it has already spooled when the body is cut off.
    """

    def __init__(self, max_bytes: int) -> None:
        super().__init__(f"File too large (limit {max_bytes} bytes)")
        self.max_bytes = max_bytes


def limit_request_body(request: Request, max_bytes: int) -> Request:
    """Return a view of ``request`` whose body may not exceed ``max_bytes``.

    A declared ``Content-Length`` above the ceiling fails immediately, before
    any byte is read. Otherwise the body is counted while it streams in and
    reading stops with :class:`PayloadTooLargeError` once the ceiling is
    crossed, so an oversized body is never buffered in full.

    The returned request carries no ``app`` in its scope. Starlette then lets
    parser errors propagate from ``form()`` as ``MultiPartException`` instead
    of turning them into a generic 400, and callers map them themselves.
    """
    declared = request.headers.get("content-length")
    if declared is not None and declared.isdigit() and int(declared) > max_bytes:
        raise PayloadTooLargeError(max_bytes)

    receive = request.receive
    received = 0

    async def limited_receive() -> Message:
        nonlocal received
        message = await receive()
        if message["type"] == "http.request":
            received += len(message.get("body", b""))
            if received > max_bytes:
                raise PayloadTooLargeError(max_bytes)
        return message

    scope = {key: value for key, value in request.scope.items() if key != "app"}
    return Request(scope, limited_receive)


def extract_upload(form: FormData) -> tuple[BinaryIO, str, str]:
    """Pull ``(file, bucket, path)`` out of a parsed upload form."""
    upload = form.get("file")
    if not isinstance(upload, UploadFile):
        raise InvalidUploadError("Invalid file")

    bucket = form.get("bucket")
    path = form.get("path")
    return (
        upload.file,
        bucket if isinstance(bucket, str) else "",
        path if isinstance(path, str) else "",
    )
