"""Object API router.

Uploads arrive as ``multipart/form-data`` on ``/upload``; objects are read
back from ``/{bucket}/{object}``. The read route is a catch-all and must be
registered after every other route of the application.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import FileResponse, PlainTextResponse
from starlette.concurrency import run_in_threadpool
from starlette.formparsers import MultiPartException

from objstore.api.v1.deps import get_app_settings, get_services
from objstore.api.v1.utils import (
    PayloadTooLargeError,
    extract_upload,
    limit_request_body,
)
from objstore.app.services.bundle import ServiceBundle
from objstore.app.services.object_reader import (
    InvalidObjectPathError,
    ObjectNotFoundError,
)
from objstore.app.services.object_writer import InvalidUploadError
from objstore.common.config import Settings
from objstore.infra.storage import InvalidObjectNameError, StorageError

UPLOAD_SUCCESS_MESSAGE = "File uploaded successfully."

router = APIRouter()
logger = logging.getLogger("http")


@router.post(
    "/upload",
    status_code=status.HTTP_201_CREATED,
    response_class=PlainTextResponse,
    summary="Upload object",
    description=(
        "Store the `file` part of a multipart form under `bucket`, named after "
        "the final segment of `path`. Existing objects are overwritten."
    ),
)
async def upload_object(
    request: Request,
    services: ServiceBundle = Depends(get_services),
    settings: Settings = Depends(get_app_settings),
) -> PlainTextResponse:
    try:
        limited = limit_request_body(request, settings.MAX_UPLOAD_SIZE)
        form = await limited.form()
    except PayloadTooLargeError as exc:
        logger.warning(
            "upload_rejected reason=payload_too_large limit=%s content_length=%s",
            exc.max_bytes,
            request.headers.get("Content-Length") or "-",
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "File too large", "error_code": "payload_too_large"},
        ) from exc
    except MultiPartException as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc

    try:
        source, bucket, path = extract_upload(form)
        stored = await run_in_threadpool(services.writer().store, bucket, path, source)
    except InvalidUploadError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except InvalidObjectNameError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    finally:
        await form.close()

    return PlainTextResponse(
        UPLOAD_SUCCESS_MESSAGE,
        status_code=status.HTTP_201_CREATED,
        headers={"Location": f"/{stored.bucket}/{stored.name}"},
    )


@router.api_route(
    "/upload",
    methods=["GET", "HEAD", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
def reject_upload_method() -> None:
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
        headers={"Allow": "POST"},
    )


@router.get(
    "/{request_path:path}",
    response_class=FileResponse,
    summary="Fetch object",
    description=(
        "Stream the object stored at `/{bucket}/{object}`. Segments after the "
        "object name are ignored. Range and conditional requests are honoured."
    ),
)
def fetch_object(
    request_path: str,
    services: ServiceBundle = Depends(get_services),
) -> FileResponse:
    try:
        path = services.reader().locate(request_path)
    except InvalidObjectPathError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except InvalidObjectNameError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ObjectNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return FileResponse(path)
