import logging

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from objstore.api.v1.deps import require_api_key
from objstore.api.v1.routers.objects import router as objects_router
from objstore.app.services.bundle import get_service_bundle
from objstore.common.config import Settings, get_settings
from objstore.common.logging import setup_logging
from objstore.infra.observability.metrics import metrics_response
from objstore.infra.observability.middleware import MetricsMiddleware
from objstore.infra.storage import StorageRootResolver

ERROR_CODE_BY_STATUS = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    413: "payload_too_large",
    500: "internal_error",
    503: "service_unavailable",
}


def _normalize_detail(detail):
    if isinstance(detail, dict):
        maybe_code = detail.get("error_code")
        cleaned = {k: v for k, v in detail.items() if k != "error_code"}
        if len(cleaned) == 1 and "message" in cleaned:
            cleaned = cleaned["message"]
        if not cleaned:
            cleaned = None
        return cleaned, maybe_code if isinstance(maybe_code, str) else None
    return detail, None


def _resolve_error_code(status_code: int, override: str | None = None) -> str:
    if override:
        return override
    if status_code == 422:
        return "validation_error"
    return ERROR_CODE_BY_STATUS.get(status_code, "unknown_error")


def _describe_storage_root(settings: Settings) -> str:
    root = settings.storage_root
    return (
        f"storage_dir={root}, resolved={root.resolve()}, "
        f"max_upload_size={settings.MAX_UPLOAD_SIZE}"
    )


def _check_storage_root(settings: Settings) -> None:
    startup_logger = logging.getLogger("objstore.startup")
    context_text = _describe_storage_root(settings)
    if not settings.storage_root.is_dir():
        startup_logger.error(
            "存储目录不存在，应用启动中断，请先创建目录或使用 --create-storage-dir。"
            " [event=storage_root_missing] (%s)",
            context_text,
        )
        raise RuntimeError(f"Storage directory '{settings.STORAGE_DIR}' does not exist")
    startup_logger.info(
        "存储目录检查通过，应用继续启动。 [event=storage_root_ready] (%s)",
        context_text,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging()
    app = FastAPI(
        title="objstore",
        version="v1.0",
        description="Minimal bucket/object store backed by a local directory",
    )
    app.state.settings = settings
    app.state.resolver = StorageRootResolver(settings.storage_root)
    app.state.services = get_service_bundle(app.state.resolver)

    # Optional CORS
    if settings.CORS_ENABLED:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS or ["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    # Metrics
    if settings.ENABLE_METRICS:
        app.add_middleware(MetricsMiddleware)
        app.add_api_route("/metrics", metrics_response, include_in_schema=False)

    # 对象路由包含兜底的 GET 路由，必须最后注册
    app.include_router(
        objects_router,
        tags=["objects"],
        dependencies=[Depends(require_api_key)],
    )

    @app.on_event("startup")
    def on_startup() -> None:
        _check_storage_root(settings)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger = logging.getLogger("http")
        normalized_detail, code_override = _normalize_detail(exc.detail)
        log_extra = {
            "status": exc.status_code,
            "detail": normalized_detail,
            "method": request.method,
            "route": request.url.path,
            "request_id": request.headers.get("X-Request-Id"),
        }
        if exc.__cause__ is not None:
            log_extra["cause"] = repr(exc.__cause__)
        logger.log(
            logging.WARNING if exc.status_code < 500 else logging.ERROR,
            "http_exception status=%s detail=%s method=%s path=%s request_id=%s",
            exc.status_code,
            normalized_detail,
            request.method,
            request.url.path,
            request.headers.get("X-Request-Id"),
            extra={"extra": log_extra},
        )
        return JSONResponse(
            status_code=exc.status_code,
            media_type="application/problem+json",
            headers=getattr(exc, "headers", None),
            content={
                "type": "about:blank",
                "title": "HTTP Error",
                "status": exc.status_code,
                "detail": normalized_detail,
                "error_code": _resolve_error_code(exc.status_code, code_override),
                "instance": str(request.url),
                "request_id": request.headers.get("X-Request-Id"),
            },
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        return JSONResponse(
            status_code=422,
            media_type="application/problem+json",
            content={
                "type": "about:blank",
                "title": "Validation Error",
                "status": 422,
                # 确保可序列化
                "detail": jsonable_encoder(exc.errors()),
                "error_code": _resolve_error_code(422),
                "instance": str(request.url),
                "request_id": request.headers.get("X-Request-Id"),
            },
        )

    return app
