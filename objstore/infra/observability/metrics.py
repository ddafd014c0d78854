from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.responses import Response

# 低基数标签：使用路由模板（如 /upload、/{request_path:path}），避免对象路径导致高基数
REQUESTS = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "route", "status"],
)

LATENCY = Histogram(
    "http_request_duration_seconds",
    "Request latency in seconds",
    ["method", "route"],
)

UPLOADS = Counter(
    "objstore_uploads_total",
    "Object uploads by outcome",
    ["outcome"],
)

UPLOADED_BYTES = Counter(
    "objstore_uploaded_bytes_total",
    "Bytes committed to the storage root",
)


# /metrics 端点：以精确路由注册，避免被对象兜底路由吞掉
def metrics_response() -> Response:
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
