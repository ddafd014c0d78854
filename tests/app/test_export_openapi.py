"""测试 OpenAPI 导出脚本。"""

from __future__ import annotations

import json

from scripts.export_openapi import export_openapi


def test_export_writes_object_routes(tmp_path) -> None:
    """导出的 schema 应包含上传与读取路由。"""
    output = export_openapi(tmp_path / "out")

    assert output == tmp_path / "out" / "openapi.json"
    schema = json.loads(output.read_text(encoding="utf-8"))
    assert "post" in schema["paths"]["/upload"]
    assert "get" in schema["paths"]["/{request_path}"]
    assert "/metrics" not in schema["paths"]
