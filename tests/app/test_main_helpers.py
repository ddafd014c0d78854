"""测试 objstore/main.py 中的辅助函数。"""

from __future__ import annotations

import runpy
from unittest.mock import patch

import pytest

from objstore.common.config import Settings
from objstore.main import (
    _check_storage_root,
    _describe_storage_root,
    _normalize_detail,
    _resolve_error_code,
)


class TestNormalizeDetail:
    """测试 _normalize_detail 函数。"""

    def test_unwraps_message_and_extracts_error_code(self) -> None:
        """包含 message 和 error_code 的字典应该正确解包。"""
        detail, code = _normalize_detail(
            {"message": "File too large", "error_code": "payload_too_large"}
        )
        assert detail == "File too large"
        assert code == "payload_too_large"

    def test_strips_error_code_and_handles_empty(self) -> None:
        """只有 error_code 的字典应该返回 None detail。"""
        detail, code = _normalize_detail({"error_code": "custom"})
        assert detail is None
        assert code == "custom"

    def test_ignores_non_string_error_code(self) -> None:
        """非字符串的 error_code 应该被忽略。"""
        detail, code = _normalize_detail({"message": "x", "error_code": 123})
        assert detail == "x"
        assert code is None

    def test_returns_string_detail_as_is(self) -> None:
        """字符串 detail 应该原样返回。"""
        detail, code = _normalize_detail("Invalid request")
        assert detail == "Invalid request"
        assert code is None


class TestResolveErrorCode:
    """测试 _resolve_error_code 函数。"""

    def test_returns_override_when_provided(self) -> None:
        """提供 override 时应该返回 override。"""
        assert _resolve_error_code(400, override="payload_too_large") == (
            "payload_too_large"
        )

    def test_returns_mapped_code_for_known_status(self) -> None:
        """已知状态码应该返回对应的错误码。"""
        assert _resolve_error_code(400) == "bad_request"
        assert _resolve_error_code(404) == "not_found"
        assert _resolve_error_code(405) == "method_not_allowed"
        assert _resolve_error_code(500) == "internal_error"
        assert _resolve_error_code(422) == "validation_error"

    def test_returns_unknown_error_for_unmapped_status(self) -> None:
        """未知状态码应该返回 unknown_error。"""
        assert _resolve_error_code(418) == "unknown_error"


class TestStorageRootCheck:
    """测试存储目录启动检查。"""

    def test_describe_storage_root(self, storage_root) -> None:
        """上下文字符串应包含目录与上传上限。"""
        text = _describe_storage_root(
            Settings(STORAGE_DIR=str(storage_root), MAX_UPLOAD_SIZE=42)
        )
        assert f"storage_dir={storage_root}" in text
        assert "max_upload_size=42" in text

    def test_existing_root_passes(self, storage_root) -> None:
        """目录存在时检查通过。"""
        _check_storage_root(Settings(STORAGE_DIR=str(storage_root)))

    def test_missing_root_fails_fast(self, tmp_path) -> None:
        """目录不存在时应抛出异常且不创建目录。"""
        missing = tmp_path / "absent"
        with pytest.raises(RuntimeError, match="does not exist"):
            _check_storage_root(Settings(STORAGE_DIR=str(missing)))
        assert not missing.exists()


class TestModuleEntryPoint:
    """测试 objstore.main 不再自带启动入口。"""

    def test_runs_only_through_server_entry_point(self) -> None:
        """服务只能通过 objstore.server:main 启动，以保证预检查生效。"""
        with patch("uvicorn.run") as run:
            runpy.run_module("objstore.main", run_name="__main__")

        run.assert_not_called()
