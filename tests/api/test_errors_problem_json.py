def test_http_exception_problem_json(client, storage_root):
    # missing object -> 404 with RFC7807 body
    r = client.get("/bucket/missing", headers={"X-Request-Id": "rid-1"})
    assert r.status_code == 404
    assert r.headers.get("content-type", "").startswith("application/problem+json")
    body = r.json()
    for key in ("type", "title", "status", "detail", "instance", "error_code"):
        assert key in body
    assert body["status"] == 404
    assert body["error_code"] == "not_found"
    assert body["request_id"] == "rid-1"
    assert body["instance"].endswith("/bucket/missing")


def test_routing_405_uses_problem_json(client):
    r = client.delete("/bucket/object")
    assert r.status_code == 405
    assert r.headers.get("content-type", "").startswith("application/problem+json")
    assert r.json()["error_code"] == "method_not_allowed"
    assert "GET" in r.headers["allow"]


def test_error_code_override_from_detail(client, storage_root):
    r = client.post(
        "/upload",
        files={"file": ("a.bin", b"x" * (5 * 1024 * 1024 + 1), "text/plain")},
        data={"bucket": "b", "path": "a.bin"},
    )
    assert r.status_code == 400
    body = r.json()
    assert body["error_code"] == "payload_too_large"
    assert body["detail"] == "File too large"
