"""Storage Routes — single and batch image uploads and bucket setup.

Invariants:
    - Only images within the size limit reach storage
    - Batch uploads report per-file errors and fail only when nothing was stored
    - Setup creates the default bucket once
"""

import re

from travel_map.core.upload_rules import MAX_SINGLE_FILE_BYTES

PNG = ("photo.png", b"\x89PNG fake image", "image/png")


async def test_upload_requires_session(client):
    res = await client.post("/api/v1/storage/upload", files={"file": PNG})
    assert res.status_code == 401


async def test_upload_single(client, storage_backend, alice):
    res = await client.post(
        "/api/v1/storage/upload", files={"file": PNG}, headers=alice,
    )
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["bucket"] == "visit-images"
    assert re.fullmatch(r"[0-9a-f]{32}\.png", data["path"])
    assert data["url"] == data["publicUrl"]
    assert data["url"].endswith(f"/storage/v1/object/public/visit-images/{data['path']}")

    method, path, body = storage_backend["requests"][0]
    assert method == "POST"
    assert path == f"/storage/v1/object/visit-images/{data['path']}"
    assert body == PNG[1]


async def test_upload_custom_path_and_bucket(client, alice):
    res = await client.post(
        "/api/v1/storage/upload",
        files={"file": PNG},
        data={"bucket": "avatars", "path": "alice/avatar.png"},
        headers=alice,
    )
    data = res.json()["data"]
    assert data["bucket"] == "avatars"
    assert data["path"] == "alice/avatar.png"


async def test_upload_rejects_unknown_bucket(client, alice):
    res = await client.post(
        "/api/v1/storage/upload", files={"file": PNG}, data={"bucket": "secrets"},
        headers=alice,
    )
    assert res.status_code == 400


async def test_upload_rejects_non_image(client, storage_backend, alice):
    res = await client.post(
        "/api/v1/storage/upload",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=alice,
    )
    assert res.status_code == 400
    assert storage_backend["requests"] == []


async def test_upload_rejects_oversized_image(client, alice):
    big = ("big.jpg", b"x" * (MAX_SINGLE_FILE_BYTES + 1), "image/jpeg")
    res = await client.post(
        "/api/v1/storage/upload", files={"file": big}, headers=alice,
    )
    assert res.status_code == 400
    assert "5MB" in res.json()["error"]["message"]


async def test_upload_multiple_collects_errors(client, alice):
    files = [
        ("files", ("a.png", b"a", "image/png")),
        ("files", ("b.txt", b"b", "text/plain")),
        ("files", ("c.jpg", b"c", "image/jpeg")),
    ]
    res = await client.post(
        "/api/v1/storage/upload-multiple", files=files, headers=alice,
    )
    assert res.status_code == 200
    body = res.json()
    assert body["uploadedCount"] == 2
    assert body["totalCount"] == 3
    assert body["errors"] == ["file 2: not a valid image format"]
    assert [r["index"] for r in body["results"]] == [0, 2]
    for result in body["results"]:
        assert re.fullmatch(
            r"alice@example\.com/\d+_[a-z0-9]{11}\.(png|jpg)", result["path"],
        )
    assert body["urls"] == [r["url"] for r in body["results"]]


async def test_upload_multiple_reports_storage_failures(client, storage_backend, alice):
    storage_backend["fail_paths"].append(".jpg")
    files = [
        ("files", ("a.png", b"a", "image/png")),
        ("files", ("c.jpg", b"c", "image/jpeg")),
    ]
    res = await client.post(
        "/api/v1/storage/upload-multiple", files=files, headers=alice,
    )
    body = res.json()
    assert body["uploadedCount"] == 1
    assert body["errors"] == ["file 2: The resource already exists"]


async def test_upload_multiple_all_failing_is_500(client, alice):
    files = [("files", ("a.txt", b"a", "text/plain"))]
    res = await client.post(
        "/api/v1/storage/upload-multiple", files=files, headers=alice,
    )
    assert res.status_code == 500
    error = res.json()["error"]
    assert error["code"] == "STORAGE_ERROR"
    assert error["details"] == ["file 1: not a valid image format"]


async def test_upload_multiple_caps_file_count(client, alice):
    files = [("files", (f"{i}.png", b"x", "image/png")) for i in range(11)]
    res = await client.post(
        "/api/v1/storage/upload-multiple", files=files, headers=alice,
    )
    assert res.status_code == 400


async def test_setup_creates_bucket_once(client, storage_backend, alice):
    first = await client.post("/api/v1/storage/setup", headers=alice)
    second = await client.post("/api/v1/storage/setup", headers=alice)
    assert first.json() == {"success": True, "created": True}
    assert second.json() == {"success": True, "created": False}
    creates = [r for r in storage_backend["requests"] if r[0] == "POST"]
    assert len(creates) == 1
