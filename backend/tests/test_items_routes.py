"""Test item endpoints — info, content streaming, error mapping."""

import json
import os
import sys

import pytest
from httpx import AsyncClient


@pytest.fixture
def doc(content_root):
    sub = content_root / "sub"
    sub.mkdir()
    f = sub / "doc.txt"
    f.write_bytes(b"payload bytes")
    os.utime(f, (1_700_000_000, 1_700_000_000))
    return f


class TestInfo:
    @pytest.mark.asyncio
    async def test_info(self, client: AsyncClient, doc):
        resp = await client.get("/api/items/info", params={"path": "sub/doc.txt"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["id"] == str(doc)
        assert data["name"] == "sub/doc.txt"
        assert data["url"].startswith("file://")
        assert data["size"] == 13
        assert data["etag"] != ""
        assert data["last_modified"].startswith("2023-11-14T22:13:20")
        assert data["metadata"]["name"] == "doc.txt"
        assert "user_data" not in data["metadata"]

    @pytest.mark.asyncio
    async def test_info_with_sidecar(self, client: AsyncClient, doc):
        (doc.parent / "doc.txt._meta").write_text(json.dumps({"owner": "ops"}))
        resp = await client.get("/api/items/info", params={"path": "sub/doc.txt"})
        assert resp.status_code == 200
        assert resp.json()["metadata"]["user_data"] == {"owner": "ops"}

    @pytest.mark.asyncio
    async def test_info_directory(self, client: AsyncClient, doc):
        resp = await client.get("/api/items/info", params={"path": "sub"})
        assert resp.status_code == 200
        assert resp.json()["metadata"]["is_dir"] is True

    @pytest.mark.asyncio
    async def test_info_missing(self, client: AsyncClient, content_root):
        resp = await client.get("/api/items/info", params={"path": "ghost.txt"})
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_info_bad_sidecar(self, client: AsyncClient, doc):
        (doc.parent / "doc.txt._meta").write_text("[1, 2]")
        resp = await client.get("/api/items/info", params={"path": "sub/doc.txt"})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_path_escaping_root_rejected(self, client: AsyncClient, content_root):
        resp = await client.get("/api/items/info", params={"path": "../outside.txt"})
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_path_required(self, client: AsyncClient, content_root):
        resp = await client.get("/api/items/info")
        assert resp.status_code == 422


class TestContent:
    @pytest.mark.asyncio
    async def test_streams_bytes(self, client: AsyncClient, doc):
        resp = await client.get("/api/items/content", params={"path": "sub/doc.txt"})
        assert resp.status_code == 200
        assert resp.content == b"payload bytes"
        assert resp.headers["etag"].startswith('"')
        assert resp.headers["last-modified"] == "Tue, 14 Nov 2023 22:13:20 GMT"

    @pytest.mark.asyncio
    async def test_if_none_match(self, client: AsyncClient, doc):
        first = await client.get("/api/items/content", params={"path": "sub/doc.txt"})
        etag = first.headers["etag"]

        resp = await client.get(
            "/api/items/content",
            params={"path": "sub/doc.txt"},
            headers={"If-None-Match": etag},
        )
        assert resp.status_code == 304
        assert resp.content == b""

    @pytest.mark.asyncio
    async def test_missing_has_no_validators(self, client: AsyncClient, content_root):
        resp = await client.get("/api/items/content", params={"path": "ghost.bin"})
        assert resp.status_code == 404
        assert "etag" not in resp.headers

    @pytest.mark.asyncio
    async def test_directory_content_rejected(self, client: AsyncClient, doc):
        resp = await client.get("/api/items/content", params={"path": "sub"})
        assert resp.status_code == 400


class TestRootContainment:
    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX symlinks")
    @pytest.mark.asyncio
    async def test_symlink_out_of_root_rejected(self, client: AsyncClient, content_root):
        secret = content_root.parent / "secret.txt"
        secret.write_bytes(b"outside the root")
        os.symlink(str(secret), content_root / "alias")

        content = await client.get("/api/items/content", params={"path": "alias"})
        info = await client.get("/api/items/info", params={"path": "alias"})

        assert content.status_code == 400
        assert b"outside the root" not in content.content
        assert info.status_code == 400

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX symlinks")
    @pytest.mark.asyncio
    async def test_symlinked_sidecar_out_of_root_rejected(self, client: AsyncClient, doc):
        outside = doc.parent.parent.parent / "meta.json"
        outside.write_text(json.dumps({"leak": True}))
        os.symlink(str(outside), doc.parent / "doc.txt._meta")

        resp = await client.get("/api/items/info", params={"path": "sub/doc.txt"})
        assert resp.status_code == 400

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX symlinks")
    @pytest.mark.asyncio
    async def test_symlink_inside_root_allowed(self, client: AsyncClient, doc):
        os.symlink(str(doc), doc.parent / "shortcut.txt")

        resp = await client.get("/api/items/content", params={"path": "sub/shortcut.txt"})
        assert resp.status_code == 200
        assert resp.content == b"payload bytes"

    @pytest.mark.asyncio
    async def test_nul_in_path_rejected(self, client: AsyncClient, content_root):
        content = await client.get("/api/items/content", params={"path": "a\x00b"})
        info = await client.get("/api/items/info", params={"path": "a\x00b"})
        assert content.status_code == 400
        assert info.status_code == 400


class TestConditionalGet:
    @pytest.mark.asyncio
    async def test_wildcard_matches_existing_item(self, client: AsyncClient, doc):
        resp = await client.get(
            "/api/items/content",
            params={"path": "sub/doc.txt"},
            headers={"If-None-Match": "*"},
        )
        assert resp.status_code == 304

    @pytest.mark.asyncio
    async def test_weak_tag_matches(self, client: AsyncClient, doc):
        first = await client.get("/api/items/content", params={"path": "sub/doc.txt"})
        weak = "W/" + first.headers["etag"]

        resp = await client.get(
            "/api/items/content",
            params={"path": "sub/doc.txt"},
            headers={"If-None-Match": f'"other", {weak}'},
        )
        assert resp.status_code == 304

    @pytest.mark.asyncio
    async def test_mismatched_tag_streams(self, client: AsyncClient, doc):
        resp = await client.get(
            "/api/items/content",
            params={"path": "sub/doc.txt"},
            headers={"If-None-Match": '"stale"'},
        )
        assert resp.status_code == 200
        assert resp.content == b"payload bytes"


class TestErrorMapping:
    def test_value_error_is_bad_path_not_sidecar(self):
        from fastapi import HTTPException

        from localsource.api.routes.items import _raise_http
        from localsource.models import Item

        with pytest.raises(HTTPException) as exc_info:
            _raise_http(Item("x"), ValueError("embedded null byte"))
        assert exc_info.value.status_code == 400
        assert "sidecar" not in exc_info.value.detail

    def test_sidecar_error_is_422(self):
        from fastapi import HTTPException

        from localsource.api.routes.items import _raise_http
        from localsource.models import Item, SidecarDecodeError

        with pytest.raises(HTTPException) as exc_info:
            _raise_http(Item("x"), SidecarDecodeError("x._meta", []))
        assert exc_info.value.status_code == 422
