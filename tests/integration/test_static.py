"""Static file serving tests.

Purpose: Verify GET serves files and listings from the file root, and that
unsupported methods get 405.
"""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest


@pytest.fixture
def tree(file_root: Path) -> Path:
    (file_root / "alice" / "sub").mkdir(parents=True)
    (file_root / "alice" / "doc.txt").write_bytes(b"hello world")
    (file_root / "alice" / "sub" / "a b.txt").write_bytes(b"spaced")
    (file_root / "site").mkdir()
    (file_root / "site" / "index.html").write_text("<h1>index</h1>")
    return file_root


async def test_get_file(client: httpx.AsyncClient, tree: Path):
    resp = await client.get("/alice/doc.txt")

    assert resp.status_code == 200
    assert resp.content == b"hello world"
    assert resp.headers["content-type"].startswith("text/plain")
    assert "last-modified" in resp.headers


async def test_get_missing(client: httpx.AsyncClient, tree: Path):
    resp = await client.get("/alice/nope.txt")

    assert resp.status_code == 404
    assert resp.text == "404 page not found"


async def test_get_range(client: httpx.AsyncClient, tree: Path):
    resp = await client.get("/alice/doc.txt", headers={"Range": "bytes=0-4"})

    assert resp.status_code == 206
    assert resp.content == b"hello"


async def test_directory_listing(client: httpx.AsyncClient, tree: Path):
    resp = await client.get("/alice/")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert '<a href="doc.txt">doc.txt</a>' in resp.text
    assert '<a href="sub/">sub/</a>' in resp.text


async def test_listing_quotes_names(client: httpx.AsyncClient, tree: Path):
    resp = await client.get("/alice/sub/")

    assert '<a href="a%20b.txt">a b.txt</a>' in resp.text


async def test_root_listing(client: httpx.AsyncClient, tree: Path):
    resp = await client.get("/")

    assert resp.status_code == 200
    assert "alice/" in resp.text
    assert "site/" in resp.text


async def test_directory_redirects_to_slash(client: httpx.AsyncClient, tree: Path):
    resp = await client.get("/alice")

    assert resp.status_code == 301
    assert resp.headers["location"] == "/alice/"


async def test_file_with_slash_redirects(client: httpx.AsyncClient, tree: Path):
    resp = await client.get("/alice/doc.txt/")

    assert resp.status_code == 301
    assert resp.headers["location"] == "/alice/doc.txt"


async def test_index_html(client: httpx.AsyncClient, tree: Path):
    resp = await client.get("/site/")

    assert resp.status_code == 200
    assert resp.text == "<h1>index</h1>"


async def test_missing_root(client: httpx.AsyncClient, file_root: Path):
    file_root.rmdir()

    resp = await client.get("/")

    assert resp.status_code == 404


async def test_uploaded_file_is_served(client: httpx.AsyncClient, file_root: Path):
    await client.post(
        "/",
        headers={"Authorization": "Bearer tok-alice"},
        data={"path": "sub"},
        files={"file0": ("doc.txt", b"round trip", "text/plain")},
    )

    resp = await client.get("/alice/sub/doc.txt")

    assert resp.status_code == 200
    assert resp.content == b"round trip"


@pytest.mark.parametrize("method", ["PUT", "DELETE", "PATCH", "PROPFIND", "MKCOL", "FROBNICATE"])
async def test_other_methods_not_allowed(client: httpx.AsyncClient, tree: Path, method: str):
    resp = await client.request(method, "/alice/doc.txt")

    assert resp.status_code == 405
    assert resp.text == "Method not allowed"
    assert (tree / "alice" / "doc.txt").exists()


async def test_head_not_allowed(client: httpx.AsyncClient, tree: Path):
    resp = await client.head("/alice/doc.txt")

    assert resp.status_code == 405
