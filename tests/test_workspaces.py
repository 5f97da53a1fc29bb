#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for workspace endpoints."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import pytest
from httpx import AsyncClient


# -----------------------------------------------------------------------------

from inkwell.services.slugs import slugify, with_suffix
from tests.conftest import DEFAULT_WS, auth_headers, create_article


class TestSlugs:
    def test_slugify(self):
        assert slugify("Héllo, World!") == "hello-world"
        assert slugify("  --  ") == ""
        assert len(slugify("x" * 200)) == 60

    def test_with_suffix_respects_length(self):
        assert with_suffix("abc", 1, 10) == "abc"
        assert with_suffix("abcdefghij", 2, 10) == "abcdefgh-2"


@pytest.mark.asyncio(loop_scope="session")
class TestWorkspaces:
    async def test_default_workspace_listed(self, client: AsyncClient):
        r = await client.get("/api/workspaces")
        assert r.status_code == 200
        assert [w["id"] for w in r.json()] == [DEFAULT_WS]

    async def test_create_slug_id_with_suffix(self, client: AsyncClient):
        headers = await auth_headers(client)
        r = await client.post("/api/workspaces", json={"name": "Engineering Team"}, headers=headers)
        assert r.status_code == 201
        assert r.json()["id"] == "engineering-team"

        r = await client.post("/api/workspaces", json={"name": "Engineering Team"}, headers=headers)
        assert r.json()["id"] == "engineering-team-2"

    async def test_create_requires_auth(self, client: AsyncClient):
        r = await client.post("/api/workspaces", json={"name": "Nope"})
        assert r.status_code == 401

    async def test_get_counts_articles(self, client: AsyncClient):
        headers = await auth_headers(client)
        await create_article(client, headers)
        r = await client.get(f"/api/workspaces/{DEFAULT_WS}")
        assert r.json()["article_count"] == 1

    async def test_rename(self, client: AsyncClient):
        headers = await auth_headers(client)
        r = await client.put(f"/api/workspaces/{DEFAULT_WS}", json={"name": "Main"}, headers=headers)
        assert r.status_code == 200
        assert r.json()["name"] == "Main"
        assert r.json()["id"] == DEFAULT_WS

    async def test_missing_is_404(self, client: AsyncClient):
        r = await client.get("/api/workspaces/nowhere")
        assert r.status_code == 404
        assert r.json()["error"] == "not found"

    async def test_delete_refused_while_articles_exist(self, client: AsyncClient):
        admin = await auth_headers(client)
        art = await create_article(client, admin)

        r = await client.delete(f"/api/workspaces/{DEFAULT_WS}", headers=admin)
        assert r.status_code == 409

        await client.delete(f"/api/articles/{art['id']}", headers=admin)
        r = await client.delete(f"/api/workspaces/{DEFAULT_WS}", headers=admin)
        assert r.status_code == 204

    async def test_delete_requires_admin(self, client: AsyncClient):
        admin = await auth_headers(client, "admin@example.com")
        user = await auth_headers(client, "user@example.com")
        r = await client.post("/api/workspaces", json={"name": "Scratch"}, headers=admin)
        ws_id = r.json()["id"]
        r = await client.delete(f"/api/workspaces/{ws_id}", headers=user)
        assert r.status_code == 403
        assert r.json() == {"error": "forbidden", "detail": "Admin privileges required"}


# -----------------------------------------------------------------------------
