#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for article comments."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import uuid

import pytest
from httpx import AsyncClient


# -----------------------------------------------------------------------------

from inkwell.core.exceptions import ArticleNotFound, CommentNotFound
from inkwell.schemas import ArticleCreate, ArticleUpdate, CommentCreate
from tests.conftest import DEFAULT_WS, auth_headers, create_article


# -----------------------------------------------------------------------------

pytestmark = pytest.mark.asyncio(loop_scope="session")


class TestCommentService:
    async def _article(self, service):
        return await service.create(
            ArticleCreate(title="Discussed", content="body", workspace_id=DEFAULT_WS)
        )

    async def test_add_and_list_oldest_first(self, service):
        art = await self._article(service)
        first = await service.add_comment(art.id, CommentCreate(author="ann", body="first"))
        second = await service.add_comment(art.id, CommentCreate(body="second"))

        comments = await service.list_comments(art.id)
        assert [c.id for c in comments] == [first.id, second.id]
        assert comments[1].author is None

    async def test_blank_author_becomes_none(self, service):
        art = await self._article(service)
        c = await service.add_comment(art.id, CommentCreate(author="   ", body="anon"))
        assert c.author is None

    async def test_edit_and_remove(self, service):
        art = await self._article(service)
        c = await service.add_comment(art.id, CommentCreate(author="ann", body="typo"))

        edited = await service.edit_comment(art.id, c.id, CommentCreate(author="ann", body="fixed"))
        assert edited.body == "fixed"
        assert edited.id == c.id

        await service.remove_comment(art.id, c.id)
        assert await service.list_comments(art.id) == []

    async def test_comments_survive_new_versions(self, service):
        art = await self._article(service)
        c = await service.add_comment(art.id, CommentCreate(body="still here"))
        await service.update(art.id, ArticleUpdate(title="Discussed", content="v2"))

        old = await service.get(art.id, 1)
        new = await service.get(art.id)
        assert [x.id for x in old.comments] == [c.id]
        assert [x.id for x in new.comments] == [c.id]

    async def test_comment_on_missing_article(self, service):
        with pytest.raises(ArticleNotFound):
            await service.add_comment("ghost", CommentCreate(body="hello?"))

    async def test_missing_comment(self, service):
        art = await self._article(service)
        with pytest.raises(CommentNotFound):
            await service.edit_comment(art.id, uuid.uuid4(), CommentCreate(body="x"))
        with pytest.raises(CommentNotFound):
            await service.remove_comment(art.id, "not-a-uuid")

    async def test_comment_belongs_to_its_article(self, service):
        a = await self._article(service)
        b = await service.create(
            ArticleCreate(title="Elsewhere", content="body", workspace_id=DEFAULT_WS)
        )
        c = await service.add_comment(a.id, CommentCreate(body="on a"))
        with pytest.raises(CommentNotFound):
            await service.remove_comment(b.id, c.id)


class TestCommentsApi:
    async def test_crud(self, client: AsyncClient):
        headers = await auth_headers(client)
        art = await create_article(client, headers)
        base = f"/api/articles/{art['id']}/comments"

        r = await client.post(base, json={"author": "  ann  ", "body": "  hi  "})
        assert r.status_code == 201
        comment = r.json()
        assert (comment["author"], comment["body"]) == ("ann", "hi")

        r = await client.put(f"{base}/{comment['id']}", json={"body": "edited"})
        assert r.status_code == 200
        assert r.json()["author"] is None

        assert [c["body"] for c in (await client.get(base)).json()] == ["edited"]
        assert (await client.delete(f"{base}/{comment['id']}")).status_code == 204
        assert (await client.get(base)).json() == []

    async def test_validation(self, client: AsyncClient):
        headers = await auth_headers(client)
        art = await create_article(client, headers)
        base = f"/api/articles/{art['id']}/comments"
        assert (await client.post(base, json={"body": "   "})).status_code == 422
        assert (await client.post(base, json={"author": "x" * 81, "body": "ok"})).status_code == 422

    async def test_missing_article_is_404(self, client: AsyncClient):
        r = await client.get("/api/articles/ghost/comments")
        assert r.status_code == 404


# -----------------------------------------------------------------------------
