#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for registration, login, roles and the edit predicate."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import uuid

import pytest
from httpx import AsyncClient


# -----------------------------------------------------------------------------

from inkwell.core.security import (
    CurrentUser, can_edit, create_access_token, hash_password, verify_password,
)
from tests.conftest import auth_headers


class TestSecurityHelpers:
    def test_password_round_trip(self):
        hashed = hash_password("s3cret!")
        assert verify_password("s3cret!", hashed)
        assert not verify_password("wrong", hashed)
        assert not verify_password("s3cret!", "not-a-bcrypt-hash")

    def test_can_edit(self):
        owner = uuid.uuid4()
        assert can_edit(owner, CurrentUser(id=owner, email="o@example.com"))
        assert can_edit(owner, CurrentUser(id=uuid.uuid4(), email="a@example.com", is_admin=True))
        assert not can_edit(owner, CurrentUser(id=uuid.uuid4(), email="x@example.com"))
        assert not can_edit(None, CurrentUser(id=uuid.uuid4(), email="x@example.com"))
        assert not can_edit(owner, None)


@pytest.mark.asyncio(loop_scope="session")
class TestAuthApi:
    async def test_first_user_is_admin(self, client: AsyncClient):
        r = await client.post("/api/auth/register", json={
            "email": "First@Example.com", "password": "password123",
        })
        assert r.status_code == 201
        assert r.json()["user"]["role"] == "admin"
        assert r.json()["user"]["email"] == "first@example.com"

        r = await client.post("/api/auth/register", json={
            "email": "second@example.com", "password": "password123",
        })
        assert r.json()["user"]["role"] == "user"

    async def test_duplicate_email(self, client: AsyncClient):
        payload = {"email": "dup@example.com", "password": "password123"}
        await client.post("/api/auth/register", json=payload)
        r = await client.post("/api/auth/register", json=payload)
        assert r.status_code == 409

    async def test_short_password(self, client: AsyncClient):
        r = await client.post("/api/auth/register", json={"email": "a@example.com", "password": "123"})
        assert r.status_code == 422

    async def test_login_and_me(self, client: AsyncClient):
        await client.post("/api/auth/register", json={"email": "me@example.com", "password": "password123"})
        r = await client.post("/api/auth/login", data={"username": "me@example.com", "password": "password123"})
        assert r.status_code == 200
        token = r.json()["access_token"]

        r = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 200
        assert r.json()["email"] == "me@example.com"

    async def test_wrong_password(self, client: AsyncClient):
        await client.post("/api/auth/register", json={"email": "me@example.com", "password": "password123"})
        r = await client.post("/api/auth/login", data={"username": "me@example.com", "password": "nope"})
        assert r.status_code == 401

    async def test_bad_tokens(self, client: AsyncClient):
        r = await client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})
        assert r.status_code == 401
        token = create_access_token("not-a-uuid")
        r = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 401

    async def test_admin_manages_roles(self, client: AsyncClient):
        admin = await auth_headers(client, "admin@example.com")
        user = await auth_headers(client, "user@example.com")

        r = await client.get("/api/users", headers=user)
        assert r.status_code == 403
        assert r.json()["error"] == "forbidden"
        r = await client.get("/api/users", headers=admin)
        assert r.status_code == 200
        users = {u["email"]: u for u in r.json()}
        assert set(users) == {"admin@example.com", "user@example.com"}

        target = users["user@example.com"]["id"]
        r = await client.patch(f"/api/users/{target}/role", json={"role": "admin"}, headers=admin)
        assert r.status_code == 200
        assert r.json()["role"] == "admin"

        me = users["admin@example.com"]["id"]
        r = await client.patch(f"/api/users/{me}/role", json={"role": "user"}, headers=admin)
        assert r.status_code == 400


# -----------------------------------------------------------------------------
