from __future__ import annotations

import os
import sys
from collections.abc import AsyncIterator, Awaitable, Callable
from pathlib import Path
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///default.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(PROJECT_ROOT))

# ruff: noqa: E402
from catsocial.config.settings import Settings
from catsocial.infrastructure.auth.password import PasswordHasher
from catsocial.infrastructure.db.base import Base
from catsocial.infrastructure.db.orm import cat, match, user  # noqa: F401
from catsocial.interfaces.http.main import create_app

Headers = dict[str, str]


def cat_body(**overrides: Any) -> dict[str, Any]:
    body = {
        "name": "Mochi",
        "race": "Persian",
        "sex": "female",
        "ageInMonth": 12,
        "description": "Calm indoor cat",
        "imageUrls": ["https://img.test/mochi.png"],
    }
    body.update(overrides)
    return body


@pytest.fixture()
def test_settings(tmp_path) -> Settings:
    db_path = tmp_path / "test.db"
    return Settings.model_validate(
        {
            "database_url": f"sqlite+aiosqlite:///{db_path}",
            "jwt_secret_key": "test-secret",
            "log_level": "INFO",
            "environment": "test",
            "request_timeout_seconds": 5,
        }
    )


@pytest.fixture()
def app(test_settings: Settings):
    # pbkdf2 keeps the suite fast; bcrypt is the production default
    return create_app(
        settings=test_settings,
        password_hasher=PasswordHasher(("pbkdf2_sha256",)),
    )


@pytest.fixture()
async def client(app) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        engine = app.state.engine
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
        yield client
        await engine.dispose()


@pytest.fixture()
def register(client: AsyncClient) -> Callable[..., Awaitable[Headers]]:
    async def _register(email: str, name: str = "Cat Owner", password: str = "secret1") -> Headers:
        response = await client.post(
            "/v1/user/register",
            json={"email": email, "name": name, "password": password},
        )
        assert response.status_code == 201, response.text
        token = response.json()["data"]["accessToken"]
        return {"Authorization": f"Bearer {token}"}

    return _register


@pytest.fixture()
def add_cat(client: AsyncClient) -> Callable[..., Awaitable[str]]:
    async def _add_cat(headers: Headers, **overrides: Any) -> str:
        response = await client.post("/v1/cat", json=cat_body(**overrides), headers=headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]["id"]

    return _add_cat


@pytest.fixture()
def cat_payload() -> Callable[..., dict[str, Any]]:
    return cat_body
