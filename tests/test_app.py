"""End-to-end tests against the assembled app on a temporary SQLite database."""

from uuid import UUID

import pytest
from litestar.testing import AsyncTestClient

from blockcms.app_factory import create_session_config
from blockcms.asgi import create_app
from blockcms.auth.services import assign_role_to_user, remove_role_from_user
from blockcms.config import DatabaseConfig, Settings, SiteConfig
from blockcms.db.models import User
from blockcms.db.services import user_service


@pytest.fixture
def settings(tmp_path):
    return Settings(
        secret_key="test-secret",
        debug=True,
        db=DatabaseConfig(url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"),
        site=SiteConfig(name="Acme", base_url="https://acme.test"),
    )


@pytest.fixture
async def client(settings):
    app = create_app(settings)
    session_config = create_session_config(settings.secret_key, secure=False)
    async with AsyncTestClient(app=app, session_config=session_config) as client:
        yield client


async def _make_user(client, email: str, role: str | None = None) -> str:
    session_maker = client.app.state.session_maker_class
    async with session_maker() as session:
        user = User(email=email, name=email.split("@")[0], is_active=True)
        session.add(user)
        await session.commit()
        if role:
            assert await assign_role_to_user(session, user.id, role)
        return str(user.id)


async def _sign_in(client, email: str, role: str | None = None) -> str:
    user_id = await _make_user(client, email, role)
    await client.set_session_data({"user_id": user_id})
    return user_id


async def test_me_requires_a_session(client):
    response = await client.get("/api/auth/me")
    assert response.status_code == 401


async def test_me_lists_effective_permissions(client):
    user_id = await _sign_in(client, "ed@acme.test", "editor")

    response = await client.get("/api/auth/me")

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == user_id
    assert body["roles"] == ["editor"]
    assert body["permissions"] == ["manage_content", "manage_media"]


async def test_admin_api_requires_login(client, home_page):
    response = await client.post("/api/admin/pages", json=home_page)
    assert response.status_code == 401


async def test_missing_permission_is_forbidden(client, home_page):
    await _sign_in(client, "nobody@acme.test")

    response = await client.post("/api/admin/pages", json=home_page)

    assert response.status_code == 403


async def test_editor_cannot_publish(client, home_page):
    await _sign_in(client, "ed@acme.test", "editor")
    page_id = (await client.post("/api/admin/pages", json=home_page)).json()["id"]

    response = await client.post(f"/api/admin/pages/{page_id}/publish")

    assert response.status_code == 403


async def test_invalid_page_reports_every_issue(client, home_page):
    await _sign_in(client, "admin@acme.test", "admin")
    home_page["body"]["blocks"] = [
        {"id": "a", "type": "hero", "data": {}},
        {"id": "b", "type": "carousel", "data": {}},
    ]

    response = await client.post("/api/admin/pages", json=home_page)

    assert response.status_code == 400
    paths = [e["path"] for e in response.json()["errors"]]
    assert "body.blocks.0.data.title" in paths
    assert "body.blocks.1" in paths


async def test_duplicate_slug_conflicts(client, home_page):
    await _sign_in(client, "admin@acme.test", "admin")
    assert (await client.post("/api/admin/pages", json=home_page)).status_code == 201

    response = await client.post("/api/admin/pages", json=home_page)

    assert response.status_code == 409


async def test_publish_and_render_home_page(client, home_page):
    await _sign_in(client, "admin@acme.test", "admin")
    home_page["body"]["blocks"] += [
        {"id": "x", "type": "carousel", "data": {}},
        {"id": "s", "type": "services", "data": {"title": "What we do", "limit": 2}},
    ]
    for title in ("Design", "Build", "Maintain"):
        response = await client.post("/api/admin/services", json={"title": title})
        assert response.status_code == 201

    created = await client.post("/api/admin/pages", json=home_page)
    assert created.status_code == 201
    page_id = created.json()["id"]

    assert (await client.get("/")).status_code == 404

    published = await client.post(f"/api/admin/pages/{page_id}/publish")
    assert published.status_code == 200
    assert published.json()["status"] == "PUBLISHED"
    assert published.json()["publishAt"] is not None

    response = await client.get("/", headers={"Accept": "text/html"})

    assert response.status_code == 200
    html = response.text
    assert "<title>Home | Acme</title>" in html
    assert "Welcome" in html
    assert "Unknown block type: carousel" in html
    assert "Design" in html and "Build" in html
    assert "Maintain" not in html
    assert html.index("Welcome") < html.index("carousel") < html.index("What we do")


async def test_archived_page_is_hidden(client, home_page):
    await _sign_in(client, "admin@acme.test", "admin")
    home_page["slug"] = "about"
    page_id = (await client.post("/api/admin/pages", json=home_page)).json()["id"]
    await client.post(f"/api/admin/pages/{page_id}/publish")
    assert (await client.get("/about")).status_code == 200

    response = await client.put(f"/api/admin/pages/{page_id}/status", json={"status": "ARCHIVED"})

    assert response.status_code == 200
    assert (await client.get("/about")).status_code == 404


async def test_validate_endpoint_never_stores(client, home_page):
    await _sign_in(client, "admin@acme.test", "admin")

    response = await client.post("/api/admin/pages/validate", json=home_page)

    assert response.json()["valid"] is True
    assert (await client.get("/api/admin/pages")).json() == []


async def test_block_catalogue(client):
    await _sign_in(client, "ed@acme.test", "editor")

    response = await client.get("/api/admin/blocks")

    assert response.status_code == 200
    types = [entry["type"] for entry in response.json()]
    assert types == ["hero", "services", "projects", "news", "richtext", "gallery", "contact"]


async def test_custom_role_grants_its_permissions(client):
    await _sign_in(client, "admin@acme.test", "admin")
    writer_id = await _make_user(client, "writer@acme.test")

    role = await client.post(
        "/api/admin/roles",
        json={"name": "reviewer", "permissions": ["publish_content", "manage_media"]},
    )
    assert role.status_code == 201
    assert role.json()["permissions"] == ["manage_media", "publish_content"]

    response = await client.put(f"/api/admin/users/{writer_id}/roles", json={"roles": ["reviewer", "editor"]})
    assert response.status_code == 200

    await client.set_session_data({"user_id": writer_id})
    me = (await client.get("/api/auth/me")).json()

    assert me["roles"] == ["editor", "reviewer"]
    assert me["permissions"] == ["manage_content", "manage_media", "publish_content"]


async def test_role_with_unknown_permission_is_rejected(client):
    await _sign_in(client, "admin@acme.test", "admin")

    response = await client.post("/api/admin/roles", json={"name": "odd", "permissions": ["fly"]})

    assert response.status_code == 400
    assert response.json()["errors"] == [{"path": "permissions.0", "message": "Unknown permission 'fly'"}]


async def test_logout_clears_session(client):
    await _sign_in(client, "ed@acme.test", "editor")

    assert (await client.post("/api/auth/logout")).json() == {"ok": True}
    assert (await client.get("/api/auth/me")).status_code == 401


async def test_revoked_role_applies_on_next_request(client, home_page):
    user_id = await _sign_in(client, "ed@acme.test", "editor")
    assert (await client.post("/api/admin/pages", json=home_page)).status_code == 201

    async with client.app.state.session_maker_class() as session:
        assert await remove_role_from_user(session, user_id, "editor")

    home_page["slug"] = "about"
    response = await client.post("/api/admin/pages", json=home_page)

    assert response.status_code == 403


async def test_deactivated_user_loses_every_permission(client, home_page):
    user_id = await _sign_in(client, "admin@acme.test", "admin")

    async with client.app.state.session_maker_class() as session:
        user = await user_service.update_user(
            session, UUID(user_id), {"email": "admin@acme.test", "isActive": False, "roles": ["admin"]}
        )
        assert user.is_active is False

    response = await client.post("/api/admin/pages", json=home_page)

    assert response.status_code == 403
    assert (await client.get("/api/auth/me")).status_code == 401
