"""HTTP tests for the auth and asset endpoints."""
import httpx
import pytest
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from media_vault.infrastructure.database.repositories import SqlAccountRepository, SqlAssetRepository
from media_vault.interfaces.http.deps import get_account_service, get_asset_service, get_blob_store, get_db_session
from media_vault.main import create_app
from media_vault.modules.accounts import AccountService, PasswordHasher
from media_vault.modules.assets import AssetService

from helpers import FlakyBlobStore, FlakyRepository

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def app(session_factory, blob_store):
    application = create_app()

    async def _db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    def _account_service(db: AsyncSession = Depends(get_db_session)) -> AccountService:
        return AccountService(SqlAccountRepository(db), PasswordHasher(rounds=4))

    application.dependency_overrides[get_db_session] = _db_session
    application.dependency_overrides[get_blob_store] = lambda: blob_store
    application.dependency_overrides[get_account_service] = _account_service
    return application


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
        yield http


async def _auth_headers(client: httpx.AsyncClient, username: str) -> dict[str, str]:
    response = await client.post("/api/auth/register", json={"username": username, "password": "hunter22"})
    assert response.status_code == 201, response.text
    response = await client.post("/api/auth/login", json={"username": username, "password": "hunter22"})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def _stored_files(blob_store) -> list:
    return [p for p in blob_store.root.rglob("*") if p.is_file()]


def _fail_repository(app, **faults) -> None:
    def _service(db: AsyncSession = Depends(get_db_session), blob_store=Depends(get_blob_store)) -> AssetService:
        repository = FlakyRepository(SqlAssetRepository(db))
        for name, value in faults.items():
            setattr(repository, name, value)
        return AssetService(repository, blob_store)

    app.dependency_overrides[get_asset_service] = _service


async def _upload(client, headers, data=PNG_BYTES, filename="sunset.png", content_type="image/png", **form):
    return await client.post(
        "/api/assets",
        headers=headers,
        files={"file": (filename, data, content_type)},
        data=form,
    )


@pytest.fixture
async def alice(client):
    return await _auth_headers(client, "alice")


@pytest.fixture
async def bob(client):
    return await _auth_headers(client, "bob")


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


class TestAuth:
    async def test_duplicate_registration(self, client, alice):
        response = await client.post("/api/auth/register", json={"username": "alice", "password": "hunter22"})

        assert response.status_code == 409

    async def test_bad_credentials(self, client, alice):
        response = await client.post("/api/auth/login", json={"username": "alice", "password": "wrong-pass"})

        assert response.status_code == 401

    async def test_me(self, client, alice):
        response = await client.get("/api/auth/me", headers=alice)

        assert response.status_code == 200
        assert response.json()["username"] == "alice"

    async def test_invalid_token(self, client):
        response = await client.get("/api/assets", headers={"Authorization": "Bearer nonsense"})

        assert response.status_code == 401

    async def test_missing_token(self, client):
        response = await client.get("/api/assets")

        assert response.status_code in {401, 403}


class TestAssets:
    async def test_upload_and_download(self, client, alice, bob):
        response = await _upload(client, alice, title="Sunset", description="Over the bay")
        assert response.status_code == 201, response.text
        body = response.json()
        assert body["name"] == "sunset.png"
        assert body["content_type"] == "image/png"
        assert body["title"] == "Sunset"
        assert body["description"] == "Over the bay"

        # Any authenticated user may view and download.
        content = await client.get(f"/api/assets/{body['id']}/content", headers=bob)
        assert content.status_code == 200
        assert content.content == PNG_BYTES
        assert content.headers["content-type"] == "image/png"
        assert "sunset.png" in content.headers["content-disposition"]

        meta = await client.get(f"/api/assets/{body['id']}", headers=bob)
        assert meta.status_code == 200
        assert meta.json()["owner_id"] == body["owner_id"]
        assert meta.json()["content_url"].endswith(f"/api/assets/{body['id']}/content")

    async def test_blank_title_is_stored_as_none(self, client, alice):
        response = await _upload(client, alice, title="   ")

        assert response.status_code == 201
        assert response.json()["title"] is None

    async def test_rejected_content_type(self, client, alice):
        response = await _upload(client, alice, data=b"<html></html>", filename="page.html", content_type="text/html")

        assert response.status_code == 415
        listing = await client.get("/api/assets", headers=alice)
        assert listing.json()["total"] == 0

    async def test_too_large(self, client, alice):
        response = await _upload(client, alice, data=b"\x00" * (64 * 1024 + 1))

        assert response.status_code == 413

    async def test_unknown_asset(self, client, alice):
        assert (await client.get("/api/assets/missing", headers=alice)).status_code == 404
        assert (await client.get("/api/assets/missing/content", headers=alice)).status_code == 404

    async def test_only_owner_can_update(self, client, alice, bob):
        asset_id = (await _upload(client, alice, title="Old", description="keep")).json()["id"]

        foreign = await client.patch(f"/api/assets/{asset_id}", headers=bob, json={"title": "Hijacked"})
        assert foreign.status_code == 404

        own = await client.patch(f"/api/assets/{asset_id}", headers=alice, json={"title": "New"})
        assert own.status_code == 200
        assert own.json()["title"] == "New"
        assert own.json()["description"] == "keep"

    async def test_only_owner_can_delete(self, client, alice, bob, blob_store):
        asset_id = (await _upload(client, alice)).json()["id"]

        foreign = await client.delete(f"/api/assets/{asset_id}", headers=bob)
        assert foreign.status_code == 404
        assert (await client.get(f"/api/assets/{asset_id}", headers=alice)).status_code == 200

        own = await client.delete(f"/api/assets/{asset_id}", headers=alice)
        assert own.status_code == 204
        assert (await client.get(f"/api/assets/{asset_id}", headers=alice)).status_code == 404
        assert _stored_files(blob_store) == []

    async def test_list_and_search(self, client, alice, bob):
        first = (await _upload(client, alice, title="Sunset")).json()["id"]
        second = (await _upload(client, bob, title="Harbour", description="a quiet SUNSET")).json()["id"]
        third = (await _upload(client, alice, title="Market")).json()["id"]

        everything = (await client.get("/api/assets", headers=alice)).json()
        assert everything["total"] == 3
        assert [a["id"] for a in everything["assets"]] == [third, second, first]

        mine = (await client.get("/api/assets", headers=alice, params={"mine": "true"})).json()
        assert [a["id"] for a in mine["assets"]] == [third, first]

        found = (await client.get("/api/assets", headers=alice, params={"q": "sunset"})).json()
        assert {a["id"] for a in found["assets"]} == {first, second}

        mine_found = (await client.get("/api/assets", headers=alice, params={"q": "sunset", "mine": "true"})).json()
        assert [a["id"] for a in mine_found["assets"]] == [first]


class TestUploadValidation:
    async def test_title_longer_than_column_is_rejected(self, client, alice, blob_store):
        response = await _upload(client, alice, title="x" * 1000)

        assert response.status_code == 422
        assert _stored_files(blob_store) == []

    async def test_title_at_limit_is_accepted(self, client, alice):
        response = await _upload(client, alice, title="x" * 255)

        assert response.status_code == 201
        assert response.json()["title"] == "x" * 255

    async def test_long_filename_is_rejected(self, client, alice, blob_store):
        response = await _upload(client, alice, filename="a" * 300 + ".png")

        assert response.status_code == 422
        assert _stored_files(blob_store) == []

    async def test_content_type_parameters_are_dropped(self, client, alice):
        response = await _upload(client, alice, content_type="image/PNG; charset=binary")

        assert response.status_code == 201
        assert response.json()["content_type"] == "image/png"

    async def test_overlong_content_type_is_rejected(self, client, alice, blob_store):
        response = await _upload(client, alice, content_type="image/" + "x" * 200)

        assert response.status_code == 422
        assert _stored_files(blob_store) == []


class TestStorageFailures:
    async def test_dangling_reference_download(self, client, alice, blob_store):
        asset_id = (await _upload(client, alice)).json()["id"]
        for path in _stored_files(blob_store):
            path.unlink()

        response = await client.get(f"/api/assets/{asset_id}/content", headers=alice)

        assert response.status_code == 404
        assert response.json()["detail"] == "Asset content not found"

    async def test_delete_with_missing_content_is_conflict(self, client, alice, blob_store):
        asset_id = (await _upload(client, alice)).json()["id"]
        for path in _stored_files(blob_store):
            path.unlink()

        for _ in range(2):
            response = await client.delete(f"/api/assets/{asset_id}", headers=alice)
            assert response.status_code == 409
            assert response.json()["detail"] == "Asset content is already missing"
        assert (await client.get(f"/api/assets/{asset_id}", headers=alice)).status_code == 200

    async def test_record_left_after_partial_delete_is_conflict(self, app, client, alice, blob_store):
        asset_id = (await _upload(client, alice)).json()["id"]
        _fail_repository(app, fail_delete=True)

        first = await client.delete(f"/api/assets/{asset_id}", headers=alice)
        assert first.status_code == 500
        assert first.json()["detail"] == "Asset storage is temporarily unavailable"
        assert _stored_files(blob_store) == []

        second = await client.delete(f"/api/assets/{asset_id}", headers=alice)
        assert second.status_code == 409

    async def test_blob_write_failure(self, app, client, alice, blob_store):
        flaky = FlakyBlobStore(blob_store)
        flaky.fail_store = True
        app.dependency_overrides[get_blob_store] = lambda: flaky

        response = await _upload(client, alice)

        assert response.status_code == 500
        assert response.json()["detail"] == "Asset storage is temporarily unavailable"
        assert (await client.get("/api/assets", headers=alice)).json()["total"] == 0

    async def test_blob_delete_failure_keeps_asset(self, app, client, alice, blob_store):
        flaky = FlakyBlobStore(blob_store)
        app.dependency_overrides[get_blob_store] = lambda: flaky
        asset_id = (await _upload(client, alice)).json()["id"]
        flaky.fail_delete = True

        response = await client.delete(f"/api/assets/{asset_id}", headers=alice)

        assert response.status_code == 500
        assert response.json()["detail"] == "Asset storage is temporarily unavailable"
        content = await client.get(f"/api/assets/{asset_id}/content", headers=alice)
        assert content.content == PNG_BYTES

    async def test_metadata_save_failure_leaves_orphan(self, app, client, alice, blob_store):
        _fail_repository(app, fail_save=True)

        response = await _upload(client, alice)

        assert response.status_code == 500
        assert response.json()["detail"] == "Asset storage is temporarily unavailable"
        assert len(_stored_files(blob_store)) == 1
        assert (await client.get("/api/assets", headers=alice)).json()["total"] == 0
