"""
Admin endpoint tests
"""
import pytest
from httpx import AsyncClient

from bachub.models import Document, Subject, User
from bachub.schemas import CommentCreate, RatingCreate
from conftest import make_subject


class TestAdminAccess:
    """Role gate on /api/admin"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/api/admin/users", "/api/admin/stats", "/api/admin/settings"])
    async def test_requires_authentication(self, client: AsyncClient, path: str):
        response = await client.get(path)

        assert response.status_code == 401

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/api/admin/users", "/api/admin/stats", "/api/admin/announcements"])
    async def test_requires_admin_role(self, client: AsyncClient, auth_headers: dict, path: str):
        response = await client.get(path, headers=auth_headers)

        assert response.status_code == 403
        assert response.json()["detail"] == "Admin access required"


class TestAdminUsers:

    @pytest.mark.asyncio
    async def test_list_users(self, client: AsyncClient, admin_auth_headers: dict, test_user: User):
        response = await client.get("/api/admin/users", headers=admin_auth_headers)

        assert response.status_code == 200
        users = response.json()
        assert {u["role"] for u in users} == {"admin", "user"}
        assert all("password" not in u for u in users)

    @pytest.mark.asyncio
    async def test_create_get_update(self, client: AsyncClient, admin_auth_headers: dict):
        created = await client.post(
            "/api/admin/users",
            json={
                "username": "prof",
                "password": "secret123",
                "email": "prof@example.com",
                "fullName": "Professeur",
                "role": "admin",
            },
            headers=admin_auth_headers
        )
        assert created.status_code == 201
        user_id = created.json()["id"]

        fetched = await client.get(f"/api/admin/users/{user_id}", headers=admin_auth_headers)
        assert fetched.json()["role"] == "admin"

        updated = await client.put(
            f"/api/admin/users/{user_id}",
            json={"fullName": "Professeur Principal", "role": "user"},
            headers=admin_auth_headers
        )
        assert updated.status_code == 200
        assert updated.json()["fullName"] == "Professeur Principal"
        assert updated.json()["role"] == "user"

    @pytest.mark.asyncio
    async def test_password_update_is_hashed(self, client: AsyncClient, admin_auth_headers: dict,
                                             test_user: User):
        await client.put(
            f"/api/admin/users/{test_user.id}",
            json={"password": "nouveau-secret"},
            headers=admin_auth_headers
        )

        login = await client.post("/api/login", json={"username": test_user.username, "password": "nouveau-secret"})
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_update_to_taken_username(self, client: AsyncClient, admin_auth_headers: dict,
                                            admin_user: User, test_user: User):
        response = await client.put(
            f"/api/admin/users/{test_user.id}",
            json={"username": admin_user.username},
            headers=admin_auth_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Username already exists"

    @pytest.mark.asyncio
    async def test_get_missing_user(self, client: AsyncClient, admin_auth_headers: dict):
        response = await client.get("/api/admin/users/999", headers=admin_auth_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "User not found"
        assert response.json()["error"]["code"] == "USER_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_delete_user(self, client: AsyncClient, admin_auth_headers: dict, test_user: User):
        response = await client.delete(f"/api/admin/users/{test_user.id}", headers=admin_auth_headers)

        assert response.status_code == 200
        missing = await client.get(f"/api/admin/users/{test_user.id}", headers=admin_auth_headers)
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_cannot_delete_self(self, client: AsyncClient, admin_auth_headers: dict, admin_user: User):
        response = await client.delete(f"/api/admin/users/{admin_user.id}", headers=admin_auth_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot delete your own account"

    @pytest.mark.asyncio
    async def test_delete_missing_user_succeeds(self, client: AsyncClient, admin_auth_headers: dict):
        response = await client.delete("/api/admin/users/999", headers=admin_auth_headers)

        assert response.status_code == 200


class TestAdminDocuments:

    @pytest.mark.asyncio
    async def test_create_update_delete(self, client: AsyncClient, admin_auth_headers: dict,
                                        admin_user: User, subject: Subject):
        created = await client.post(
            "/api/admin/documents",
            json={
                "title": "Bac C 2021",
                "description": "Sujet de mathématiques",
                "year": 2021,
                "subjectId": subject.id,
                "fileName": "math_bac_c_2021.pdf",
                "fileSize": 900000,
            },
            headers=admin_auth_headers
        )
        assert created.status_code == 201
        data = created.json()
        assert data["uploadedBy"] == admin_user.id
        assert data["downloads"] == 0

        updated = await client.put(
            f"/api/admin/documents/{data['id']}",
            json={"title": "Bac C 2021 - corrigé"},
            headers=admin_auth_headers
        )
        assert updated.json()["title"] == "Bac C 2021 - corrigé"
        assert updated.json()["year"] == 2021

        deleted = await client.delete(f"/api/admin/documents/{data['id']}", headers=admin_auth_headers)
        assert deleted.status_code == 200
        assert (await client.get(f"/api/documents/{data['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_create_with_unknown_subject(self, client: AsyncClient, admin_auth_headers: dict):
        response = await client.post(
            "/api/admin/documents",
            json={
                "title": "Bac C", "description": "...", "year": 2021,
                "subjectId": 999, "fileName": "x.pdf", "fileSize": 1,
            },
            headers=admin_auth_headers
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_create_missing_fields(self, client: AsyncClient, admin_auth_headers: dict):
        response = await client.post("/api/admin/documents", json={"title": "Bac C"}, headers=admin_auth_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Validation failed"

    @pytest.mark.asyncio
    async def test_update_missing(self, client: AsyncClient, admin_auth_headers: dict):
        response = await client.put("/api/admin/documents/999", json={"title": "x"}, headers=admin_auth_headers)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_missing_succeeds(self, client: AsyncClient, admin_auth_headers: dict):
        response = await client.delete("/api/admin/documents/999", headers=admin_auth_headers)

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_user_cannot_create(self, client: AsyncClient, auth_headers: dict, subject: Subject):
        response = await client.post(
            "/api/admin/documents",
            json={
                "title": "Bac C", "description": "...", "year": 2021,
                "subjectId": subject.id, "fileName": "x.pdf", "fileSize": 1,
            },
            headers=auth_headers
        )

        assert response.status_code == 403


class TestAdminSubjects:

    @pytest.mark.asyncio
    async def test_crud(self, client: AsyncClient, admin_auth_headers: dict):
        created = await client.post(
            "/api/admin/subjects", json={"name": "Anglais", "color": "indigo"}, headers=admin_auth_headers
        )
        assert created.status_code == 201
        subject_id = created.json()["id"]

        updated = await client.put(
            f"/api/admin/subjects/{subject_id}", json={"color": "teal"}, headers=admin_auth_headers
        )
        assert updated.json() == {"id": subject_id, "name": "Anglais", "color": "teal"}

        deleted = await client.delete(f"/api/admin/subjects/{subject_id}", headers=admin_auth_headers)
        assert deleted.status_code == 200
        assert (await client.get(f"/api/subjects/{subject_id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_duplicate_name(self, client: AsyncClient, admin_auth_headers: dict, subject: Subject):
        response = await client.post(
            "/api/admin/subjects", json={"name": subject.name, "color": "red"}, headers=admin_auth_headers
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_rename_to_existing_name(self, client: AsyncClient, admin_auth_headers: dict,
                                           db_storage, subject: Subject):
        taken_name = subject.name
        physics = await make_subject(db_storage, name="Physique")
        physics_id = physics.id

        response = await client.put(
            f"/api/admin/subjects/{physics_id}", json={"name": taken_name}, headers=admin_auth_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Subject already exists"
        assert (await client.get(f"/api/subjects/{physics_id}")).json()["name"] == "Physique"

    @pytest.mark.asyncio
    async def test_deleted_subject_falls_back(self, client: AsyncClient, admin_auth_headers: dict,
                                              document: Document, subject: Subject):
        await client.delete(f"/api/admin/subjects/{subject.id}", headers=admin_auth_headers)

        response = await client.get(f"/api/documents/{document.id}")

        assert response.json()["subject"] == "Unknown"
        assert response.json()["subjectColor"] == "gray"


class TestAdminAnnouncements:

    @pytest.mark.asyncio
    async def test_crud(self, client: AsyncClient, admin_auth_headers: dict, admin_user: User):
        created = await client.post(
            "/api/admin/announcements",
            json={"title": "Résultats", "content": "Les résultats sont en ligne."},
            headers=admin_auth_headers
        )
        assert created.status_code == 201
        data = created.json()
        assert data["active"] is True
        assert data["createdBy"] == admin_user.id

        updated = await client.put(
            f"/api/admin/announcements/{data['id']}", json={"active": False}, headers=admin_auth_headers
        )
        assert updated.json()["active"] is False

        listing = await client.get("/api/admin/announcements", headers=admin_auth_headers)
        assert len(listing.json()) == 1
        public = await client.get("/api/announcements", params={"activeOnly": "true"})
        assert public.json() == []

        deleted = await client.delete(f"/api/admin/announcements/{data['id']}", headers=admin_auth_headers)
        assert deleted.status_code == 200

    @pytest.mark.asyncio
    async def test_update_missing(self, client: AsyncClient, admin_auth_headers: dict):
        response = await client.put("/api/admin/announcements/999", json={"active": False}, headers=admin_auth_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "Announcement not found"


class TestAdminSettings:

    @pytest.mark.asyncio
    async def test_upsert_by_key(self, client: AsyncClient, admin_auth_headers: dict):
        first = await client.post(
            "/api/admin/settings", json={"key": "footer_email", "value": "a@bachub.td"}, headers=admin_auth_headers
        )
        second = await client.post(
            "/api/admin/settings", json={"key": "footer_email", "value": "b@bachub.td"}, headers=admin_auth_headers
        )

        assert first.status_code == 200
        assert second.json()["id"] == first.json()["id"]
        assert second.json()["value"] == "b@bachub.td"

        listing = await client.get("/api/admin/settings", headers=admin_auth_headers)
        assert len(listing.json()) == 1

    @pytest.mark.asyncio
    async def test_structured_value(self, client: AsyncClient, admin_auth_headers: dict):
        response = await client.post(
            "/api/admin/settings",
            json={"key": "footer_quick_links", "value": [{"name": "Accueil", "href": "/"}]},
            headers=admin_auth_headers
        )

        assert response.json()["value"] == '[{"name": "Accueil", "href": "/"}]'

    @pytest.mark.asyncio
    async def test_delete(self, client: AsyncClient, admin_auth_headers: dict):
        created = await client.post(
            "/api/admin/settings", json={"key": "social_twitter", "value": "https://x.com"}, headers=admin_auth_headers
        )

        deleted = await client.delete(f"/api/admin/settings/{created.json()['id']}", headers=admin_auth_headers)
        again = await client.delete(f"/api/admin/settings/{created.json()['id']}", headers=admin_auth_headers)

        assert deleted.status_code == 200
        assert again.status_code == 200
        assert (await client.get("/api/settings")).json() == []


class TestAdminComments:

    @pytest.mark.asyncio
    async def test_moderate(self, client: AsyncClient, db_storage, admin_auth_headers: dict,
                            document: Document, test_user: User):
        comment = await db_storage.create_comment(
            CommentCreate(document_id=document.id, user_id=test_user.id, content="Spam")
        )

        response = await client.delete(f"/api/admin/comments/{comment.id}", headers=admin_auth_headers)

        assert response.status_code == 200
        assert (await client.get(f"/api/documents/{document.id}/comments")).json() == []


class TestAdminStats:

    @pytest.mark.asyncio
    async def test_stats(self, client: AsyncClient, db_storage, admin_auth_headers: dict,
                         document: Document, test_user: User):
        await db_storage.increment_download_count(document.id)
        await db_storage.increment_download_count(document.id)
        await db_storage.create_rating(RatingCreate(user_id=test_user.id, document_id=document.id, rating=5))

        response = await client.get("/api/admin/stats", headers=admin_auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["totalUsers"] == 2
        assert data["totalDocuments"] == 1
        assert data["totalDownloads"] == 2
        assert data["totalRatings"] == 1
        assert data["totalComments"] == 0
        assert data["recentDocuments"][0]["id"] == document.id
        assert data["popularDocuments"][0]["subject"] == "Mathématiques"
