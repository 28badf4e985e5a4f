"""Tests for admin panel endpoints (F6)."""

from fastapi.testclient import TestClient
from starlette.datastructures import UploadFile

from studyvault.backend.base import BackendError
from studyvault.core.catalog_state import MSG_PERMISSION_DENIED
from studyvault.web.api import create_app
from studyvault.web.context import AppContext

PDF_BYTES = b"%PDF-1.4 admin upload"


def _upload(client, data=PDF_BYTES, content_type="application/pdf", **fields):
    form = {"title": "Calculus", "subject": "Mathematics", "semester": "1"}
    form.update(fields)
    return client.post(
        "/api/admin/books",
        data=form,
        files={"file": ("calculus.pdf", data, content_type)},
    )


class TestAccess:
    """Admin routes are gated on the admin role."""

    def test_anonymous_is_401(self, client):
        assert client.get("/admin").status_code == 401

    def test_student_is_403(self, client, login):
        login()
        response = client.get("/admin")
        assert response.status_code == 403
        assert response.json()["detail"] == "You don't have permission to access this page."

    def test_student_cannot_upload(self, client, login):
        login()
        assert _upload(client).status_code == 403


class TestAdminPanel:
    """Tests for GET /admin."""

    def test_stats_and_filters(self, client, fake_backend, admin):
        fake_backend.add_book_row("Calculus", "Mathematics", 1)
        fake_backend.add_book_row("Organic Chemistry", "Chemistry", 2)
        client.post("/api/auth/logout")
        client.post(
            "/api/auth/login",
            json={"email": "admin@example.com", "password": "secret123"},
        )

        data = client.get("/admin").json()
        assert data["stats"] == {"total_books": 2, "subjects": 2}
        assert data["connected"] is True

        filtered = client.get("/admin", params={"search": "chem", "semester": 2}).json()
        assert [b["title"] for b in filtered["books"]] == ["Organic Chemistry"]
        assert filtered["count"] == 1


class TestUpload:
    """Tests for POST /api/admin/books."""

    def test_upload_adds_book(self, client, fake_backend, admin):
        response = _upload(client, author="Stewart", semester="2")

        assert response.status_code == 201
        book = response.json()
        assert book["semester"] == 2
        assert book["author"] == "Stewart"
        assert book["pdf_url"].startswith("https://fake.supabase.co/")
        assert client.get("/books").json()["count"] == 1

    def test_non_pdf_is_415(self, client, fake_backend, admin):
        response = _upload(client, data=b"hello", content_type="text/plain")

        assert response.status_code == 415
        assert response.json()["detail"] == "Please select a valid PDF file"
        assert fake_backend.objects == {}

    def test_too_large_is_413(self, client, context, admin):
        context.config.storage.max_upload_bytes = 10

        response = _upload(client)

        assert response.status_code == 413
        assert response.json()["error"] == "upload_too_large"

    def test_row_level_security_is_403(self, client, fake_backend, admin):
        fake_backend.insert_book_error = BackendError(
            message='new row violates row-level security policy for table "books"',
            code="42501",
        )

        response = _upload(client)

        assert response.status_code == 403
        assert response.json()["detail"] == MSG_PERMISSION_DENIED

    def test_missing_bucket_is_502(self, client, fake_backend, admin):
        fake_backend.upload_error = BackendError(message="Bucket not found")
        response = _upload(client)
        assert response.status_code == 502
        assert "books" in response.json()["detail"]

    def test_semester_validated(self, client, fake_backend, admin):
        response = _upload(client, semester="9")

        assert response.status_code == 422
        assert response.json()["error"] == "invalid_semester"
        assert fake_backend.objects == {}

    def test_semester_beyond_configured_count(self, app_config, fake_backend):
        app_config.ui.semesters = 6
        fake_backend.add_account("admin@example.com", name="Admin", role="admin")

        context = AppContext(config=app_config, backend=fake_backend)
        with TestClient(create_app(context)) as client:
            client.post(
                "/api/auth/login",
                json={"email": "admin@example.com", "password": "secret123"},
            )
            response = _upload(client, semester="7")

        assert response.status_code == 422
        assert response.json()["detail"] == "Semester must be between 1 and 6, got 7"
        assert fake_backend.inserted_rows == []

    def test_oversized_body_is_not_read(self, client, context, admin, monkeypatch):
        context.config.storage.max_upload_bytes = 10

        async def read_body(self, size=-1):
            raise AssertionError("upload body was read")

        monkeypatch.setattr(UploadFile, "read", read_body)

        response = _upload(client)

        assert response.status_code == 413
        assert response.json()["error"] == "upload_too_large"


class TestDelete:
    """Tests for DELETE /api/admin/books/{id}."""

    def test_delete_book(self, client, admin):
        book_id = _upload(client).json()["id"]

        assert client.delete(f"/api/admin/books/{book_id}").status_code == 204
        assert client.get("/books").json()["count"] == 0

    def test_delete_failure_is_502(self, client, fake_backend, admin):
        book_id = _upload(client).json()["id"]
        fake_backend.delete_error = BackendError(message="denied")

        assert client.delete(f"/api/admin/books/{book_id}").status_code == 502


class TestLocalFiles:
    """Tests for /api/admin/files."""

    def test_list_and_delete(self, client, context, admin):
        file_id = context.file_store.store("notes.pdf", b"x" * 2048, "application/pdf")

        data = client.get("/api/admin/files").json()
        assert data["count"] == 1
        assert data["files"][0]["size_text"] == "2 KB"

        assert client.delete(f"/api/admin/files/{file_id}").status_code == 204
        assert client.delete(f"/api/admin/files/{file_id}").status_code == 404
