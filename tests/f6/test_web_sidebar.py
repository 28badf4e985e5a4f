"""Tests for sidebar endpoints (F6)."""


class TestSidebar:
    """Tests for /api/sidebar."""

    def test_anonymous_links(self, client):
        data = client.get("/api/sidebar").json()
        assert data["is_open"] is False
        assert [link["label"] for link in data["links"]] == ["Dashboard", "My Books"]

    def test_admin_links(self, client, admin):
        labels = [link["label"] for link in client.get("/api/sidebar").json()["links"]]
        assert labels == ["Dashboard", "All Books", "Admin Panel"]

    def test_open_close(self, client):
        assert client.post("/api/sidebar/open").json()["is_open"] is True
        assert client.post("/api/sidebar/close").json()["is_open"] is False

    def test_toggle_on_mobile(self, client):
        client.post("/api/sidebar/viewport", json={"width": 400})
        data = client.post("/api/sidebar/toggle").json()
        assert data["is_mobile"] is True
        assert data["is_open"] is True

    def test_toggle_ignored_on_desktop(self, client):
        client.post("/api/sidebar/viewport", json={"width": 1440})
        assert client.post("/api/sidebar/toggle").json()["is_open"] is False

    def test_narrowing_viewport_closes(self, client):
        client.post("/api/sidebar/open")
        data = client.post("/api/sidebar/viewport", json={"width": 800}).json()
        assert data["is_open"] is False

    def test_negative_width_rejected(self, client):
        assert client.post("/api/sidebar/viewport", json={"width": -1}).status_code == 422
