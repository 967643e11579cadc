"""Tests for content group creation, listing and deletion."""

import pytest
from app.content_groups.service import create_content_group
from app.db import session as db_session
from app.errors import PersistenceError, ValidationError
from app.models.content_group import ContentGroup
from app.models.document import Document
from app.schemas.document import FileIn


def _files(*paths):
    return [{"name": p.rsplit("/", 1)[-1], "path": p, "content": f"# {p}"} for p in paths]


class TestCreateContentGroup:

    def test_notes_scenario(self, client):
        r = client.post("/api/content-groups", json={
            "name": "Notes",
            "files": [{"name": "a.md", "path": "/a.md", "content": "# A"}],
        })
        assert r.status_code == 200
        group = r.json()
        assert group["id"]
        assert group["name"] == "Notes"

        r = client.get("/api/documents", params={"groupId": group["id"]})
        assert r.status_code == 200
        docs = r.json()
        assert len(docs) == 1
        assert docs[0]["path"] == "/a.md"
        assert docs[0]["content"] == "# A"
        assert docs[0]["groupId"] == group["id"]

    def test_one_document_per_file(self, client, db):
        r = client.post("/api/content-groups", json={"name": "Docs", "files": _files("/a.md", "/b.md", "/c/d.md")})
        group_id = r.json()["id"]

        assert db.query(ContentGroup).count() == 1
        docs = db.query(Document).all()
        assert len(docs) == 3
        assert {d.group_id for d in docs} == {group_id}

    def test_file_defaults(self, client):
        group = client.post("/api/content-groups", json={
            "name": "Defaults", "files": [{"name": "x.md", "path": "/x.md"}],
        }).json()
        doc = client.get("/api/documents", params={"groupId": group["id"], "path": "/x.md"}).json()
        assert doc["parentPath"] == ""
        assert doc["content"] == ""
        assert doc["isDirectory"] is False

    def test_without_files(self, client):
        r = client.post("/api/content-groups", json={"name": "Empty"})
        assert r.status_code == 200
        assert client.get("/api/documents", params={"groupId": r.json()["id"]}).json() == []

    @pytest.mark.parametrize("body", [{}, {"name": ""}, {"name": "   "}, {"files": _files("/a.md")}])
    def test_missing_name_is_client_error(self, client, body):
        r = client.post("/api/content-groups", json=body)
        assert r.status_code == 400
        assert "name" in r.json()["detail"]

    def test_transactional_failure_leaves_no_group(self, client, db, monkeypatch):
        monkeypatch.setattr(db_session, "supports_transactions", True)
        r = client.post("/api/content-groups", json={"name": "Dup", "files": _files("/a.md", "/a.md")})
        assert r.status_code == 500
        assert r.json()["detail"].startswith("Failed to create content group:")

        assert db.query(ContentGroup).count() == 0
        assert db.query(Document).count() == 0

    def test_best_effort_creates_group_and_documents(self, client, db, monkeypatch):
        monkeypatch.setattr(db_session, "supports_transactions", False)
        r = client.post("/api/content-groups", json={"name": "Loose", "files": _files("/a.md", "/b.md")})
        assert r.status_code == 200
        group_id = r.json()["id"]

        assert db.query(ContentGroup).count() == 1
        docs = db.query(Document).all()
        assert sorted(d.path for d in docs) == ["/a.md", "/b.md"]
        assert {d.group_id for d in docs} == {group_id}

    def test_best_effort_failure_keeps_group_without_documents(self, client, db, monkeypatch):
        monkeypatch.setattr(db_session, "supports_transactions", False)
        r = client.post("/api/content-groups", json={"name": "Dup", "files": _files("/a.md", "/a.md")})
        assert r.status_code == 500

        groups = db.query(ContentGroup).all()
        assert [g.name for g in groups] == ["Dup"]
        assert db.query(Document).count() == 0


class TestCreateContentGroupService:

    def test_transactional(self, db, user):
        files = [FileIn(name="a.md", path="/a.md"), FileIn(name="b.md", path="/b.md")]
        group = create_content_group(db, user, "Service", files, transactional=True)
        assert group.user_id == user.id
        assert db.query(Document).filter(Document.group_id == group.id).count() == 2

    def test_transactional_rollback(self, db, user):
        files = [FileIn(name="a.md", path="/a.md"), FileIn(name="a.md", path="/a.md")]
        with pytest.raises(PersistenceError):
            create_content_group(db, user, "Service", files, transactional=True)
        assert db.query(ContentGroup).count() == 0

    def test_best_effort(self, db, user):
        files = [FileIn(name="a.md", path="/a.md"), FileIn(name="a.md", path="/a.md")]
        with pytest.raises(PersistenceError):
            create_content_group(db, user, "Service", files, transactional=False)
        assert db.query(ContentGroup).count() == 1
        assert db.query(Document).count() == 0

    def test_blank_name(self, db, user):
        with pytest.raises(ValidationError):
            create_content_group(db, user, " ", [])


class TestListAndDeleteGroups:

    def test_list_newest_first(self, client, make_group):
        make_group("first")
        make_group("second")
        names = [g["name"] for g in client.get("/api/content-groups").json()]
        assert names == ["second", "first"]

    def test_get_group(self, client, make_group):
        group = make_group("one")
        r = client.get(f"/api/content-groups/{group['id']}")
        assert r.status_code == 200
        assert r.json()["userId"] == group["userId"]

    def test_get_missing_group(self, client):
        assert client.get("/api/content-groups/999").status_code == 404

    def test_delete_group(self, client, make_group):
        group = make_group("gone", files=_files("/a.md"))
        r = client.delete(f"/api/content-groups/{group['id']}")
        assert r.status_code == 200
        assert r.json() == {"success": True}
        assert client.get(f"/api/content-groups/{group['id']}").status_code == 404
        assert client.delete(f"/api/content-groups/{group['id']}").status_code == 404
