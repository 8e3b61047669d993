"""Tests for visitor check-in, update, check-out and lookup."""
import pytest

from tests.conftest import auth_headers, check_in_via_api, make_visitor
from visitdesk.exceptions import ConflictError, NotFoundError, ValidationError
from visitdesk.services import visitor_service, workflow_service


class TestVisitorService:
    def test_check_in_stamps_operator(self, db, actors):
        visitor = make_visitor(db, actors.receptionist, phone_number="08123456789")
        assert visitor.id is not None
        assert visitor.input_by_user_id == actors.receptionist.id
        assert visitor.input_by_name == "Rina Receptionist"
        assert visitor.check_in_time is not None
        assert visitor.check_out_time is None
        assert visitor.deleted_at is None

    def test_check_in_requires_name(self, db, actors):
        with pytest.raises(ValidationError):
            visitor_service.check_in_visitor(db, {"full_name": " "}, actors.receptionist)

    def test_check_in_rejects_unknown_fields(self, db, actors):
        with pytest.raises(ValidationError, match="deleted_by"):
            visitor_service.check_in_visitor(db, {"full_name": "Ani", "deleted_by": 2}, actors.receptionist)

    def test_check_in_rejects_malformed_values(self, db, actors):
        with pytest.raises(ValidationError, match="id_type"):
            visitor_service.check_in_visitor(db, {"full_name": "Ani", "id_type": 7}, actors.receptionist)

    def test_update_rejects_malformed_values(self, db, actors):
        visitor = make_visitor(db, actors.receptionist)
        with pytest.raises(ValidationError, match="location"):
            visitor_service.update_visitor(db, visitor.id, {"location": "x" * 256}, actors.receptionist)
        db.expire_all()
        assert visitor_service.get_visitor(db, visitor.id).location == "Main Hall"

    def test_check_out(self, db, actors):
        visitor = make_visitor(db, actors.receptionist)
        checked_out = visitor_service.check_out_visitor(db, visitor.id, actors.manager)
        assert checked_out.check_out_time is not None
        assert checked_out.checkout_by_user_id == actors.manager.id
        assert checked_out.checkout_by_name == "Maya Manager"

        with pytest.raises(ConflictError, match="already checked out"):
            visitor_service.check_out_visitor(db, visitor.id, actors.manager)

    def test_update(self, db, actors):
        visitor = make_visitor(db, actors.receptionist)
        updated = visitor_service.update_visitor(db, visitor.id, {"location": "Lobby"}, actors.receptionist)
        assert updated.location == "Lobby"

    def test_deleted_visitor_is_read_only(self, db, actors):
        visitor = make_visitor(db, actors.receptionist)
        deletion = workflow_service.create_deletion_request(db, visitor.id, "duplicate entry", actors.receptionist)
        workflow_service.approve_deletion_request(db, deletion.id, actors.admin)

        with pytest.raises(NotFoundError):
            visitor_service.get_visitor(db, visitor.id)
        assert visitor_service.get_visitor(db, visitor.id, include_deleted=True).id == visitor.id
        with pytest.raises(ConflictError):
            visitor_service.update_visitor(db, visitor.id, {"location": "Lobby"}, actors.admin)
        with pytest.raises(ConflictError):
            visitor_service.check_out_visitor(db, visitor.id, actors.admin)


class TestVisitorRoutes:
    def test_check_in_and_fetch(self, client, actors):
        visitor = check_in_via_api(client, actors.receptionist, institution="ITB", location="Main Hall")
        assert visitor["input_by_name"] == "Rina Receptionist"

        resp = client.get(f"/api/visitors/{visitor['id']}", headers=auth_headers(actors.receptionist))
        assert resp.status_code == 200
        assert resp.json()["institution"] == "ITB"

    def test_missing_identity_headers(self, client, actors):
        resp = client.post("/api/visitors/", json={"full_name": "Ani"})
        assert resp.status_code == 422

    def test_check_out_route(self, client, actors):
        visitor = check_in_via_api(client, actors.receptionist)
        resp = client.post(f"/api/visitors/{visitor['id']}/checkout", headers=auth_headers(actors.receptionist))
        assert resp.status_code == 200
        assert resp.json()["check_out_time"] is not None

        again = client.post(f"/api/visitors/{visitor['id']}/checkout", headers=auth_headers(actors.receptionist))
        assert again.status_code == 409

    def test_patch_route(self, client, actors):
        visitor = check_in_via_api(client, actors.receptionist)
        resp = client.patch(
            f"/api/visitors/{visitor['id']}",
            json={"purpose": "Delivery"},
            headers=auth_headers(actors.receptionist),
        )
        assert resp.status_code == 200
        assert resp.json()["purpose"] == "Delivery"

    def test_unknown_visitor(self, client, actors):
        resp = client.get("/api/visitors/999", headers=auth_headers(actors.receptionist))
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Visitor not found"

    def test_request_history(self, client, actors):
        visitor = check_in_via_api(client, actors.receptionist)
        client.post("/api/visitor-management/deletion-request", json={
            "visitor_id": visitor["id"], "reason": "duplicate entry",
        }, headers=auth_headers(actors.receptionist))

        resp = client.get(f"/api/visitors/{visitor['id']}/deletion-requests", headers=auth_headers(actors.admin))
        assert resp.status_code == 200
        history = resp.json()
        assert len(history) == 1
        assert history[0]["status"] == "pending"
        assert history[0]["requested_by_name"] == "Rina Receptionist"

        resp = client.get(f"/api/visitors/{visitor['id']}/edit-requests", headers=auth_headers(actors.admin))
        assert resp.status_code == 200
        assert resp.json() == []
