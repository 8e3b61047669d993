"""Tests for role-scoped visitor listings and computed status."""
from datetime import datetime, timedelta, timezone

import pytest

from tests.conftest import make_visitor
from visitdesk.exceptions import PermissionDeniedError
from visitdesk.models.enums import ViewType
from visitdesk.schemas.visitor import VisitorFilters
from visitdesk.services import workflow_service
from visitdesk.services.visitor_view_service import allowed_view_types, check_view_access, find_by_role_and_view

BASE_TIME = datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def roster(db, actors):
    """Four visitors, one in each computed status, checked in an hour apart."""
    active = make_visitor(db, actors.receptionist, BASE_TIME, full_name="Ani Active")
    editing = make_visitor(db, actors.receptionist, BASE_TIME + timedelta(hours=1), full_name="Edo Editing")
    leaving = make_visitor(db, actors.receptionist, BASE_TIME + timedelta(hours=2), full_name="Lia Leaving",
                           location="Annex")
    gone = make_visitor(db, actors.receptionist, BASE_TIME + timedelta(hours=3), full_name="Gus Gone")

    workflow_service.create_edit_request(
        db, editing.id, {"purpose": "Interview"}, "Purpose clarified with host", actors.receptionist,
    )
    workflow_service.create_deletion_request(db, leaving.id, "duplicate entry", actors.receptionist)
    deletion = workflow_service.create_deletion_request(db, gone.id, "test record", actors.receptionist)
    workflow_service.approve_deletion_request(db, deletion.id, actors.admin)
    return {"active": active.id, "editing": editing.id, "leaving": leaving.id, "gone": gone.id}


def _names(rows):
    return [row.full_name for row in rows]


class TestAccessMatrix:
    def test_operator_views(self):
        assert allowed_view_types("Receptionist") == {ViewType.active, ViewType.pending_requests}

    def test_approver_views(self):
        expected = {ViewType.active, ViewType.pending_deletion, ViewType.pending_edit, ViewType.deleted, ViewType.all}
        assert allowed_view_types("Admin") == expected
        assert allowed_view_types("Manager") == expected

    def test_unknown_role_sees_nothing(self):
        assert allowed_view_types("Visitor") == frozenset()
        with pytest.raises(PermissionDeniedError):
            check_view_access("Visitor", "active")

    def test_operator_cannot_list_deleted(self, db, actors):
        with pytest.raises(PermissionDeniedError, match="not allowed"):
            find_by_role_and_view(db, None, "Receptionist", "deleted")

    def test_operator_cannot_list_pending_deletion(self, db, actors):
        with pytest.raises(PermissionDeniedError):
            find_by_role_and_view(db, None, "Receptionist", "pending_deletion")

    def test_approver_has_no_pending_requests_view(self, db, actors):
        with pytest.raises(PermissionDeniedError):
            find_by_role_and_view(db, None, "Admin", "pending_requests")

    def test_unknown_view_type(self, db, actors):
        with pytest.raises(PermissionDeniedError):
            find_by_role_and_view(db, None, "Admin", "archived")


class TestViews:
    def test_active_excludes_pending_and_deleted(self, db, roster):
        rows = find_by_role_and_view(db, None, "Receptionist", "active")
        assert _names(rows) == ["Ani Active"]
        assert rows[0].computed_status == "active"
        assert rows[0].pending_deletion is None
        assert rows[0].pending_edit is None

    def test_pending_requests_for_operator(self, db, roster):
        rows = find_by_role_and_view(db, None, "Receptionist", "pending_requests")
        # Newest check-in first; no priority ordering for operators
        assert _names(rows) == ["Lia Leaving", "Edo Editing"]

    def test_pending_deletion_view(self, db, roster):
        rows = find_by_role_and_view(db, None, "Manager", "pending_deletion")
        assert _names(rows) == ["Lia Leaving"]
        assert rows[0].computed_status == "pending_delete"
        assert rows[0].pending_deletion.reason == "duplicate entry"
        assert rows[0].pending_deletion.requested_by_name == "Rina Receptionist"
        assert rows[0].pending_deletion.requested_by_role == "Receptionist"

    def test_pending_edit_view(self, db, roster):
        rows = find_by_role_and_view(db, None, "Admin", "pending_edit")
        assert _names(rows) == ["Edo Editing"]
        assert rows[0].pending_edit.reason == "Purpose clarified with host"

    def test_deleted_view(self, db, roster):
        rows = find_by_role_and_view(db, None, "Admin", "deleted")
        assert _names(rows) == ["Gus Gone"]
        assert rows[0].computed_status == "deleted"
        assert rows[0].deleted_by_name == "Adi Admin"
        assert rows[0].deleted_at is not None

    def test_all_view_orders_by_priority(self, db, roster):
        rows = find_by_role_and_view(db, None, "Admin", "all")
        assert [row.computed_status for row in rows] == ["pending_delete", "pending_edit", "active", "deleted"]

    def test_default_view_is_active(self, db, roster):
        assert _names(find_by_role_and_view(db, None, "Admin")) == ["Ani Active"]


class TestComputedStatus:
    def test_resolved_request_does_not_mask_pending_one(self, db, actors):
        """A rejected deletion plus a pending edit classifies as pending_edit."""
        visitor = make_visitor(db, actors.receptionist)
        deletion = workflow_service.create_deletion_request(db, visitor.id, "duplicate entry", actors.receptionist)
        workflow_service.reject_request(db, deletion.id, "deletion", actors.admin, "Not a duplicate")
        workflow_service.create_edit_request(
            db, visitor.id, {"purpose": "Interview"}, "Purpose clarified with host", actors.receptionist,
        )

        rows = find_by_role_and_view(db, None, "Admin", "all")
        assert len(rows) == 1
        assert rows[0].computed_status == "pending_edit"
        assert rows[0].pending_deletion is None
        assert rows[0].pending_edit is not None

    def test_pending_delete_wins_over_pending_edit(self, db, actors):
        visitor = make_visitor(db, actors.receptionist)
        workflow_service.create_edit_request(
            db, visitor.id, {"purpose": "Interview"}, "Purpose clarified with host", actors.receptionist,
        )
        workflow_service.create_deletion_request(db, visitor.id, "duplicate entry", actors.receptionist)

        rows = find_by_role_and_view(db, None, "Admin", "all")
        assert rows[0].computed_status == "pending_delete"
        assert rows[0].pending_edit is not None
        # Listed under both pending views
        assert len(find_by_role_and_view(db, None, "Admin", "pending_edit")) == 1
        assert len(find_by_role_and_view(db, None, "Admin", "pending_deletion")) == 1

    def test_deleted_wins_over_pending_edit(self, db, actors):
        visitor = make_visitor(db, actors.receptionist)
        workflow_service.create_edit_request(
            db, visitor.id, {"purpose": "Interview"}, "Purpose clarified with host", actors.receptionist,
        )
        deletion = workflow_service.create_deletion_request(db, visitor.id, "duplicate entry", actors.receptionist)
        workflow_service.approve_deletion_request(db, deletion.id, actors.admin)

        rows = find_by_role_and_view(db, None, "Admin", "all")
        assert rows[0].computed_status == "deleted"


class TestFilters:
    def test_search_matches_name_institution_or_purpose(self, db, actors):
        make_visitor(db, actors.receptionist, full_name="Sari Dewi", institution="Bank Mandiri")
        make_visitor(db, actors.receptionist, full_name="Joko Widodo", purpose="Mandiri account review")
        make_visitor(db, actors.receptionist, full_name="Tono Hartono")

        rows = find_by_role_and_view(db, VisitorFilters(search="mandiri"), "Admin", "all")
        assert sorted(_names(rows)) == ["Joko Widodo", "Sari Dewi"]

    def test_search_treats_wildcards_literally(self, db, actors):
        make_visitor(db, actors.receptionist, full_name="Promo 50% Team")
        make_visitor(db, actors.receptionist, full_name="Promo 500 Team")
        make_visitor(db, actors.receptionist, full_name="Site_A Crew")
        make_visitor(db, actors.receptionist, full_name="SiteBA Crew")

        assert _names(find_by_role_and_view(db, VisitorFilters(search="50%"), "Admin", "all")) == ["Promo 50% Team"]
        assert _names(find_by_role_and_view(db, VisitorFilters(search="site_a"), "Admin", "all")) == ["Site_A Crew"]

    def test_location_filter_treats_wildcards_literally(self, db, actors):
        make_visitor(db, actors.receptionist, full_name="Ani", location="Room 1_2")
        make_visitor(db, actors.receptionist, full_name="Budi", location="Room 102")

        rows = find_by_role_and_view(db, VisitorFilters(location="1_2"), "Admin", "all")
        assert _names(rows) == ["Ani"]

    def test_location_filter(self, db, roster):
        rows = find_by_role_and_view(db, VisitorFilters(location="annex"), "Admin", "all")
        assert _names(rows) == ["Lia Leaving"]

    def test_date_range(self, db, roster):
        filters = VisitorFilters(
            start_date=BASE_TIME + timedelta(minutes=30),
            end_date=BASE_TIME + timedelta(hours=2, minutes=30),
        )
        rows = find_by_role_and_view(db, filters, "Admin", "all")
        assert sorted(_names(rows)) == ["Edo Editing", "Lia Leaving"]

    def test_limit(self, db, roster):
        rows = find_by_role_and_view(db, VisitorFilters(limit=2), "Admin", "all")
        assert [row.computed_status for row in rows] == ["pending_delete", "pending_edit"]
