"""
Tests for application endpoints.
"""

from datetime import timedelta

from volunteer_system.models import Activity


def apply(client, activity_id, user_id):
    return client.post(f"/activities/{activity_id}/apply", json={"user_id": user_id})


def set_status(client, application_id, status, handler_id):
    return client.post(
        f"/applications/{application_id}/status",
        json={"status": status, "handler_id": handler_id},
    )


class TestApply:

    def test_apply_returns_201_pending(self, client, make_user, make_activity):
        activity = make_activity()
        volunteer = make_user("alice")

        response = apply(client, activity.id, volunteer.id)

        assert response.status_code == 201
        assert response.json()["current_status"] == "pending"

    def test_second_apply_returns_400(self, client, make_user, make_activity):
        activity = make_activity()
        volunteer = make_user("alice")
        apply(client, activity.id, volunteer.id)

        response = apply(client, activity.id, volunteer.id)

        assert response.status_code == 400
        assert response.json()["detail"] == "already applied"

    def test_past_activity_returns_400(self, client, make_user, make_activity):
        activity = make_activity(starts_in=timedelta(hours=-1))

        response = apply(client, activity.id, make_user("alice").id)

        assert response.status_code == 400
        assert response.json()["detail"] == "activity expired"

    def test_unknown_activity_returns_404(self, client, make_user):
        assert apply(client, 999, make_user("alice").id).status_code == 404


class TestStatus:

    def test_approve_and_full(self, client, admin, make_user, make_activity):
        activity = make_activity(max_people=1)
        first = apply(client, activity.id, make_user("alice").id).json()["id"]
        second = apply(client, activity.id, make_user("bob").id).json()["id"]

        approved = set_status(client, first, "APPROVED", admin.id)
        refused = set_status(client, second, "approved", admin.id)

        assert approved.status_code == 200
        assert approved.json()["current_status"] == "approved"
        assert refused.status_code == 400
        assert refused.json()["detail"] == "activity full"

    def test_invalid_status_returns_400(self, client, admin, make_user, make_activity):
        activity = make_activity()
        application_id = apply(client, activity.id, make_user("alice").id).json()["id"]

        response = set_status(client, application_id, "done", admin.id)

        assert response.status_code == 400

    def test_unknown_application_returns_404(self, client, admin):
        assert set_status(client, 999, "approved", admin.id).status_code == 404

    def test_logs_endpoint_lists_history(self, client, admin, make_user, make_activity):
        activity = make_activity()
        volunteer = make_user("alice")
        application_id = apply(client, activity.id, volunteer.id).json()["id"]
        set_status(client, application_id, "rejected", admin.id)

        response = client.get(f"/applications/{application_id}/logs")

        assert response.status_code == 200
        logs = response.json()
        assert [log["log_status"] for log in logs] == ["pending", "rejected"]
        assert [log["handler_id"] for log in logs] == [volunteer.id, admin.id]


class TestCancel:

    def test_cancel_returns_204(self, client, make_user, make_activity):
        activity = make_activity()
        application_id = apply(client, activity.id, make_user("alice").id).json()["id"]

        response = client.delete(f"/applications/{application_id}")

        assert response.status_code == 204
        assert client.get(f"/applications/{application_id}/logs").status_code == 404

    def test_cancel_rejected_returns_400(self, client, admin, make_user, make_activity):
        activity = make_activity()
        application_id = apply(client, activity.id, make_user("alice").id).json()["id"]
        set_status(client, application_id, "rejected", admin.id)

        response = client.delete(f"/applications/{application_id}")

        assert response.status_code == 400
        assert response.json()["detail"] == "status does not allow cancellation"

    def test_cancel_after_start_returns_400(self, client, db_session, make_user, make_activity):
        activity = make_activity()
        application_id = apply(client, activity.id, make_user("alice").id).json()["id"]
        db_session.get(Activity, activity.id).activity_time -= timedelta(days=3)
        db_session.commit()

        response = client.delete(f"/applications/{application_id}")

        assert response.status_code == 400
        assert response.json()["detail"] == "activity already started, cannot cancel"


class TestListings:

    def test_activity_and_user_listings(self, client, make_user, make_activity):
        activity = make_activity(title="Food bank")
        volunteer = make_user("alice")
        apply(client, activity.id, volunteer.id)

        by_activity = client.get(f"/activities/{activity.id}/applications").json()
        by_user = client.get(f"/users/{volunteer.id}/applications").json()

        assert by_activity[0]["username"] == "alice"
        assert by_user[0]["title"] == "Food bank"
