"""Performance log and analytics API tests."""

from datetime import datetime, timedelta, timezone

import pytest

from smartsprint.models import db
from smartsprint.models.activity import PerformanceLog
from smartsprint.models.enums import TaskStatus
from smartsprint.models.project import Project, Task


@pytest.fixture()
def logged(project, task, dev, other_dev):
    """Two projects worth of logs for the Backend team."""
    side = Project(name="Gemini")
    db.session.add(side)
    side_task = Task(project=side, title="Side quest", status=TaskStatus.IN_PROGRESS, assigned_to=dev.id)
    db.session.add(side_task)
    db.session.flush()

    now = datetime.now(timezone.utc)
    db.session.add_all([
        PerformanceLog(user_id=dev.id, task_id=task.id, time_spent=30, recorded_at=now - timedelta(hours=3)),
        PerformanceLog(user_id=dev.id, task_id=task.id, time_spent=60, recorded_at=now - timedelta(hours=2)),
        PerformanceLog(user_id=dev.id, task_id=side_task.id, time_spent=45, recorded_at=now - timedelta(hours=1)),
        PerformanceLog(user_id=other_dev.id, task_id=task.id, time_spent=15, recorded_at=now),
    ])
    db.session.commit()
    return {"side": side, "side_task": side_task}


class TestLogs:
    def test_user_logs_newest_first_with_task(self, client, dev, task, logged, auth_headers):
        res = client.get(f"/api/performance/user/{dev.id}/logs", headers=auth_headers(dev))
        assert res.status_code == 200
        logs = res.get_json()
        assert [log["time_spent"] for log in logs] == [45, 60, 30]
        assert logs[0]["task"]["project"]["name"] == "Gemini"
        assert logs[1]["task"]["id"] == task.id

    def test_other_developer_cannot_view(self, client, dev, other_dev, logged, auth_headers):
        res = client.get(f"/api/performance/user/{dev.id}/logs", headers=auth_headers(other_dev))
        assert res.status_code == 403

    def test_pm_views_anyone(self, client, pm, dev, logged, auth_headers):
        res = client.get(f"/api/performance/user/{dev.id}/logs", headers=auth_headers(pm))
        assert res.status_code == 200

    def test_unknown_user_404(self, client, admin, auth_headers):
        assert client.get("/api/performance/user/999/logs", headers=auth_headers(admin)).status_code == 404

    def test_task_logs_with_user(self, client, tester, task, logged, auth_headers):
        res = client.get(f"/api/performance/task/{task.id}/logs", headers=auth_headers(tester))
        assert res.status_code == 200
        logs = res.get_json()
        assert [log["time_spent"] for log in logs] == [15, 60, 30]
        assert logs[0]["user"]["name"] == "Omar Other"

    def test_project_logs(self, client, admin, project, logged, auth_headers):
        res = client.get(f"/api/performance/project/{project.id}/logs", headers=auth_headers(admin))
        assert res.status_code == 200
        assert sorted(log["time_spent"] for log in res.get_json()) == [15, 30, 60]

    def test_project_logs_unknown_404(self, client, admin, auth_headers):
        assert client.get("/api/performance/project/999/logs", headers=auth_headers(admin)).status_code == 404


class TestUserAnalytics:
    def test_sums_and_average(self, client, dev, project, logged, auth_headers):
        res = client.get(f"/api/performance/user/{dev.id}/analytics", headers=auth_headers(dev))
        assert res.status_code == 200
        body = res.get_json()
        assert body["user_id"] == dev.id
        assert body["team"] == "Backend"
        assert body["time_by_task_status"] == [
            {"status": "Created", "total_time": 90},
            {"status": "In Progress", "total_time": 45},
        ]
        assert body["time_by_project"] == [
            {"project_id": project.id, "project_name": "Apollo", "total_time": 90},
            {"project_id": logged["side"].id, "project_name": "Gemini", "total_time": 45},
        ]
        assert body["avg_time_per_task"] == 45.0

    def test_no_logs(self, client, tester, auth_headers):
        body = client.get(f"/api/performance/user/{tester.id}/analytics", headers=auth_headers(tester)).get_json()
        assert body["time_by_task_status"] == []
        assert body["time_by_project"] == []
        assert body["avg_time_per_task"] == 0

    def test_other_developer_denied(self, client, dev, other_dev, auth_headers):
        res = client.get(f"/api/performance/user/{dev.id}/analytics", headers=auth_headers(other_dev))
        assert res.status_code == 403


class TestTeamAnalytics:
    def test_backend_team(self, client, pm, dev, other_dev, project, logged, auth_headers):
        res = client.get("/api/performance/team/Backend/analytics", headers=auth_headers(pm))
        assert res.status_code == 200
        body = res.get_json()
        assert body["team"] == "Backend"
        assert body["time_by_user"] == [
            {"user_id": dev.id, "name": "Dana Dev", "level": "Senior", "total_time": 135},
            {"user_id": other_dev.id, "name": "Omar Other", "level": "Junior", "total_time": 15},
        ]
        assert body["time_by_project"] == [
            {"project_id": project.id, "project_name": "Apollo", "total_time": 105},
            {"project_id": logged["side"].id, "project_name": "Gemini", "total_time": 45},
        ]

    def test_empty_team(self, client, admin, auth_headers):
        body = client.get("/api/performance/team/Design/analytics", headers=auth_headers(admin)).get_json()
        assert body == {"team": "Design", "time_by_user": [], "time_by_project": []}

    def test_unknown_team_400(self, client, admin, auth_headers):
        res = client.get("/api/performance/team/Sales/analytics", headers=auth_headers(admin))
        assert res.status_code == 400

    def test_developer_denied(self, client, dev, auth_headers):
        res = client.get("/api/performance/team/Backend/analytics", headers=auth_headers(dev))
        assert res.status_code == 403


class TestRecommendations:
    @pytest.mark.parametrize("who", ["admin", "pm"])
    def test_privileged_get_placeholder(self, client, request, auth_headers, who):
        caller = request.getfixturevalue(who)
        res = client.get("/api/performance/ai/recommendations", headers=auth_headers(caller))
        assert res.status_code == 200
        body = res.get_json()
        assert "Placeholder" in body["message"]
        assert len(body["recommendations"]) == 2

    @pytest.mark.parametrize("who", ["dev", "tester"])
    def test_unprivileged_denied(self, client, request, auth_headers, who):
        caller = request.getfixturevalue(who)
        res = client.get("/api/performance/ai/recommendations", headers=auth_headers(caller))
        assert res.status_code == 403
        assert res.get_json()["message"] == "Not authorized to access AI recommendations"

    def test_requires_auth(self, client):
        assert client.get("/api/performance/ai/recommendations").status_code == 401
