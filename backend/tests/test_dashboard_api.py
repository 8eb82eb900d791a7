"""Tests for GET /api/dashboard."""

import pytest

from app.services.dashboard import overall_progress
from conftest import auth_headers, register


class TestOverallProgress:
    def test_empty(self):
        assert overall_progress([]) == 0

    def test_rounded_mean(self):
        assert overall_progress([75, 60, 85]) == 73
        assert overall_progress([50, 51]) == 50


class TestDashboard:
    @pytest.mark.asyncio
    async def test_requires_auth(self, client):
        response = await client.get("/api/dashboard")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_new_student_dashboard_is_empty(self, client):
        student = await register(client)

        response = await client.get("/api/dashboard", headers=auth_headers(student))

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["name"] == "Asha Verma"
        assert data["user"]["studentProfile"]["gradeLevel"] == "SECONDARY_8"
        assert data["stats"] == {
            "activeSubjects": 0,
            "overallProgress": 0,
            "pendingAssignments": 0,
            "completedAssignments": 0,
            "conversations": 0,
        }
        assert data["subjects"] == []
        assert data["upcomingAssignments"] == []

    @pytest.mark.asyncio
    async def test_student_dashboard(self, client, fake_llm):
        teacher = await register(
            client, email="meera@example.com", role="TEACHER", gradeLevel=None
        )
        student = await register(client)
        headers = auth_headers(student)

        subjects = {}
        for name in ("Science", "Mathematics"):
            response = await client.post(
                "/api/subjects", json={"name": name}, headers=auth_headers(teacher)
            )
            subjects[name] = response.json()["id"]

        await client.put(
            f"/api/subjects/{subjects['Mathematics']}/progress",
            json={"progress": 75},
            headers=headers,
        )
        await client.put(
            f"/api/subjects/{subjects['Science']}/progress",
            json={"progress": 60},
            headers=headers,
        )

        done = await client.post(
            "/api/assignments",
            json={"subjectId": subjects["Science"], "title": "Lab report", "dueDate": "2026-10-20"},
            headers=headers,
        )
        await client.patch(
            f"/api/assignments/{done.json()['id']}", json={"status": "completed"}, headers=headers
        )
        await client.post(
            "/api/assignments",
            json={"subjectId": subjects["Mathematics"], "title": "Algebra quiz", "dueDate": "2026-10-25"},
            headers=headers,
        )
        await client.post("/api/ai/chat", json={"message": "Hi tutor"}, headers=headers)

        response = await client.get("/api/dashboard", headers=headers)

        data = response.json()
        assert data["stats"] == {
            "activeSubjects": 2,
            "overallProgress": 68,
            "pendingAssignments": 1,
            "completedAssignments": 1,
            "conversations": 1,
        }
        assert [s["name"] for s in data["subjects"]] == ["Mathematics", "Science"]
        assert [a["title"] for a in data["upcomingAssignments"]] == ["Algebra quiz"]
        assert data["upcomingAssignments"][0]["subject"] == "Mathematics"
        assert [c["title"] for c in data["recentConversations"]] == ["Hi tutor"]

    @pytest.mark.asyncio
    async def test_parent_dashboard_has_no_student_sections(self, client):
        parent = await register(client, role="PARENT", gradeLevel=None, occupation="Doctor")

        response = await client.get("/api/dashboard", headers=auth_headers(parent))

        data = response.json()
        assert data["user"]["parentProfile"]["occupation"] == "Doctor"
        assert data["subjects"] == []
        assert data["stats"]["activeSubjects"] == 0
