"""Integration tests for goal, task and note endpoints."""
import pytest

from app.db.models.task import Task


@pytest.fixture
def account_id(client):
    """Create an account and return its id."""
    response = client.post("/api/v1/accounts", json={"accountName": "Tech Innovators Inc"})
    assert response.status_code == 201
    return response.json()["accountId"]


class TestGoalsEndpoints:
    """Tests for goal endpoints."""

    def test_create_and_list_goals(self, client, account_id):
        """Test adding goals keeps their order."""
        for description in ["First goal", "Second goal"]:
            response = client.post(f"/api/v1/accounts/{account_id}/goals", json={
                "description": description,
                "progress": "40%",
                "dueDate": "2024-09-30",
            })
            assert response.status_code == 201
            assert response.json()["progress"] == 40
            assert response.json()["accountId"] == account_id

        response = client.get(f"/api/v1/accounts/{account_id}/goals")
        assert response.status_code == 200
        assert [goal["description"] for goal in response.json()] == ["First goal", "Second goal"]

    def test_update_goal_changes_account_progress(self, client, account_id):
        """Test goal progress feeds the account's average."""
        goal = client.post(f"/api/v1/accounts/{account_id}/goals", json={"description": "Goal"}).json()

        response = client.put(f"/api/v1/goals/{goal['goalId']}", json={"progress": 80, "status": "IN_PROGRESS"})
        assert response.status_code == 200
        assert response.json()["progress"] == 80
        assert response.json()["status"] == "IN_PROGRESS"

        account = client.get(f"/api/v1/accounts/{account_id}").json()
        assert account["goalProgress"] == 80

    def test_update_goal_rejects_bad_progress(self, client, account_id):
        """Test goal progress must stay within 0..100."""
        goal = client.post(f"/api/v1/accounts/{account_id}/goals", json={"description": "Goal"}).json()
        response = client.put(f"/api/v1/goals/{goal['goalId']}", json={"progress": 101})
        assert response.status_code == 422

    def test_delete_goal(self, client, account_id):
        """Test deleting a goal."""
        goal = client.post(f"/api/v1/accounts/{account_id}/goals", json={"description": "Goal"}).json()

        response = client.delete(f"/api/v1/goals/{goal['goalId']}")
        assert response.status_code == 204
        assert client.get(f"/api/v1/accounts/{account_id}/goals").json() == []

    def test_goal_not_found(self, client, account_id):
        """Test missing goals and accounts give 404."""
        assert client.put("/api/v1/goals/99999", json={"progress": 10}).status_code == 404
        assert client.delete("/api/v1/goals/99999").status_code == 404
        assert client.get("/api/v1/accounts/does-not-exist/goals").status_code == 404


class TestTasksEndpoints:
    """Tests for task endpoints."""

    def test_create_task(self, client, account_id):
        """Test creating a task."""
        response = client.post(f"/api/v1/accounts/{account_id}/tasks", json={
            "name": "Website Redesign",
            "description": "Complete homepage redesign",
            "assignee": "John Smith",
            "dueDate": "2024-03-01",
        })
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Website Redesign"
        assert data["status"] == "NOT_STARTED"
        assert data["completedAt"] is None
        assert data["dueDate"] == "2024-03-01"

    def test_completing_a_task_stamps_completed_at(self, client, db_session, account_id):
        """Test completed_at follows the task status."""
        task = client.post(f"/api/v1/accounts/{account_id}/tasks", json={"name": "Kickoff"}).json()

        response = client.put(f"/api/v1/tasks/{task['taskId']}", json={"status": "COMPLETED"})
        assert response.status_code == 200
        assert response.json()["completedAt"] is not None

        stored = db_session.query(Task).filter(Task.task_id == task["taskId"]).first()
        assert stored.completed_at is not None

        response = client.put(f"/api/v1/tasks/{task['taskId']}", json={"status": "IN_PROGRESS"})
        assert response.json()["completedAt"] is None

    def test_list_tasks_by_status(self, client, account_id):
        """Test filtering tasks by status."""
        client.post(f"/api/v1/accounts/{account_id}/tasks", json={"name": "Open"})
        client.post(f"/api/v1/accounts/{account_id}/tasks", json={"name": "Done", "status": "COMPLETED"})

        response = client.get(f"/api/v1/accounts/{account_id}/tasks")
        assert len(response.json()) == 2

        response = client.get(f"/api/v1/accounts/{account_id}/tasks?status=COMPLETED")
        data = response.json()
        assert [task["name"] for task in data] == ["Done"]
        assert data[0]["completedAt"] is not None

    def test_create_task_requires_name(self, client, account_id):
        """Test a task needs a name."""
        response = client.post(f"/api/v1/accounts/{account_id}/tasks", json={"name": ""})
        assert response.status_code == 422

    def test_delete_task(self, client, account_id):
        """Test deleting a task."""
        task = client.post(f"/api/v1/accounts/{account_id}/tasks", json={"name": "Kickoff"}).json()
        assert client.delete(f"/api/v1/tasks/{task['taskId']}").status_code == 204
        assert client.delete(f"/api/v1/tasks/{task['taskId']}").status_code == 404


class TestNotesEndpoints:
    """Tests for note endpoints."""

    def test_create_and_list_notes(self, client, account_id):
        """Test notes are listed newest first."""
        for description in ["Kickoff call went well", "Client asked for a QBR"]:
            response = client.post(f"/api/v1/accounts/{account_id}/notes", json={
                "description": description,
                "createdBy": "Emily Brown",
            })
            assert response.status_code == 201
            assert response.json()["createdBy"] == "Emily Brown"

        response = client.get(f"/api/v1/accounts/{account_id}/notes")
        assert [note["description"] for note in response.json()] == [
            "Client asked for a QBR", "Kickoff call went well"
        ]

    def test_delete_note(self, client, account_id):
        """Test deleting a note."""
        note = client.post(f"/api/v1/accounts/{account_id}/notes", json={"description": "Note"}).json()
        assert client.delete(f"/api/v1/notes/{note['noteId']}").status_code == 204
        assert client.get(f"/api/v1/accounts/{account_id}/notes").json() == []

    def test_deleting_account_removes_children(self, client, db_session, account_id):
        """Test account deletion cascades to tasks and notes."""
        client.post(f"/api/v1/accounts/{account_id}/tasks", json={"name": "Kickoff"})
        client.post(f"/api/v1/accounts/{account_id}/notes", json={"description": "Note"})

        assert client.delete(f"/api/v1/accounts/{account_id}").status_code == 204
        assert db_session.query(Task).count() == 0
