"""Tests for /api/tasks"""

import uuid


def task(**overrides):
    body = {"id": str(uuid.uuid4()), "text": "Read the scheduler docs", "status": "TODO", "priority": "HIGH"}
    body.update(overrides)
    return body


def create(client, user_id, body):
    return client.post("/api/tasks", json={"userId": user_id, "task": body})


class TestTasksApi:
    def test_create_and_list_newest_first(self, client, user_id):
        first = task(startDate=1_000)
        second = task(startDate=2_000, text="Write a kind cluster lab")

        created = create(client, user_id, first)
        create(client, user_id, second)

        assert created.status_code == 201
        assert created.json()["completed"] is False
        listed = client.get("/api/tasks", params={"userId": user_id}).json()
        assert [t["id"] for t in listed] == [second["id"], first["id"]]

    def test_defaults_filled(self, client, user_id):
        body = {"id": str(uuid.uuid4()), "text": "Minimal"}

        created = create(client, user_id, body).json()

        assert created["priority"] == "MEDIUM"
        assert created["status"] == "TODO"
        assert created["startDate"] > 0

    def test_title_and_due_date_aliases(self, client, user_id):
        body = {"id": str(uuid.uuid4()), "title": "From the table", "dueDate": "2024-06-01"}

        created = create(client, user_id, body).json()

        assert created["text"] == "From the table"
        assert created["targetDate"] == "2024-06-01"

    def test_duplicate_id_conflicts(self, client, user_id):
        body = task()
        create(client, user_id, body)

        assert create(client, user_id, body).status_code == 409

    def test_update(self, client, user_id):
        body = task(startDate=1_000)
        create(client, user_id, body)

        response = client.put(
            "/api/tasks",
            params={"id": body["id"]},
            json={"userId": user_id, "task": dict(body, status="DONE", text="Done reading")},
        )

        assert response.status_code == 200
        assert response.json()["completed"] is True
        assert response.json()["startDate"] == 1_000
        stored = client.get("/api/tasks", params={"userId": user_id}).json()[0]
        assert stored["text"] == "Done reading"

    def test_update_of_foreign_task_not_found(self, client, user_id):
        body = task()
        create(client, user_id, body)

        response = client.put(
            "/api/tasks", params={"id": body["id"]}, json={"userId": f"{user_id}-other", "task": body}
        )

        assert response.status_code == 404

    def test_delete(self, client, user_id):
        body = task()
        create(client, user_id, body)

        response = client.delete("/api/tasks", params={"id": body["id"], "userId": user_id})

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert client.get("/api/tasks", params={"userId": user_id}).json() == []

    def test_delete_of_foreign_task_not_found(self, client, user_id):
        body = task()
        create(client, user_id, body)

        response = client.delete("/api/tasks", params={"id": body["id"], "userId": f"{user_id}-other"})

        assert response.status_code == 404
        assert len(client.get("/api/tasks", params={"userId": user_id}).json()) == 1

    def test_empty_text_rejected(self, client, user_id):
        assert create(client, user_id, task(text="")).status_code == 400
