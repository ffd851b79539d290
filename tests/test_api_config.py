"""Tests for /api/config"""

CONFIG = {
    "featureFlags": {"experimentalAI": False, "slackIntegration": True, "plannerIntegration": False},
    "timers": {"FOCUS": 3000, "SHORT_BREAK": 600, "LONG_BREAK": 1200, "CUSTOM": 900},
}


class TestConfigApi:
    def test_unknown_user_gets_defaults(self, client, user_id):
        response = client.get("/api/config", params={"userId": user_id})

        assert response.status_code == 200
        assert response.json() == {
            "featureFlags": {"experimentalAI": True, "slackIntegration": False, "plannerIntegration": True},
            "timers": {"FOCUS": 1500, "SHORT_BREAK": 300, "LONG_BREAK": 900, "CUSTOM": 1200},
        }

    def test_put_then_get(self, client, user_id):
        response = client.put("/api/config", json={"userId": user_id, "config": CONFIG})
        assert response.status_code == 200
        assert response.json() == CONFIG

        assert client.get("/api/config", params={"userId": user_id}).json() == CONFIG

    def test_put_replaces_previous_config(self, client, user_id):
        client.put("/api/config", json={"userId": user_id, "config": CONFIG})
        client.put("/api/config", json={"userId": user_id, "config": {"timers": {"focus": 600}}})

        stored = client.get("/api/config", params={"userId": user_id}).json()
        assert stored["timers"]["FOCUS"] == 600
        assert stored["timers"]["SHORT_BREAK"] == 300
        assert stored["featureFlags"]["experimentalAI"] is True

    def test_missing_user_id(self, client):
        response = client.get("/api/config")

        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields"

    def test_missing_config(self, client, user_id):
        response = client.put("/api/config", json={"userId": user_id})

        assert response.status_code == 400

    def test_non_positive_duration_rejected(self, client, user_id):
        response = client.put(
            "/api/config", json={"userId": user_id, "config": {"timers": {"FOCUS": 0}}}
        )

        assert response.status_code == 400

    def test_method_not_allowed(self, client):
        response = client.delete("/api/config")

        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}
