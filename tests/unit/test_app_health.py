"""
Application Endpoint Tests

Health checks and service info.
"""

import dataclasses
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from main import app

client = TestClient(app)


def _bootstrap(config):
    bootstrap = MagicMock()
    bootstrap.config = config
    return bootstrap


class TestHealthEndpoints:

    def test_live(self):
        response = client.get("/health/live")
        assert response.status_code == 200
        assert response.json() == {"status": "alive"}

    def test_ready(self, app_config):
        with patch("main.get_bootstrap", return_value=_bootstrap(app_config)):
            response = client.get("/health/ready")

        assert response.status_code == 200
        assert response.json() == {"status": "ready"}

    def test_not_ready_without_secret(self, app_config):
        config = dataclasses.replace(app_config, slack_signing_secret="")
        with patch("main.get_bootstrap", return_value=_bootstrap(config)):
            response = client.get("/health/ready")

        assert response.status_code == 503
        assert response.json() == {"status": "not_ready", "missing": ["SLACK_SIGNING_SECRET"]}

    def test_root_lists_endpoints(self):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["endpoints"]["slack_actions"] == "POST /slack/actions"
