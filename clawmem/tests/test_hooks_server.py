"""
Tests for the hook server

Drives the FastAPI app with TestClient; the plugin is injected with the
in-memory worker.
"""

import pytest
from fastapi.testclient import TestClient


DECISION = "We decided to use SQLite for storage, it's much simpler than the alternatives we considered"


@pytest.fixture
def client(plugin):
    from clawmem.hooks_server import create_app

    with TestClient(create_app(plugin=plugin)) as test_client:
        yield test_client


class TestHookServer:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["initialized"] is True
        assert body["auto_recall"] is True

    def test_before_agent_start_with_memories(self, client, fake_worker):
        fake_worker.add("We decided on a write-through caching layer", type="decision")

        response = client.post(
            "/hooks/before_agent_start",
            json={"prompt": "What did we decide about [message_id: ab12-cd34] the caching layer?"},
        )

        assert response.status_code == 200
        context = response.json()["prependContext"]
        assert "<relevant-memories>" in context
        assert "write-through caching layer" in context

    def test_before_agent_start_short_prompt(self, client):
        response = client.post("/hooks/before_agent_start", json={"prompt": "hi"})

        assert response.status_code == 200
        assert response.json() == {}

    def test_before_agent_start_worker_down(self, client, fake_worker):
        fake_worker.down = True

        response = client.post("/hooks/before_agent_start", json={"prompt": "What about caching?"})

        assert response.status_code == 200
        assert response.json() == {}

    def test_agent_end(self, client, fake_worker):
        response = client.post("/hooks/agent_end", json={
            "messages": [{"role": "user", "content": DECISION}],
            "success": True,
            "sessionKey": "chat-42",
        })

        assert response.status_code == 200
        assert response.json() == {"ok": True, "stored": 1}
        assert "chat-42" in fake_worker.sessions

    def test_agent_end_failure_is_swallowed(self, client, fake_worker):
        fake_worker.fail_store_on_call = 1

        response = client.post("/hooks/agent_end", json={
            "messages": [{"role": "user", "content": DECISION}],
        })

        assert response.status_code == 200
        assert response.json() == {"ok": True, "stored": 0}

    def test_stats(self, client, fake_worker):
        fake_worker.add("a")

        response = client.get("/stats")

        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert body["details"]["observations"] == 1


class TestUninitialized:

    def test_hooks_unavailable_without_plugin(self):
        from clawmem.hooks_server import create_app

        # No lifespan: the plugin is never built
        client = TestClient(create_app())

        assert client.get("/health").json()["initialized"] is False
        assert client.post("/hooks/before_agent_start", json={"prompt": "x"}).status_code == 503

    def test_lifespan_builds_plugin_and_config_dir(self, plugin, config):
        from unittest.mock import patch
        from clawmem.hooks_server import create_app

        with patch("clawmem.hooks_server.ensure_directories") as ensure_dirs, \
             patch("clawmem.hooks_server.MemoryPlugin.from_config", return_value=plugin) as build:
            with TestClient(create_app(config=config)) as client:
                assert client.get("/health").json()["initialized"] is True

        ensure_dirs.assert_called_once_with()
        build.assert_called_once_with(config)
