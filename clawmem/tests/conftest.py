"""
Shared fixtures: an in-memory memory worker served through httpx.MockTransport.

The real MemoryWorkerClient runs against it, so tests exercise the actual
HTTP request/response handling without a network.
"""

import asyncio
import json
from typing import Any, Dict, List, Optional

import httpx
import pytest


class FakeWorker:
    """Minimal stand-in for the worker's JSON API"""

    def __init__(self):
        self.sessions: Dict[str, int] = {}
        self.observations: Dict[int, Dict[str, Any]] = {}
        self.requests: List[httpx.Request] = []
        self.search_queries: List[Dict[str, Any]] = []
        self.search_results: Optional[List[Dict[str, Any]]] = None
        self.healthy = True
        self.down = False
        self.delay = 0.0
        self.fail_store_on_call: Optional[int] = None
        self.fail_search = False
        self.store_calls = 0
        self._next_id = 1

    @property
    def stored_outputs(self) -> List[str]:
        return [o["output"] for o in self.observations.values()]

    def add(self, output: str, type: str = "observation", summary: Optional[str] = None) -> int:
        observation_id = self._next_id
        self._next_id += 1
        self.observations[observation_id] = {
            "id": observation_id,
            "session_id": 1,
            "type": type,
            "summary": summary if summary is not None else output,
            "output": output,
            "importance": 5,
            "created_at": "2026-01-01T00:00:00Z",
        }
        return observation_id

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.down:
            raise httpx.ConnectError("connection refused", request=request)

        path = request.url.path
        method = request.method

        if path == "/api/health":
            return httpx.Response(200 if self.healthy else 503, json={"status": "ok"})

        if path == "/api/sessions" and method == "POST":
            key = json.loads(request.content)["session_key"]
            self.sessions.setdefault(key, len(self.sessions) + 1)
            return httpx.Response(200, json={"id": self.sessions[key]})

        if path == "/api/observations" and method == "POST":
            self.store_calls += 1
            if self.fail_store_on_call == self.store_calls:
                return httpx.Response(500, json={"error": "disk full"})
            body = json.loads(request.content)
            observation_id = self.add(body["output"], type=body["type"], summary=body["summary"])
            self.observations[observation_id]["importance"] = body.get("importance", 5)
            self.observations[observation_id]["session_id"] = self.sessions.get(body["session_key"])
            return httpx.Response(200, json=self.observations[observation_id])

        if path == "/api/search" and method == "POST":
            body = json.loads(request.content)
            self.search_queries.append(body)
            if self.fail_search:
                return httpx.Response(500, json={"error": "fts5: syntax error"})
            if self.search_results is not None:
                results = self.search_results
            else:
                words = [w.lower() for w in body["query"].split()]
                results = [
                    o for o in self.observations.values()
                    if any(w in o["output"].lower() for w in words)
                ]
            return httpx.Response(200, json={"results": results[: body.get("limit", 10)]})

        if path.startswith("/api/observations/"):
            observation_id = int(path.rsplit("/", 1)[-1])
            if observation_id not in self.observations:
                return httpx.Response(404, json={"error": "not found"})
            if method == "DELETE":
                del self.observations[observation_id]
                return httpx.Response(200, json={"success": True})
            return httpx.Response(200, json=self.observations[observation_id])

        if path == "/api/stats":
            return httpx.Response(200, json={
                "totalSessions": len(self.sessions),
                "totalObservations": len(self.observations),
            })

        return httpx.Response(404, json={"error": "unknown route"})


@pytest.fixture
def fake_worker():
    return FakeWorker()


@pytest.fixture
def worker_client(fake_worker):
    from clawmem.common.worker_client import MemoryWorkerClient

    return MemoryWorkerClient(
        "http://fake-worker:37778",
        transport=httpx.MockTransport(fake_worker.handler),
    )


@pytest.fixture
def config():
    from clawmem.common.config import ClawMemConfig

    cfg = ClawMemConfig()
    cfg.worker.url = "http://fake-worker:37778"
    return cfg


@pytest.fixture
def plugin(config, worker_client):
    from clawmem.plugin import MemoryPlugin

    return MemoryPlugin(config=config, client=worker_client)
