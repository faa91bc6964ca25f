"""
Memory Worker Client

Async HTTP client for the ClawMem worker service (SQLite + FTS5 storage).
All persistence is delegated to the worker; this client only speaks its
JSON API.

Uses httpx.AsyncClient, created lazily on first use and reused for every
call (connection pooled internally by httpx).

Error model:
- WorkerUnavailable: worker unreachable or timed out
- RequestFailed: worker answered with a non-2xx status
- ObservationNotFound: 404 on an id-addressed call
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from .config import DEFAULT_WORKER_URL
from .schemas import MemoryStats, Observation, ObservationDraft

logger = logging.getLogger("clawmem.worker")


class WorkerError(Exception):
    """Error communicating with the memory worker."""
    pass


class WorkerUnavailable(WorkerError):
    """Worker is unreachable, unhealthy or too slow to answer."""
    pass


class RequestFailed(WorkerError):
    """Worker answered with a non-2xx status."""

    def __init__(self, operation: str, status_code: int):
        super().__init__(f"{operation} failed: {status_code}")
        self.operation = operation
        self.status_code = status_code


class ObservationNotFound(WorkerError):
    """No observation exists with the requested id."""

    def __init__(self, observation_id: int):
        super().__init__(f"Observation #{observation_id} not found")
        self.observation_id = observation_id


class MemoryWorkerClient:
    """
    Async client for the memory worker service.

    Usage:
        client = MemoryWorkerClient("http://127.0.0.1:37778")
        if await client.health():
            results = await client.search("caching layer", limit=5)
        await client.aclose()
    """

    def __init__(
        self,
        worker_url: str = DEFAULT_WORKER_URL,
        health_timeout: float = 2.0,
        request_timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize worker client.

        Args:
            worker_url: Base URL of the worker service
            health_timeout: Timeout in seconds for liveness checks
            request_timeout: Timeout in seconds for every other call
            transport: Optional httpx transport (tests inject MockTransport)
        """
        self.worker_url = worker_url.rstrip("/")
        self.health_timeout = health_timeout
        self.request_timeout = request_timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Create the pooled AsyncClient if not yet created."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.worker_url,
                timeout=httpx.Timeout(self.request_timeout),
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        client = self._ensure_client()
        try:
            return await client.request(method, path, json=json)
        except httpx.TransportError as e:
            raise WorkerUnavailable(f"{operation}: {e.__class__.__name__}: {e}") from e

    async def health(self) -> bool:
        """
        Check if the worker is reachable and healthy.

        Never raises: any failure is reported as unhealthy.
        """
        client = self._ensure_client()
        try:
            response = await client.get("/api/health", timeout=self.health_timeout)
            return response.is_success
        except Exception as e:
            logger.debug("Worker health check failed: %s", e)
            return False

    async def search(self, query: str, limit: int = 10) -> List[Observation]:
        """
        Full-text search over stored observations.

        Args:
            query: FTS-safe query string
            limit: Maximum number of results

        Returns:
            Observations, most relevant first

        Raises:
            WorkerUnavailable, RequestFailed
        """
        response = await self._request(
            "POST", "/api/search", "Search", json={"query": query, "limit": limit}
        )
        if not response.is_success:
            raise RequestFailed("Search", response.status_code)
        data = response.json()
        return [Observation.model_validate(r) for r in data.get("results", [])]

    async def store(self, draft: ObservationDraft) -> Observation:
        """
        Store an observation, ensuring its session exists first.

        Returns:
            The stored Observation with its worker-assigned id

        Raises:
            WorkerUnavailable, RequestFailed
        """
        # Session creation is idempotent on the worker side; its status is not checked
        session_response = await self._request(
            "POST", "/api/sessions", "Session", json={"session_key": draft.session_key}
        )
        if not session_response.is_success:
            logger.debug(
                "Session ensure for %s returned %s", draft.session_key, session_response.status_code
            )

        response = await self._request(
            "POST",
            "/api/observations",
            "Store",
            json=draft.model_dump(exclude_none=True),
        )
        if not response.is_success:
            raise RequestFailed("Store", response.status_code)
        return Observation.model_validate(response.json())

    async def get_observation(self, observation_id: int) -> Observation:
        """
        Fetch a single observation by id.

        Raises:
            ObservationNotFound, WorkerUnavailable, RequestFailed
        """
        response = await self._request("GET", f"/api/observations/{observation_id}", "Get")
        if response.status_code == 404:
            raise ObservationNotFound(observation_id)
        if not response.is_success:
            raise RequestFailed("Get", response.status_code)
        return Observation.model_validate(response.json())

    async def delete_observation(self, observation_id: int) -> None:
        """
        Delete a single observation by id.

        Raises:
            ObservationNotFound, WorkerUnavailable, RequestFailed
        """
        response = await self._request("DELETE", f"/api/observations/{observation_id}", "Delete")
        if response.status_code == 404:
            raise ObservationNotFound(observation_id)
        if not response.is_success:
            raise RequestFailed("Delete", response.status_code)

    async def stats(self) -> MemoryStats:
        """
        Aggregate session and observation counts.

        Raises:
            WorkerUnavailable, RequestFailed
        """
        response = await self._request("GET", "/api/stats", "Stats")
        if not response.is_success:
            raise RequestFailed("Stats", response.status_code)
        return MemoryStats.model_validate(response.json())


def create_worker_client(config) -> MemoryWorkerClient:
    """
    Factory function to create a worker client from ClawMemConfig.

    Args:
        config: ClawMemConfig (only the worker section is read)

    Returns:
        MemoryWorkerClient
    """
    return MemoryWorkerClient(
        worker_url=config.worker.url,
        health_timeout=config.worker.health_timeout,
        request_timeout=config.worker.request_timeout,
    )
