"""
Searcher

Searches stored observations through the worker's full-text index.
Used both by the search action and by auto-recall before a turn.
"""

import logging
from typing import Iterable, List, Optional

from ..common.schemas import Observation
from ..common.worker_client import MemoryWorkerClient, WorkerUnavailable
from .query_processor import QueryProcessor

logger = logging.getLogger("clawmem.retriever.searcher")


class Searcher:
    """
    Searches memory via the worker.

    Features:
    - Prompt sanitization through QueryProcessor
    - Health check before auto-recall
    - Optional restriction of recalled context to selected types
    """

    def __init__(
        self,
        client: MemoryWorkerClient,
        processor: Optional[QueryProcessor] = None,
        recall_limit: int = 5,
        context_types: Optional[Iterable[str]] = None,
    ):
        """
        Initialize searcher.

        Args:
            client: Worker client for search calls
            processor: Query builder (default QueryProcessor())
            recall_limit: Number of results fetched for auto-recall
            context_types: Types allowed into recalled context (None/empty = all)
        """
        self._client = client
        self._processor = processor or QueryProcessor()
        self._recall_limit = recall_limit
        self._context_types = set(context_types or [])

    @classmethod
    def from_config(cls, client: MemoryWorkerClient, config) -> "Searcher":
        recall = config.recall
        return cls(
            client,
            processor=QueryProcessor(min_prompt_length=recall.min_prompt_length),
            recall_limit=recall.limit,
            context_types=recall.context_types,
        )

    async def search(self, query: str, limit: int = 10) -> List[Observation]:
        """Direct search; the query is passed through as given."""
        return await self._client.search(query, limit)

    async def recall(self, prompt: Optional[str]) -> List[Observation]:
        """
        Find memories relevant to an upcoming prompt.

        Returns:
            Observations, most relevant first; empty if the prompt has too
            little signal to search on

        Raises:
            WorkerUnavailable if the worker is not healthy
            RequestFailed if the search call fails
        """
        parsed = self._processor.parse(prompt)
        if parsed is None:
            return []

        if not await self._client.health():
            raise WorkerUnavailable("worker not available for recall")

        logger.debug("Recall query: %r", parsed.query[:50])
        results = await self._client.search(parsed.query, self._recall_limit)

        if self._context_types:
            results = [r for r in results if r.type in self._context_types]
        return results
