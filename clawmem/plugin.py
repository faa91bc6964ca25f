"""
ClawMem Plugin

Host-facing surface of the memory system:
- before_agent_start: auto-recall hook, returns a context block to prepend
- agent_end: auto-capture hook, stores noteworthy statements from the turn
- memory_search / memory_store / memory_get / memory_delete / memory_status:
  direct actions returning ActionResult(text, details)

Hooks never raise. Each runs under its own timeout budget; on timeout the
in-flight work is cancelled and the turn continues without memory.
Direct actions report failures inside their result instead of raising.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from .common.config import ClawMemConfig, load_config
from .common.worker_client import (
    MemoryWorkerClient,
    ObservationNotFound,
    WorkerUnavailable,
    create_worker_client,
)
from .retriever.formatter import format_recall_context, format_search_listing
from .retriever.searcher import Searcher
from .scribe.pipeline import CapturePipeline

logger = logging.getLogger("clawmem.plugin")

DEFAULT_SESSION_KEY = "default"


@dataclass
class ActionResult:
    """Short human-readable summary plus a structured payload"""
    text: str
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return "error" not in self.details

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": self.ok, "text": self.text, "details": self.details}


class MemoryPlugin:
    """
    Wires recall, capture and the direct actions to one worker client.

    Usage:
        plugin = MemoryPlugin.from_config()
        await plugin.start()
        context = await plugin.before_agent_start(prompt)
        ...
        await plugin.agent_end(messages, success=True, session_key="s1")
        await plugin.stop()
    """

    def __init__(
        self,
        config: Optional[ClawMemConfig] = None,
        client: Optional[MemoryWorkerClient] = None,
        pipeline: Optional[CapturePipeline] = None,
        searcher: Optional[Searcher] = None,
    ):
        self.config = config or ClawMemConfig()
        self.client = client or create_worker_client(self.config)
        self.pipeline = pipeline or CapturePipeline.from_config(self.client, self.config)
        self.searcher = searcher or Searcher.from_config(self.client, self.config)

    @classmethod
    def from_config(cls, config: Optional[ClawMemConfig] = None) -> "MemoryPlugin":
        return cls(config=config or load_config())

    @property
    def worker_url(self) -> str:
        return self.client.worker_url

    # ------------------------------------------------------------------ #
    # Service lifecycle
    # ------------------------------------------------------------------ #

    async def start(self) -> bool:
        healthy = await self.client.health()
        if healthy:
            logger.info("connected to worker at %s", self.worker_url)
        else:
            logger.warning("worker not available at %s", self.worker_url)
        return healthy

    async def stop(self) -> None:
        await self.client.aclose()
        logger.info("stopped")

    # ------------------------------------------------------------------ #
    # Lifecycle hooks
    # ------------------------------------------------------------------ #

    async def before_agent_start(self, prompt: Optional[str]) -> Optional[str]:
        """
        Auto-recall hook.

        Args:
            prompt: The upcoming prompt

        Returns:
            <relevant-memories> block to prepend, or None
        """
        recall = self.config.recall
        if not recall.enabled:
            return None

        logger.info("before_agent_start fired, prompt length: %d", len(prompt or ""))
        if not prompt or len(prompt) < recall.min_prompt_length:
            logger.info("prompt too short, skipping recall")
            return None

        try:
            return await asyncio.wait_for(self._recall(prompt), timeout=recall.timeout)
        except asyncio.TimeoutError:
            logger.warning("recall timed out after %.1fs", recall.timeout)
        except WorkerUnavailable as e:
            logger.warning("worker not available for recall: %s", e)
        except Exception as e:
            logger.warning("recall failed: %s", e)
        return None

    async def _recall(self, prompt: str) -> Optional[str]:
        results = await self.searcher.recall(prompt)
        logger.info("search returned %d results", len(results))
        if not results:
            return None

        context = format_recall_context(results, max_tokens=self.config.recall.max_context_tokens)
        if context:
            logger.info("injecting %d memories into context", len(results))
        return context

    async def agent_end(
        self,
        messages: Optional[Iterable[Any]],
        success: bool = True,
        session_key: Optional[str] = None,
    ) -> int:
        """
        Auto-capture hook.

        Args:
            messages: The finished turn's message list
            success: Whether the turn completed successfully
            session_key: Session the turn belongs to

        Returns:
            Number of observations stored (0 on skip or failure)
        """
        capture = self.config.capture
        messages = list(messages or [])
        if not capture.enabled or not success or not messages:
            return 0

        try:
            return await asyncio.wait_for(
                self._capture(session_key or DEFAULT_SESSION_KEY, messages),
                timeout=capture.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("capture timed out after %.1fs", capture.timeout)
        except Exception as e:
            logger.warning("capture failed: %s", e)
        return 0

    async def _capture(self, session_key: str, messages: list) -> int:
        if not await self.client.health():
            logger.warning("worker not available for capture")
            return 0

        report = await self.pipeline.process_turn(session_key, messages)
        if report.error:
            logger.warning("capture failed: %s", report.error)
        if report.stored_count > 0:
            logger.info("auto-captured %d memories", report.stored_count)
        return report.stored_count

    # ------------------------------------------------------------------ #
    # Direct actions
    # ------------------------------------------------------------------ #

    async def memory_search(self, query: str, limit: int = 10) -> ActionResult:
        try:
            results = await self.searcher.search(query, limit)
        except Exception as e:
            return ActionResult(f"Memory search failed: {e}", {"error": str(e)})

        return ActionResult(
            format_search_listing(results),
            {
                "count": len(results),
                "observations": [
                    {"id": r.id, "type": r.type, "summary": r.summary} for r in results
                ],
            },
        )

    async def memory_store(
        self,
        text: str,
        type: Optional[str] = None,
        importance: Optional[int] = None,
        session_key: Optional[str] = None,
    ) -> ActionResult:
        if not text or not text.strip():
            return ActionResult("Failed to store memory: text is empty", {"error": "empty_text"})

        try:
            observation = await self.pipeline.store_text(
                session_key or DEFAULT_SESSION_KEY,
                text,
                observation_type=type,
                importance=importance,
                truncate_summary=False,
            )
        except Exception as e:
            return ActionResult(f"Failed to store memory: {e}", {"error": str(e)})

        return ActionResult(
            f'Stored memory #{observation.id}: "{text[:80]}..."',
            {"action": "created", "id": observation.id, "type": observation.type},
        )

    async def memory_get(self, observation_id: int) -> ActionResult:
        try:
            observation = await self.client.get_observation(observation_id)
        except ObservationNotFound:
            return ActionResult(f"Memory #{observation_id} not found.", {"error": "not_found"})
        except Exception as e:
            return ActionResult(f"Failed to get memory: {e}", {"error": str(e)})

        return ActionResult(
            f"Memory #{observation_id} [{observation.type}]:\n{observation.output or observation.summary}",
            {"observation": observation.model_dump()},
        )

    async def memory_delete(self, observation_id: int) -> ActionResult:
        try:
            await self.client.delete_observation(observation_id)
        except ObservationNotFound:
            return ActionResult(f"Memory #{observation_id} not found.", {"error": "not_found"})
        except Exception as e:
            return ActionResult(f"Failed to delete memory: {e}", {"error": str(e)})

        return ActionResult(f"Deleted memory #{observation_id}", {"action": "deleted", "id": observation_id})

    async def memory_status(self) -> ActionResult:
        if not await self.client.health():
            return ActionResult(
                f"Worker not responding at {self.worker_url}",
                {"healthy": False, "worker_url": self.worker_url},
            )

        try:
            stats = await self.client.stats()
        except Exception as e:
            return ActionResult(f"Failed to get stats: {e}", {"healthy": True, "error": str(e)})

        return ActionResult(
            f"Worker running at {self.worker_url}\n"
            f"   Sessions: {stats.session_count}\n"
            f"   Observations: {stats.observation_count}",
            {
                "healthy": True,
                "worker_url": self.worker_url,
                "sessions": stats.session_count,
                "observations": stats.observation_count,
                "dedup_entries": len(self.pipeline.dedup_cache),
            },
        )
