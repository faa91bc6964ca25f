"""
Hook Server

FastAPI server the host runtime posts lifecycle events to.

Endpoints:
- GET /health: Health check
- POST /hooks/before_agent_start: Auto-recall, returns prependContext
- POST /hooks/agent_end: Auto-capture, returns stored count
- GET /stats: Worker statistics

Hook endpoints always answer 200 once initialized: collaborator failures
degrade to an empty answer, they never fail the host's turn.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, List, Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field

from .common.config import ClawMemConfig, ensure_directories, load_config
from .plugin import MemoryPlugin

logger = logging.getLogger("clawmem.hooks")


# =============================================================================
# Request Models
# =============================================================================

class BeforeAgentStartEvent(BaseModel):
    """Event fired before the agent handles a prompt"""
    prompt: Optional[str] = None


class AgentEndEvent(BaseModel):
    """Event fired after the agent finishes a turn"""
    model_config = ConfigDict(populate_by_name=True)

    messages: List[Any] = Field(default_factory=list)
    success: bool = True
    session_key: Optional[str] = Field(default=None, alias="sessionKey")


# =============================================================================
# App Factory
# =============================================================================

def _plugin(request: Request) -> MemoryPlugin:
    plugin = getattr(request.app.state, "plugin", None)
    if plugin is None:
        raise HTTPException(status_code=503, detail="Plugin not initialized")
    return plugin


def create_app(plugin: Optional[MemoryPlugin] = None, config: Optional[ClawMemConfig] = None) -> FastAPI:
    """
    Create the hook server app.

    Args:
        plugin: Pre-built plugin (tests inject one with a fake worker)
        config: Config used to build the plugin when none is given
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.plugin is None:
            ensure_directories()
            app.state.plugin = MemoryPlugin.from_config(config or load_config())
        logger.info("Hook server starting (worker: %s)", app.state.plugin.worker_url)
        await app.state.plugin.start()

        yield

        logger.info("Hook server shutting down")
        await app.state.plugin.stop()

    app = FastAPI(
        title="ClawMem Hooks",
        description="Auto-recall and auto-capture lifecycle hooks",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.plugin = plugin

    @app.get("/health")
    async def health(request: Request):
        """Health check endpoint"""
        current = getattr(request.app.state, "plugin", None)
        return {
            "status": "healthy",
            "service": "clawmem-hooks",
            "initialized": current is not None,
            "auto_recall": current.config.recall.enabled if current else False,
            "auto_capture": current.config.capture.enabled if current else False,
            "dedup_entries": len(current.pipeline.dedup_cache) if current else 0,
        }

    @app.post("/hooks/before_agent_start")
    async def before_agent_start(event: BeforeAgentStartEvent, request: Request):
        context = await _plugin(request).before_agent_start(event.prompt)
        if context is None:
            return {}
        return {"prependContext": context}

    @app.post("/hooks/agent_end")
    async def agent_end(event: AgentEndEvent, request: Request):
        stored = await _plugin(request).agent_end(
            event.messages,
            success=event.success,
            session_key=event.session_key,
        )
        return {"ok": True, "stored": stored}

    @app.get("/stats")
    async def stats(request: Request):
        return (await _plugin(request).memory_status()).to_dict()

    return app


# =============================================================================
# CLI Entry Point
# =============================================================================

def run_server(config: Optional[ClawMemConfig] = None) -> None:
    """Run the hook server"""
    import uvicorn

    config = config or load_config()
    logger.info("Starting hook server on %s:%d", config.server.host, config.server.port)
    uvicorn.run(
        create_app(config=config),
        host=config.server.host,
        port=config.server.port,
        reload=False,
    )
