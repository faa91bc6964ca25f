"""
ClawMem

Persistent memory for conversational agent sessions.

Philosophy:
- Storage is delegated to an external worker service (HTTP, SQLite + FTS5)
- Capture decisions are rule-based: no network calls, no learned model
- Recall failures and capture failures never interrupt a conversation turn
- Dedup is process-local and best-effort

Usage:
    from clawmem.common import load_config, MemoryWorkerClient
    from clawmem.scribe import CapturePipeline, TriggerClassifier, detect_type
    from clawmem.retriever import build_query, Searcher
    from clawmem.plugin import MemoryPlugin
"""

__version__ = "0.1.0"
