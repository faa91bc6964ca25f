"""
ClawMem Common Module

Shared infrastructure for the capture (scribe) and recall (retriever) sides.
"""

from .config import ClawMemConfig, load_config
from .normalizer import normalize, strip_message_ids
from .worker_client import (
    MemoryWorkerClient,
    WorkerError,
    WorkerUnavailable,
    RequestFailed,
    ObservationNotFound,
    create_worker_client,
)

__all__ = [
    "ClawMemConfig",
    "load_config",
    "normalize",
    "strip_message_ids",
    "MemoryWorkerClient",
    "WorkerError",
    "WorkerUnavailable",
    "RequestFailed",
    "ObservationNotFound",
    "create_worker_client",
]
