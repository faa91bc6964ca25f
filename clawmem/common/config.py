"""
Configuration Management for ClawMem

Loads configuration from ~/.clawmem/config.json and environment variables.
"""

import os
import json
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import List

logger = logging.getLogger("clawmem.common.config")

# Default config paths
CONFIG_DIR = Path.home() / ".clawmem"
CONFIG_PATH = CONFIG_DIR / "config.json"

DEFAULT_WORKER_URL = "http://127.0.0.1:37778"


@dataclass
class WorkerConfig:
    """Memory worker service configuration"""
    url: str = DEFAULT_WORKER_URL
    health_timeout: float = 2.0
    request_timeout: float = 5.0


@dataclass
class CaptureConfig:
    """Auto-capture configuration"""
    enabled: bool = True
    max_per_turn: int = 3
    min_length: int = 20
    max_length: int = 2000
    dedup_capacity: int = 200
    fingerprint_length: int = 100  # trades false dedup for cost; tunable
    summary_length: int = 500
    default_importance: int = 5
    timeout: float = 10.0  # whole-turn budget for the capture hook


@dataclass
class RecallConfig:
    """Auto-recall configuration"""
    enabled: bool = True
    min_prompt_length: int = 10
    limit: int = 5
    max_context_tokens: int = 4000
    context_types: List[str] = field(default_factory=list)  # empty = all types
    timeout: float = 5.0


@dataclass
class ServerConfig:
    """Hook server and MCP server configuration"""
    host: str = "127.0.0.1"
    port: int = 37779
    mcp_server_name: str = "clawmem"


@dataclass
class ClawMemConfig:
    """Main ClawMem configuration"""
    worker: WorkerConfig = field(default_factory=WorkerConfig)
    capture: CaptureConfig = field(default_factory=CaptureConfig)
    recall: RecallConfig = field(default_factory=RecallConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    log_level: str = "INFO"


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes", "on")


def _parse_worker_config(data: dict) -> WorkerConfig:
    """Parse worker section, accepting the legacy top-level workerUrl key"""
    worker_data = data.get("worker", {})
    return WorkerConfig(
        url=worker_data.get("url") or data.get("workerUrl", DEFAULT_WORKER_URL),
        health_timeout=worker_data.get("health_timeout", 2.0),
        request_timeout=worker_data.get("request_timeout", 5.0),
    )


def _parse_capture_config(data: dict) -> CaptureConfig:
    """Parse capture section from config dict"""
    capture_data = data.get("capture", {})
    return CaptureConfig(
        enabled=capture_data.get("enabled", data.get("autoCapture", True)),
        max_per_turn=capture_data.get("max_per_turn", 3),
        min_length=capture_data.get("min_length", 20),
        max_length=capture_data.get("max_length", 2000),
        dedup_capacity=capture_data.get("dedup_capacity", 200),
        fingerprint_length=capture_data.get("fingerprint_length", 100),
        summary_length=capture_data.get("summary_length", 500),
        default_importance=capture_data.get("default_importance", 5),
        timeout=capture_data.get("timeout", 10.0),
    )


def _parse_recall_config(data: dict) -> RecallConfig:
    """Parse recall section from config dict"""
    recall_data = data.get("recall", {})
    return RecallConfig(
        enabled=recall_data.get("enabled", data.get("autoRecall", True)),
        min_prompt_length=recall_data.get("min_prompt_length", 10),
        limit=recall_data.get("limit", 5),
        max_context_tokens=recall_data.get(
            "max_context_tokens", data.get("maxContextTokens", 4000)
        ),
        context_types=list(recall_data.get("context_types", data.get("captureTypes", []))),
        timeout=recall_data.get("timeout", 5.0),
    )


def _parse_server_config(data: dict) -> ServerConfig:
    """Parse server section from config dict"""
    server_data = data.get("server", {})
    return ServerConfig(
        host=server_data.get("host", "127.0.0.1"),
        port=server_data.get("port", 37779),
        mcp_server_name=server_data.get("mcp_server_name", "clawmem"),
    )


def load_config() -> ClawMemConfig:
    """
    Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file (~/.clawmem/config.json)
    3. Default values
    """
    config = ClawMemConfig()

    if CONFIG_PATH.exists():
        try:
            with open(CONFIG_PATH) as f:
                data = json.load(f)

            config.worker = _parse_worker_config(data)
            config.capture = _parse_capture_config(data)
            config.recall = _parse_recall_config(data)
            config.server = _parse_server_config(data)
            config.log_level = data.get("log_level", "INFO")
        except (json.JSONDecodeError, IOError, AttributeError) as e:
            logger.warning("Failed to load config file %s: %s", CONFIG_PATH, e)

    # Environment variable overrides
    if os.getenv("CLAWMEM_WORKER_URL"):
        config.worker.url = os.getenv("CLAWMEM_WORKER_URL")
    if os.getenv("CLAWMEM_AUTO_CAPTURE"):
        config.capture.enabled = _parse_bool(os.getenv("CLAWMEM_AUTO_CAPTURE"))
    if os.getenv("CLAWMEM_AUTO_RECALL"):
        config.recall.enabled = _parse_bool(os.getenv("CLAWMEM_AUTO_RECALL"))
    if os.getenv("CLAWMEM_DEDUP_CAPACITY"):
        config.capture.dedup_capacity = int(os.getenv("CLAWMEM_DEDUP_CAPACITY"))
    if os.getenv("CLAWMEM_FINGERPRINT_LENGTH"):
        config.capture.fingerprint_length = int(os.getenv("CLAWMEM_FINGERPRINT_LENGTH"))
    if os.getenv("CLAWMEM_HOOK_PORT"):
        config.server.port = int(os.getenv("CLAWMEM_HOOK_PORT"))
    if os.getenv("CLAWMEM_LOG_LEVEL"):
        config.log_level = os.getenv("CLAWMEM_LOG_LEVEL")

    return config


def save_config(config: ClawMemConfig) -> None:
    """Save configuration to file"""
    ensure_directories()

    data = {
        "worker": {
            "url": config.worker.url,
            "health_timeout": config.worker.health_timeout,
            "request_timeout": config.worker.request_timeout,
        },
        "capture": {
            "enabled": config.capture.enabled,
            "max_per_turn": config.capture.max_per_turn,
            "min_length": config.capture.min_length,
            "max_length": config.capture.max_length,
            "dedup_capacity": config.capture.dedup_capacity,
            "fingerprint_length": config.capture.fingerprint_length,
            "summary_length": config.capture.summary_length,
            "default_importance": config.capture.default_importance,
            "timeout": config.capture.timeout,
        },
        "recall": {
            "enabled": config.recall.enabled,
            "min_prompt_length": config.recall.min_prompt_length,
            "limit": config.recall.limit,
            "max_context_tokens": config.recall.max_context_tokens,
            "context_types": config.recall.context_types,
            "timeout": config.recall.timeout,
        },
        "server": {
            "host": config.server.host,
            "port": config.server.port,
            "mcp_server_name": config.server.mcp_server_name,
        },
        "log_level": config.log_level,
    }

    with open(CONFIG_PATH, "w") as f:
        json.dump(data, f, indent=2)

    CONFIG_PATH.chmod(0o600)


def ensure_directories() -> None:
    """Ensure the config directory exists"""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
