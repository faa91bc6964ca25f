"""
ClawMem command line.

Usage:
    clawmem status
    clawmem search "caching layer" [--limit 10]
    clawmem stats
    clawmem serve-hooks
    clawmem serve-mcp
"""

import sys
import json
import asyncio
import argparse
import logging

from dotenv import load_dotenv

from .common.config import load_config
from .common.worker_client import create_worker_client


async def _status(client) -> int:
    if not await client.health():
        print(f"Worker not responding at {client.worker_url}")
        return 1
    stats = await client.stats()
    print(f"Worker running at {client.worker_url}")
    print(f"   Sessions: {stats.session_count}")
    print(f"   Observations: {stats.observation_count}")
    return 0


async def _search(client, query: str, limit: int) -> int:
    results = await client.search(query, limit)
    print(json.dumps([r.model_dump() for r in results], indent=2))
    return 0


async def _stats(client) -> int:
    stats = await client.stats()
    print(json.dumps(
        {"totalSessions": stats.session_count, "totalObservations": stats.observation_count},
        indent=2,
    ))
    return 0


async def _run(coro_factory, client) -> int:
    try:
        return await coro_factory()
    finally:
        await client.aclose()


def main(argv=None) -> int:
    load_dotenv()
    config = load_config()
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    parser = argparse.ArgumentParser(prog="clawmem", description="ClawMem memory commands")
    parser.add_argument("--worker-url", default=None, help="Memory worker URL (overrides config)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="Check worker status")
    search = sub.add_parser("search", help="Search memories")
    search.add_argument("query", help="Search query")
    search.add_argument("--limit", type=int, default=10, help="Max results")
    sub.add_parser("stats", help="Show memory statistics")
    sub.add_parser("serve-hooks", help="Run the lifecycle hook server")
    sub.add_parser("serve-mcp", help="Run the MCP tool server (stdio)")

    args = parser.parse_args(argv)
    if args.worker_url:
        config.worker.url = args.worker_url

    if args.command == "serve-hooks":
        from .hooks_server import run_server
        run_server(config)
        return 0
    if args.command == "serve-mcp":
        from .mcp_server import main as mcp_main
        mcp_args = ["--worker-url", config.worker.url]
        mcp_main(mcp_args)
        return 0

    client = create_worker_client(config)
    if args.command == "status":
        return asyncio.run(_run(lambda: _status(client), client))
    if args.command == "search":
        return asyncio.run(_run(lambda: _search(client, args.query, args.limit), client))
    return asyncio.run(_run(lambda: _stats(client), client))


if __name__ == "__main__":
    sys.exit(main())
