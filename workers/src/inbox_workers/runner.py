"""Worker runner entrypoint.

Usage:
  inbox-worker <component> [--log-level DEBUG]
  COMPONENT=channel-access inbox-worker

The positional component wins over the COMPONENT env var, and --log-level
over LOG_LEVEL. Before connecting to Temporal the runner checks that every
credential the component's activities read (ComponentConfig.required_env) is
set, so a misconfigured channel-access worker exits at startup instead of
failing every activity it picks up.

The worker polls only its component's task queue. SIGINT/SIGTERM trigger a
graceful shutdown: in-flight activities are allowed to finish first.
"""

import argparse
import asyncio
import logging
import os
import signal
import sys
from collections.abc import Mapping, Sequence

from inbox_shared.temporal_client import connect
from temporalio.worker import Worker

from inbox_workers.registry import COMPONENTS, ComponentConfig

logger = logging.getLogger(__name__)


class WorkerConfigError(Exception):
    """The component cannot run with the current environment."""


def build_parser(environ: Mapping[str, str] = os.environ) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inbox-worker",
        description="Run the Temporal worker for one inbox-hub component.",
    )
    parser.add_argument(
        "component",
        nargs="?",
        default=environ.get("COMPONENT") or None,
        choices=sorted(COMPONENTS),
        help="Component to serve (default: $COMPONENT)",
    )
    parser.add_argument(
        "--log-level",
        default=environ.get("LOG_LEVEL", "INFO").upper(),
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Root log level (default: $LOG_LEVEL or INFO)",
    )
    return parser


def missing_credentials(
    config: ComponentConfig, environ: Mapping[str, str] = os.environ
) -> list[str]:
    """Names from required_env that are unset or empty."""
    return [name for name in config.required_env if not environ.get(name)]


async def run_worker(component_name: str, stop: asyncio.Event | None = None) -> None:
    """Serve one component until `stop` is set (or SIGINT/SIGTERM arrives)."""
    config = COMPONENTS[component_name]
    missing = missing_credentials(config)
    if missing:
        raise WorkerConfigError(
            f"Component '{component_name}' needs {', '.join(missing)} in its environment"
        )

    if stop is None:
        stop = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, stop.set)

    client = await connect()
    worker = Worker(
        client,
        task_queue=config.task_queue,
        workflows=config.workflows,
        activities=config.activities,
    )
    logger.info(
        f"Worker '{component_name}' polling '{config.task_queue}' "
        f"(workflows={len(config.workflows)}, activities={len(config.activities)})"
    )
    async with worker:
        await stop.wait()
        logger.info(f"Worker '{component_name}' shutting down, draining in-flight tasks")
    logger.info(f"Worker '{component_name}' stopped")


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.component is None:
        parser.error("a component is required (positional argument or COMPONENT)")

    logging.basicConfig(level=args.log_level)
    try:
        asyncio.run(run_worker(args.component))
    except WorkerConfigError as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
