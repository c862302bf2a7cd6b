#!/usr/bin/env python3
"""Main entry point for the synced playback worker."""

from __future__ import annotations

import asyncio
import json
import logging
import logging.config
import signal
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from synced_playback.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from synced_playback.config.container import Container

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"


def setup_logging(log_level: str = "INFO") -> None:
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(_LOGGING_CONFIG_PATH) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.warning(
            "Could not load %s, falling back to basic config", _LOGGING_CONFIG_PATH
        )
        logging.basicConfig(
            level=resolved_level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    logging.getLogger().setLevel(resolved_level)


def _install_signal_handlers(container: Container) -> None:
    loop = asyncio.get_running_loop()
    logger = logging.getLogger(__name__)

    def _stop(sig: signal.Signals) -> None:
        logger.info(LogTemplates.WORKER_SIGNAL_RECEIVED, sig.name)
        container.worker.request_stop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _stop, sig)
        except NotImplementedError:
            # add_signal_handler is unavailable on Windows event loops.
            pass


async def run_worker(container: Container) -> None:
    """Initialize resources, run the worker until stopped, then shut down."""
    await container.initialize()
    try:
        _install_signal_handlers(container)
        await container.worker.run()
    finally:
        await container.shutdown()


def main() -> int:
    from synced_playback.config.settings import get_settings

    settings = get_settings()
    setup_logging(settings.log_level)

    logger = logging.getLogger(__name__)
    logger.info(LogTemplates.WORKER_STARTING, settings.environment)

    from synced_playback.config.container import create_container

    container = create_container(settings)

    try:
        asyncio.run(run_worker(container))
        logger.info(LogTemplates.WORKER_STOPPED)
        return 0
    except KeyboardInterrupt:
        logger.info(LogTemplates.WORKER_KEYBOARD_INTERRUPT)
        return 0
    except Exception as e:
        logger.exception(LogTemplates.WORKER_FATAL_ERROR, e)
        return 1


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
