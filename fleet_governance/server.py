# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""
Server launcher for the fleet governance engine.

Loads configuration, configures logging and starts the FastAPI app under
uvicorn on the configured port (default: 8080).

Usage:
    python run_server.py
    python -m fleet_governance

Or with uvicorn directly:
    uvicorn fleet_governance.main:app --host 0.0.0.0 --port 8080
"""

import logging
import sys

import uvicorn

from . import __version__
from .config import Settings, settings
from .middleware.correlation_middleware import current_correlation_id

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s"


class CorrelationIDFilter(logging.Filter):
    """Adds the request correlation ID (or "-") to every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = current_correlation_id() or "-"
        return True


def configure_logging(log_level: str) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIDFilter())

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        handlers=[handler],
    )

    # Set uvicorn loggers to the same level
    logging.getLogger("uvicorn").setLevel(numeric_level)
    logging.getLogger("uvicorn.access").setLevel(numeric_level)
    logging.getLogger("uvicorn.error").setLevel(numeric_level)


def print_startup_banner(config: Settings) -> None:
    """
    Print startup banner with configuration information.

    Args:
        config: Application settings
    """
    inventory = config.inventory_path or f"mock fleet ({config.mock_fleet_size} resources)"
    redis = config.redis_url if config.redis_enabled else "disabled"
    advisory = config.advisory_url or "local heuristic"

    banner = f"""
╔══════════════════════════════════════════════════════════════════╗
║              Fleet Governance v{__version__:<34}║
╠══════════════════════════════════════════════════════════════════╣
║  Configuration:                                                  ║
║    Host:        {config.host:<48} ║
║    Port:        {config.port:<48} ║
║    Environment: {config.environment:<48} ║
║    Log Level:   {config.log_level:<48} ║
║    Inventory:   {inventory:<48} ║
║    Redis:       {redis:<48} ║
║    Advisory:    {advisory:<48} ║
╠══════════════════════════════════════════════════════════════════╣
║  Endpoints:                                                      ║
║    Health:     /health                                           ║
║    API:        /api/v1                                           ║
║    Docs:       /docs                                             ║
╚══════════════════════════════════════════════════════════════════╝
"""
    print(banner)


def main() -> None:
    """
    Main entry point for the governance server.

    Loads configuration, configures logging, and starts the server.
    """
    config = settings()

    configure_logging(config.log_level)

    logger = logging.getLogger(__name__)

    print_startup_banner(config)

    logger.info("Starting Fleet Governance service...")
    logger.info(f"Server will listen on {config.host}:{config.port}")

    try:
        uvicorn.run(
            "fleet_governance.main:app",
            host=config.host,
            port=config.port,
            reload=config.debug,
            log_level=config.log_level.lower(),
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
