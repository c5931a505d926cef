# -*- coding: utf-8 -*-

# Query Transform Gateway
# Copyright (C) 2025 Jwadow
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.


"""
Query Transform Gateway - entry point.

Builds a FastAPI application whose inbound query strings are rewritten by
the configured TransformQueryParametersPolicy before any route sees them.

Usage:
    python main.py                       # host/port from env or defaults
    python main.py --port 9000 -c query-policy.json
    uvicorn main:create_app --factory
"""

import argparse
import sys
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

import uvicorn
from fastapi import FastAPI, Request
from loguru import logger

from qtransform.chain import RequestPolicy
from qtransform.config import (
    APP_DESCRIPTION,
    APP_TITLE,
    APP_VERSION,
    DEFAULT_SERVER_HOST,
    DEFAULT_SERVER_PORT,
    LOG_LEVEL,
    QUERY_TRANSFORM_CONFIG_FILE,
    SERVER_HOST,
    SERVER_PORT,
)
from qtransform.errors import ConfigurationError
from qtransform.middleware import QueryTransformMiddleware
from qtransform.models import load_transform_config_file
from qtransform.policy import TransformQueryParametersPolicy


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Replace loguru's default sink with a stderr sink at the given level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        colorize=True,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
        "<cyan>{name}</cyan> - <level>{message}</level>",
    )


def load_policies(config_file: str = QUERY_TRANSFORM_CONFIG_FILE) -> List[RequestPolicy]:
    """
    Build the request policy list from the configured policy file.

    Returns an empty list when no file is configured.

    Raises:
        ConfigurationError: If the file is unreadable or invalid
    """
    if not config_file:
        logger.warning("QUERY_TRANSFORM_CONFIG_FILE is not set, query strings pass through unchanged")
        return []

    config = load_transform_config_file(config_file)
    return [TransformQueryParametersPolicy(config)]


def create_app(
    policies: Optional[Sequence[RequestPolicy]] = None,
    enabled: Optional[bool] = None,
    excluded_paths: Optional[Iterable[str]] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        policies: Request policies; loaded from QUERY_TRANSFORM_CONFIG_FILE when None
        enabled: Middleware switch; QUERY_TRANSFORM_ENABLED when None
        excluded_paths: Paths skipped by the policies; QUERY_TRANSFORM_EXCLUDED_PATHS when None
    """
    if policies is None:
        policies = load_policies()

    app = FastAPI(title=APP_TITLE, description=APP_DESCRIPTION, version=APP_VERSION)
    app.add_middleware(
        QueryTransformMiddleware,
        policies=policies,
        enabled=enabled,
        excluded_paths=excluded_paths,
    )

    @app.get("/health")
    async def health():
        return {"status": "healthy", "version": APP_VERSION}

    @app.get("/echo")
    async def echo(request: Request):
        # Shows exactly what an upstream would receive
        return {
            "query_string": request.url.query,
            "params": [[key, value] for key, value in request.query_params.multi_items()],
        }

    return app


def validate_configuration(config_file: str = QUERY_TRANSFORM_CONFIG_FILE) -> None:
    """
    Fail fast on an invalid policy file before the server starts.

    Exits with code 1 when the configured file is missing or malformed.
    """
    if not config_file:
        return

    if not Path(config_file).exists():
        logger.error(f"Policy file not found: {config_file}")
        sys.exit(1)

    try:
        load_transform_config_file(config_file)
    except ConfigurationError as e:
        logger.error(f"Invalid query transform policy: {e}")
        sys.exit(1)


def parse_cli_args() -> argparse.Namespace:
    """
    Parse command-line arguments.

    Host and port default to None so that resolve_server_config() can tell
    "not given" apart from an explicit value.
    """
    parser = argparse.ArgumentParser(
        description=f"{APP_TITLE} - {APP_DESCRIPTION}",
    )
    parser.add_argument(
        "-H", "--host",
        type=str,
        default=None,
        help=f"Server host (default: env SERVER_HOST or {DEFAULT_SERVER_HOST})",
    )
    parser.add_argument(
        "-p", "--port",
        type=int,
        default=None,
        help=f"Server port (default: env SERVER_PORT or {DEFAULT_SERVER_PORT})",
    )
    parser.add_argument(
        "-c", "--config",
        type=str,
        default=None,
        help="Path to the JSON policy file (default: env QUERY_TRANSFORM_CONFIG_FILE)",
    )
    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"%(prog)s {APP_VERSION}",
    )
    return parser.parse_args()


def resolve_server_config(args: argparse.Namespace) -> Tuple[str, int]:
    """
    Resolve host and port: CLI > environment > defaults.

    Returns:
        (host, port)
    """
    host = args.host if args.host is not None else SERVER_HOST or DEFAULT_SERVER_HOST
    port = args.port if args.port is not None else SERVER_PORT or DEFAULT_SERVER_PORT
    return host, port


def print_startup_banner(host: str, port: int) -> None:
    display_host = "localhost" if host == "0.0.0.0" else host
    base_url = f"http://{display_host}:{port}"
    print(f"\n  {APP_TITLE} v{APP_VERSION}")
    print(f"  Listening on: {base_url}")
    print(f"  API docs:     {base_url}/docs")
    print(f"  Health check: {base_url}/health\n")


def run() -> None:
    args = parse_cli_args()
    setup_logging()

    config_file = args.config or QUERY_TRANSFORM_CONFIG_FILE
    validate_configuration(config_file)

    host, port = resolve_server_config(args)
    print_startup_banner(host, port)

    app = create_app(load_policies(config_file))
    uvicorn.run(app, host=host, port=port, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
