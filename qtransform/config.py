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
Query Transform Gateway Configuration.

Centralized storage for all settings and constants.
Loads environment variables and provides typed access to them.
"""

import os
import re
from pathlib import Path
from typing import List, Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _get_raw_env_value(var_name: str, env_file: str = ".env") -> Optional[str]:
    """
    Read variable value from .env file without processing escape sequences.

    This is necessary for correct handling of Windows paths where backslashes
    (e.g., D:\\Policies\\query.json) may be incorrectly interpreted
    as escape sequences (\\q, \\n -> newline, etc.).

    Args:
        var_name: Environment variable name
        env_file: Path to .env file (default ".env")

    Returns:
        Raw variable value or None if not found
    """
    env_path = Path(env_file)
    if not env_path.exists():
        return None

    try:
        content = env_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None

    # VAR="value" or VAR='value' or VAR=value
    pattern = rf'^{re.escape(var_name)}=(["\']?)(.+?)\1\s*$'

    for line in content.splitlines():
        line = line.strip()
        if line.startswith("#") or not line:
            continue

        match = re.match(pattern, line)
        if match:
            return match.group(2)

    return None


def _env_flag(var_name: str, default: str) -> bool:
    """Parse a truthy environment flag."""
    return os.getenv(var_name, default).lower() in (
        "true",
        "1",
        "yes",
        "enabled",
        "on",
    )


# ==================================================================================================
# Server Settings
# ==================================================================================================

# Server host (default: 0.0.0.0 - listen on all interfaces)
# Use "127.0.0.1" to only allow local connections
DEFAULT_SERVER_HOST: str = "0.0.0.0"
SERVER_HOST: str = os.getenv("SERVER_HOST", DEFAULT_SERVER_HOST)

# Server port (default: 8000)
# Can be overridden by CLI: python main.py --port 9000
DEFAULT_SERVER_PORT: int = 8000
SERVER_PORT: int = int(os.getenv("SERVER_PORT", str(DEFAULT_SERVER_PORT)))

# ==================================================================================================
# Query Transformation Policy
# ==================================================================================================

# Master switch for the query parameter transformation policy.
# When disabled the middleware forwards the query string untouched.
# Default: true
QUERY_TRANSFORM_ENABLED: bool = _env_flag("QUERY_TRANSFORM_ENABLED", "true")

# Request paths the policies never run on (comma-separated, exact match).
# Typically gateway-internal endpoints such as the health check.
# Default: /health
_excluded_paths_raw: str = os.getenv("QUERY_TRANSFORM_EXCLUDED_PATHS", "/health")
QUERY_TRANSFORM_EXCLUDED_PATHS: List[str] = [
    value.strip() for value in _excluded_paths_raw.split(",") if value.strip()
]

# Path to the JSON policy document:
#   {"clearAll": false,
#    "addQueryParameters": [{"name": "...", "value": "...", "appendToExistingArray": false}],
#    "removeQueryParameters": ["..."]}
# Read directly from .env to avoid escape sequence issues on Windows paths.
_raw_config_file = _get_raw_env_value("QUERY_TRANSFORM_CONFIG_FILE") or os.getenv(
    "QUERY_TRANSFORM_CONFIG_FILE", ""
)
QUERY_TRANSFORM_CONFIG_FILE: str = (
    str(Path(_raw_config_file).expanduser()) if _raw_config_file else ""
)

# ==================================================================================================
# Logging Settings
# ==================================================================================================

# Log level for the application
# Available levels: TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL
# Default: INFO (recommended for production)
# Set to DEBUG to see every transformation phase
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# ==================================================================================================
# Application Version
# ==================================================================================================

APP_VERSION: str = "1.0"
APP_TITLE: str = "Query Transform Gateway"
APP_DESCRIPTION: str = "Gateway policy that rewrites request query parameters before forwarding upstream."
