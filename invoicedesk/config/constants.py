"""
Centralized constants for invoicedesk.

Paths, file names and environment variable definitions live here so the
settings module and the CLI agree on them.
"""

from pathlib import Path
from typing import Any, Dict

# =============================================================================
# PATHS
# =============================================================================

INVOICEDESK_CONFIG_DIR = Path.home() / ".config" / "invoicedesk"

DEFAULT_STORE_FILENAME = "invoices.json"  # Local invoice store
DEFAULT_LOG_FILENAME = "invoicedesk.log"

# =============================================================================
# ENVIRONMENT VARIABLES
# =============================================================================

ENV_VAR_DEFINITIONS: Dict[str, Dict[str, Any]] = {
    "INVOICEDESK_STORE": {
        "description": "Path to the invoice store JSON file",
        "default": None,
        "valid_values": None,
    },
    "INVOICEDESK_LOG_LEVEL": {
        "description": "Console log level when neither --verbose nor --quiet is given",
        "default": "info",
        "valid_values": ["debug", "info", "warning", "error"],
    },
}
