"""Configuration utilities for invoicedesk."""

import os
from pathlib import Path
from typing import List, Optional, Tuple

from invoicedesk.exceptions import ConfigurationError

from .constants import (
    DEFAULT_LOG_FILENAME,
    DEFAULT_STORE_FILENAME,
    ENV_VAR_DEFINITIONS,
    INVOICEDESK_CONFIG_DIR,
)


def get_store_path(override: Optional[Path] = None) -> Path:
    """Get the invoice store path.

    Resolution order: explicit override, the INVOICEDESK_STORE environment
    variable, then ~/.config/invoicedesk/invoices.json.

    Raises:
        ConfigurationError: If the resolved path is an existing directory.
    """
    if override is not None:
        path = Path(override)
    elif os.environ.get("INVOICEDESK_STORE"):
        path = Path(os.environ["INVOICEDESK_STORE"])
    else:
        INVOICEDESK_CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        path = INVOICEDESK_CONFIG_DIR / DEFAULT_STORE_FILENAME

    if path.is_dir():
        raise ConfigurationError("Invoice store path is a directory", setting=str(path))
    return path


def get_log_path() -> Path:
    """Get the path of the diagnostic log file."""
    INVOICEDESK_CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    return INVOICEDESK_CONFIG_DIR / DEFAULT_LOG_FILENAME


def validate_env_var(name: str, value: Optional[str]) -> Tuple[bool, Optional[str]]:
    """Validate a single environment variable value.

    Args:
        name: The environment variable name.
        value: The current value (or None if not set).

    Returns:
        Tuple of (is_valid, error_message).
    """
    if name not in ENV_VAR_DEFINITIONS:
        return True, None  # Unknown vars are always valid

    if value is None:
        return True, None

    valid_values = ENV_VAR_DEFINITIONS[name].get("valid_values")
    if valid_values is None:
        return True, None

    if value.lower() not in [v.lower() for v in valid_values]:
        return False, f"Invalid value '{value}' for {name}. Valid values: {valid_values}"

    return True, None


def validate_all_env_vars() -> List[str]:
    """Validate all invoicedesk environment variables.

    Returns:
        List of error messages (empty if all valid).
    """
    errors = []
    for name in ENV_VAR_DEFINITIONS:
        is_valid, error = validate_env_var(name, os.environ.get(name))
        if not is_valid:
            errors.append(error)
    return errors


def get_env_var(name: str, validate: bool = True) -> Optional[str]:
    """Get an environment variable with optional validation.

    Raises:
        ValueError: If validate=True and the value is invalid.
    """
    value = os.environ.get(name)

    if validate and value is not None:
        is_valid, error = validate_env_var(name, value)
        if not is_valid:
            raise ValueError(error)

    if value is None and name in ENV_VAR_DEFINITIONS:
        return ENV_VAR_DEFINITIONS[name].get("default")

    return value

