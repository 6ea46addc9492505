"""
Centralized error handling for invoicedesk

This module provides:
- Rich Console for user-facing error messages
- Structured logging for developer diagnostics
- Consistent formatting and exit codes at the CLI boundary
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from invoicedesk.config.settings import get_env_var, get_log_path
from invoicedesk.exceptions import (
    ConfigurationError,
    DialogError,
    EditError,
    InvoicedeskError,
    StoreError,
)

# Global console instance for error display
console = Console(stderr=True, force_terminal=True, color_system="auto")

# Global logger for diagnostics
logger = logging.getLogger("invoicedesk")

_CATEGORY_TITLES = {
    StoreError: "Store Error",
    DialogError: "Dialog Error",
    EditError: "Edit Error",
    ConfigurationError: "Configuration Error",
}

_SUGGESTIONS = {
    StoreError: "Check the --store path or the INVOICEDESK_STORE environment variable.",
    ConfigurationError: "Run with --verbose to see which setting was rejected.",
}


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[Path] = None
) -> None:
    """
    Set up structured logging for invoicedesk

    Args:
        verbose: Enable verbose (DEBUG) logging
        quiet: Disable INFO and WARNING logs to console
        log_file: Optional log file path (defaults to ~/.config/invoicedesk/invoicedesk.log)
    """
    if verbose:
        console_level = logging.DEBUG
    elif quiet:
        console_level = logging.ERROR
    else:
        level_name = (get_env_var("INVOICEDESK_LOG_LEVEL", validate=False) or "info").upper()
        console_level = getattr(logging, level_name, logging.INFO)

    detailed_formatter = logging.Formatter(
        '%(asctime)s | %(name)s | %(levelname)s | %(funcName)s:%(lineno)d | %(message)s'
    )
    simple_formatter = logging.Formatter('%(levelname)s: %(message)s')

    logger.handlers.clear()
    logger.setLevel(logging.DEBUG)

    if not quiet:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(console_level)
        console_handler.setFormatter(simple_formatter)
        logger.addHandler(console_handler)

    try:
        if log_file is None:
            log_file = get_log_path()
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(detailed_formatter)
        logger.addHandler(file_handler)
    except (PermissionError, OSError) as e:
        # If we can't create log file, continue without it
        if verbose:
            console.print(f"[yellow]Warning: Could not create log file {log_file}: {e}[/yellow]")


def handle_error(
    error: Exception,
    operation: str = "unknown",
    context: Optional[Dict[str, Any]] = None,
    show_details: bool = False
) -> None:
    """
    Log an error, show it to the user and exit with code 1

    Args:
        error: The exception to handle
        operation: Description of the operation that failed
        context: Additional context for logging
        show_details: Whether to show technical details to user
    """
    context = context or {}

    if isinstance(error, InvoicedeskError):
        logger.error(f"{operation} failed: {error}", extra={"operation": operation, **context})
        _display_user_error(error, show_details)
    else:
        logger.error(
            f"Unexpected error during {operation}: {error}",
            extra={"operation": operation, "error_type": type(error).__name__, **context},
            exc_info=True,
        )
        wrapped = InvoicedeskError(
            f"An unexpected error occurred during {operation}",
            original_error=str(error),
            error_type=type(error).__name__,
        )
        _display_user_error(wrapped, show_details)

    raise typer.Exit(1)


def _title_for(error: InvoicedeskError) -> str:
    for error_type, title in _CATEGORY_TITLES.items():
        if isinstance(error, error_type):
            return title
    return "Error"


def _suggestion_for(error: InvoicedeskError) -> Optional[str]:
    for error_type, suggestion in _SUGGESTIONS.items():
        if isinstance(error, error_type):
            return suggestion
    return None


def _display_user_error(error: InvoicedeskError, show_details: bool, color: str = "red") -> None:
    """Display error to user with Rich formatting"""
    message = Text()
    message.append(error.message, style=f"bold {color}")

    if show_details and error.context:
        details_text = "\n".join(f"• {k}: {v}" for k, v in error.context.items())
        message.append(f"\n\nDetails:\n{details_text}", style=f"dim {color}")

    if error.retryable:
        message.append("\n\nThis may succeed if you try again.", style="dim")

    suggestion = _suggestion_for(error)
    if suggestion:
        message.append(f"\n\nSuggestion: {suggestion}", style="cyan")

    panel = Panel(
        message,
        title=f"[bold]{_title_for(error)}[/bold]",
        title_align="left",
        border_style=color,
        padding=(0, 1)
    )

    console.print(panel)


def warn_user(message: str) -> None:
    """Display a warning message to the user"""
    _display_user_error(InvoicedeskError(message), show_details=False, color="yellow")
