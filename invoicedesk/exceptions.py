"""Custom exception hierarchy for invoicedesk.

Integration errors (wiring bugs) are raised loudly. Runtime conditions such as
dialog contention or a rejected save are reported as values, not exceptions,
so they do not appear here.

Exception Hierarchy:
    InvoicedeskError (base)
    ├── DialogError - dialog scope wiring
    │   ├── DialogProviderMissingError
    │   └── DialogPayloadError
    ├── EditError - pending edit tracking
    │   └── UnknownFieldError
    ├── StoreError - invoice store file access
    │   ├── InvoiceNotFoundError
    │   ├── StoreReadError
    │   └── StoreWriteError (retryable)
    └── ConfigurationError - settings/configuration issues

Usage:
    from invoicedesk.exceptions import StoreReadError

    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise StoreReadError("Invoice store is not valid JSON", path=str(path)) from e
"""

from typing import Any, Optional


class InvoicedeskError(Exception):
    """Base exception for all invoicedesk errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about the error (e.g., IDs, paths)
        retryable: Whether this error might succeed on retry
    """

    def __init__(
        self,
        message: str,
        *,
        retryable: bool = False,
        **context: Any,
    ) -> None:
        self.message = message
        self.context = context
        self.retryable = retryable
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


# =============================================================================
# Dialog Errors
# =============================================================================


class DialogError(InvoicedeskError):
    """Base exception for dialog coordination errors."""

    pass


class DialogProviderMissingError(DialogError):
    """A dialog consumer was used outside of any DialogProvider scope."""

    def __init__(
        self,
        message: str = "use_dialog must be used within a DialogProvider",
        *,
        node: Optional[str] = None,
        **context: Any,
    ) -> None:
        if node:
            context["node"] = node
        super().__init__(message, **context)


class DialogPayloadError(DialogError):
    """A payload of the wrong type was passed to a dialog slot."""

    def __init__(
        self,
        message: str = "Dialog payload has the wrong type",
        *,
        identity: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[str] = None,
        **context: Any,
    ) -> None:
        if identity:
            context["identity"] = identity
        if expected:
            context["expected"] = expected
        if actual:
            context["actual"] = actual
        super().__init__(message, **context)


# =============================================================================
# Edit Errors
# =============================================================================


class EditError(InvoicedeskError):
    """Base exception for pending edit tracking."""

    pass


class UnknownFieldError(EditError):
    """A setter was called for a field the tracker does not know."""

    def __init__(
        self,
        message: str = "Unknown editable field",
        *,
        field: Optional[str] = None,
        **context: Any,
    ) -> None:
        if field:
            context["field"] = field
        super().__init__(message, **context)


# =============================================================================
# Store Errors
# =============================================================================


class StoreError(InvoicedeskError):
    """Base exception for invoice store access."""

    pass


class InvoiceNotFoundError(StoreError):
    """The requested invoice does not exist in the store."""

    def __init__(
        self,
        message: str = "Invoice not found",
        *,
        invoice_id: Optional[str] = None,
        **context: Any,
    ) -> None:
        if invoice_id:
            context["invoice_id"] = invoice_id
        super().__init__(message, **context)


class StoreReadError(StoreError):
    """Failed to read or parse the store file."""

    def __init__(
        self,
        message: str = "Failed to read invoice store",
        *,
        path: Optional[str] = None,
        **context: Any,
    ) -> None:
        if path:
            context["path"] = path
        super().__init__(message, **context)


class StoreWriteError(StoreError):
    """Failed to write the store file - typically retryable."""

    def __init__(
        self,
        message: str = "Failed to write invoice store",
        *,
        path: Optional[str] = None,
        **context: Any,
    ) -> None:
        if path:
            context["path"] = path
        super().__init__(message, retryable=True, **context)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(InvoicedeskError):
    """Configuration or settings error."""

    def __init__(
        self,
        message: str = "Configuration error",
        *,
        setting: Optional[str] = None,
        **context: Any,
    ) -> None:
        if setting:
            context["setting"] = setting
        super().__init__(message, **context)
