"""
Single-active-dialog state for the invoicedesk TUI.

One ``DialogCoordinator`` owns the dialog state of a provider scope. At most one
dialog identity is active at a time:

    Idle --open_dialog--> Active(identity, mode, payload)
    Active --open_dialog--> Active        (ignored, first opener wins)
    Active --close_dialog--> Idle
    Idle --close_dialog--> Idle           (ignored)

Opening while another dialog is active is not an error. The request is dropped
and the requester simply keeps seeing ``is_open() == False``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, Union

from invoicedesk.exceptions import DialogPayloadError
from invoicedesk.models import Invoice, Merchant

logger = logging.getLogger(__name__)


class DialogIdentity(Enum):
    """Every dialog slot of the application."""

    EDIT_INVOICE__ANALYSIS = "EDIT_INVOICE__ANALYSIS"
    EDIT_INVOICE__IMAGE = "EDIT_INVOICE__IMAGE"
    EDIT_INVOICE__SCAN = "EDIT_INVOICE__SCAN"
    EDIT_INVOICE__MERCHANT = "EDIT_INVOICE__MERCHANT"
    EDIT_INVOICE__MERCHANT_INVOICES = "EDIT_INVOICE__MERCHANT_INVOICES"
    EDIT_INVOICE__RECIPE = "EDIT_INVOICE__RECIPE"
    EDIT_INVOICE__METADATA = "EDIT_INVOICE__METADATA"
    EDIT_INVOICE__ITEMS = "EDIT_INVOICE__ITEMS"
    EDIT_INVOICE__FEEDBACK = "EDIT_INVOICE__FEEDBACK"
    VIEW_INVOICE__SHARE_ANALYTICS = "VIEW_INVOICE__SHARE_ANALYTICS"
    VIEW_INVOICES__IMPORT = "VIEW_INVOICES__IMPORT"
    VIEW_INVOICES__EXPORT = "VIEW_INVOICES__EXPORT"
    VIEW_SCANS__CREATE_INVOICE = "VIEW_SCANS__CREATE_INVOICE"
    SHARED__INVOICE_DELETE = "SHARED__INVOICE_DELETE"
    SHARED__INVOICE_SHARE = "SHARED__INVOICE_SHARE"


class DialogMode(str, Enum):
    """Qualifier for dialogs that serve several purposes. Opaque to the coordinator."""

    VIEW = "view"
    ADD = "add"
    EDIT = "edit"
    DELETE = "delete"
    SHARE = "share"


@dataclass(frozen=True)
class MetadataPayload:
    """Payload of the metadata dialog: the invoice and, for edit/delete, one entry."""

    invoice: Invoice
    key: Optional[str] = None
    value: str = ""


# Payload shape accepted by each dialog slot. Slots not listed accept anything.
DIALOG_PAYLOAD_TYPES: Dict[DialogIdentity, Union[Type, Tuple[Type, ...]]] = {
    DialogIdentity.SHARED__INVOICE_DELETE: Invoice,
    DialogIdentity.SHARED__INVOICE_SHARE: Invoice,
    DialogIdentity.EDIT_INVOICE__METADATA: MetadataPayload,
    DialogIdentity.EDIT_INVOICE__MERCHANT: Merchant,
    DialogIdentity.EDIT_INVOICE__MERCHANT_INVOICES: Merchant,
    DialogIdentity.VIEW_SCANS__CREATE_INVOICE: (list, tuple),
}


@dataclass(frozen=True)
class ActiveDialog:
    """The whole dialog state of a scope: one slot, possibly empty."""

    identity: Optional[DialogIdentity] = None
    mode: Optional[DialogMode] = None
    payload: Any = None

    @classmethod
    def idle(cls) -> "ActiveDialog":
        return cls()

    @property
    def is_idle(self) -> bool:
        return self.identity is None


DialogListener = Callable[[ActiveDialog], None]


def check_payload(identity: DialogIdentity, payload: Any) -> None:
    """Raise DialogPayloadError when ``payload`` does not fit ``identity``."""
    if payload is None:
        return
    expected = DIALOG_PAYLOAD_TYPES.get(identity)
    if expected is None or isinstance(payload, expected):
        return
    names = (
        ", ".join(t.__name__ for t in expected)
        if isinstance(expected, tuple)
        else expected.__name__
    )
    raise DialogPayloadError(
        identity=identity.value,
        expected=names,
        actual=type(payload).__name__,
    )


class DialogCoordinator:
    """Holds the active dialog of one scope and enforces mutual exclusion."""

    def __init__(self, initial: Optional[ActiveDialog] = None):
        self._current = initial or ActiveDialog.idle()
        self._listeners: List[DialogListener] = []

    @property
    def current_dialog(self) -> ActiveDialog:
        return self._current

    def is_open(self, identity: DialogIdentity) -> bool:
        return self._current.identity is identity

    def open_dialog(
        self,
        identity: DialogIdentity,
        mode: DialogMode = DialogMode.VIEW,
        payload: Any = None,
    ) -> bool:
        """Open ``identity`` if no dialog is active.

        Returns True when the request was admitted. A busy coordinator drops the
        request without touching the open dialog's mode or payload.
        """
        mode = DialogMode(mode)
        check_payload(identity, payload)

        if not self._current.is_idle:
            logger.debug(
                f"Ignoring open of {identity.value}: {self._current.identity.value} is already open"
            )
            return False

        self._current = ActiveDialog(identity=identity, mode=mode, payload=payload)
        logger.debug(f"Opened dialog {identity.value} (mode={mode.value})")
        self._notify()
        return True

    def close_dialog(self) -> None:
        """Close whatever dialog is open. Safe to call when idle."""
        if self._current.is_idle:
            return
        logger.debug(f"Closed dialog {self._current.identity.value}")
        self._current = ActiveDialog.idle()
        self._notify()

    def subscribe(self, listener: DialogListener) -> Callable[[], None]:
        """Call ``listener`` after every effective state change.

        Returns a callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        state = self._current
        for listener in list(self._listeners):
            listener(state)
