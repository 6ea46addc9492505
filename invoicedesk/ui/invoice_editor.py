"""
Invoice editor TUI.

Form widgets write into a ``PendingEditTracker``; a single save sends the
minimal patch to the store. Delete, share and metadata dialogs go through the
app-wide dialog coordinator, so only one of them can be open at a time.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import (
    Button,
    Checkbox,
    Footer,
    Header,
    Input,
    Label,
    OptionList,
    Select,
    Static,
)
from textual.widgets.option_list import Option

from invoicedesk.exceptions import StoreError
from invoicedesk.models import Invoice, InvoiceCategory, Merchant, PaymentType
from invoicedesk.services.invoice_store import InvoiceStore
from invoicedesk.ui.dialog_state import ActiveDialog, DialogIdentity, DialogMode, MetadataPayload
from invoicedesk.ui.dialogs import DialogProvider, use_dialog
from invoicedesk.ui.edit_state import PendingEditTracker, make_invoice_tracker
from invoicedesk.ui.modals import DeleteInvoiceScreen, MetadataScreen, ShareInvoiceScreen
from invoicedesk.utils.datetime_utils import DATE_ONLY_FORMAT

logger = logging.getLogger(__name__)

# Form widget id -> tracked field
_INPUT_FIELDS = {"name": "name", "description": "description"}
_SELECT_FIELDS = {
    "category": ("category", InvoiceCategory),
    "payment-type": ("paymentType", PaymentType),
}


def _label(member) -> str:
    return member.name.replace("_", " ").title()


def parse_date_input(text: str) -> Optional[datetime]:
    """Parse a YYYY-MM-DD form value as a UTC datetime, or None if invalid."""
    try:
        return datetime.strptime(text.strip(), DATE_ONLY_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        return None


class InvoiceEditorApp(DialogProvider, App):
    """Edit one invoice from the store."""

    TITLE = "invoicedesk"

    CSS = """
    #invoice-form {
        padding: 1 2;
        height: auto;
    }

    #invoice-form Label {
        margin-top: 1;
        color: $text-muted;
    }

    #metadata-list {
        height: auto;
        max-height: 8;
    }

    #status {
        margin-top: 1;
        height: 1;
    }

    #status.dirty {
        color: $warning;
        text-style: bold;
    }

    #actions {
        height: 3;
        margin-top: 1;
    }

    #actions Button {
        margin-right: 1;
    }
    """

    BINDINGS = [
        Binding("ctrl+s", "save", "Save", priority=True),
        Binding("ctrl+r", "discard", "Discard", priority=True),
        Binding("ctrl+o", "share", "Share", priority=True),
        Binding("ctrl+t", "add_metadata", "Add metadata", priority=True),
        Binding("ctrl+k", "delete", "Delete", priority=True),
    ]

    DIALOG_SCREENS = {
        DialogIdentity.SHARED__INVOICE_DELETE: DeleteInvoiceScreen,
        DialogIdentity.SHARED__INVOICE_SHARE: ShareInvoiceScreen,
        DialogIdentity.EDIT_INVOICE__METADATA: MetadataScreen,
    }

    def __init__(self, store: InvoiceStore, invoice: Invoice, merchant: Optional[Merchant] = None, **kwargs):
        super().__init__(**kwargs)
        self.store = store
        self.merchant = merchant
        self.tracker: PendingEditTracker[Invoice] = make_invoice_tracker(invoice, store.apatch_invoice)

    @property
    def invoice(self) -> Invoice:
        return self.tracker.base

    def compose(self) -> ComposeResult:
        invoice = self.invoice
        payment = invoice.payment_information
        yield Header()
        with Vertical(id="invoice-form"):
            yield Label("Name")
            yield Input(value=invoice.name, id="name")
            yield Label("Description")
            yield Input(value=invoice.description, id="description")
            yield Label("Category")
            yield Select(
                [(_label(c), c.value) for c in InvoiceCategory],
                value=invoice.category.value,
                allow_blank=False,
                id="category",
            )
            yield Label("Payment type")
            yield Select(
                [(_label(p), p.value) for p in PaymentType],
                value=payment.payment_type.value,
                allow_blank=False,
                id="payment-type",
            )
            yield Label("Transaction date (YYYY-MM-DD)")
            yield Input(value=payment.transaction_date.strftime(DATE_ONLY_FORMAT), id="transaction-date")
            yield Checkbox("Important", invoice.is_important, id="important")
            yield Static(self._merchant_text(), id="merchant")
            yield Label("Additional metadata (Enter to edit)")
            yield OptionList(id="metadata-list")
            yield Static("", id="status")
            with Horizontal(id="actions"):
                yield Button("Save", variant="primary", id="save")
                yield Button("Discard", id="discard")
                yield Button("Share", id="share")
                yield Button("Add metadata", id="add-metadata")
                yield Button("Remove metadata", id="remove-metadata")
                yield Button("Delete", variant="error", id="delete")
        yield Footer()

    def on_mount(self) -> None:
        self.sub_title = f"Invoice {self.invoice.id}"
        self._refresh_metadata()
        self._refresh_status()

    # ------------------------------------------------------------------
    # Form -> tracker
    # ------------------------------------------------------------------

    def on_input_changed(self, event: Input.Changed) -> None:
        input_id = event.input.id
        if input_id in _INPUT_FIELDS:
            self.tracker.set_field(_INPUT_FIELDS[input_id], event.value)
        elif input_id == "transaction-date":
            date = parse_date_input(event.value)
            if date is None:
                self._refresh_status(invalid_date=True)
                return
            self.tracker.set_field("transactionDate", date)
        else:
            return
        self._refresh_status()

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id not in _SELECT_FIELDS:
            return
        field_name, enum_type = _SELECT_FIELDS[event.select.id]
        self.tracker.set_field(field_name, enum_type(event.value))
        self._refresh_status()

    def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        if event.checkbox.id == "important":
            self.tracker.set_field("isImportant", event.value)
            self._refresh_status()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option_list.id == "metadata-list" and event.option.id is not None:
            self._open_metadata(DialogMode.EDIT, event.option.id)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save":
            self.run_worker(self.action_save(), exclusive=True)
            return
        actions = {
            "discard": self.action_discard,
            "share": self.action_share,
            "add-metadata": self.action_add_metadata,
            "remove-metadata": self._remove_highlighted_metadata,
            "delete": self.action_delete,
        }
        action = actions.get(event.button.id)
        if action is not None:
            action()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def action_save(self) -> None:
        self._refresh_status(saving=True)
        result = await self.tracker.save_changes()
        if result.nothing_to_save:
            self.notify("No changes to save")
        elif result.success:
            self.notify("Invoice updated successfully")
            self._refresh_metadata()
        else:
            self.notify(result.error or "Failed to save changes", title="Save failed", severity="error")
        self._refresh_status()

    def action_discard(self) -> None:
        self.tracker.discard_changes()
        self._load_form(self.invoice)
        self._refresh_status()

    def action_share(self) -> None:
        use_dialog(self, DialogIdentity.SHARED__INVOICE_SHARE, DialogMode.SHARE, self.invoice).open()

    def action_delete(self) -> None:
        use_dialog(self, DialogIdentity.SHARED__INVOICE_DELETE, DialogMode.DELETE, self.invoice).open()

    def action_add_metadata(self) -> None:
        self._open_metadata(DialogMode.ADD)

    def _remove_highlighted_metadata(self) -> None:
        option_list = self.query_one("#metadata-list", OptionList)
        if option_list.highlighted is None:
            self.notify("Select a metadata entry first", severity="warning")
            return
        option = option_list.get_option_at_index(option_list.highlighted)
        if option.id is not None:
            self._open_metadata(DialogMode.DELETE, option.id)

    def _open_metadata(self, mode: DialogMode, key: Optional[str] = None) -> None:
        payload = MetadataPayload(
            invoice=self.invoice,
            key=key,
            value=self.invoice.additional_metadata.get(key, "") if key else "",
        )
        use_dialog(self, DialogIdentity.EDIT_INVOICE__METADATA, mode, payload).open()

    # ------------------------------------------------------------------
    # Dialog results
    # ------------------------------------------------------------------

    def on_dialog_result(self, state: ActiveDialog, result: Any) -> None:
        identity = state.identity
        if identity is DialogIdentity.SHARED__INVOICE_DELETE and result is True:
            self._delete_invoice()
        elif identity is DialogIdentity.SHARED__INVOICE_SHARE and result is not None:
            self.run_worker(self._apply_patch({"sharedWith": result}, "Sharing updated"))
        elif identity is DialogIdentity.EDIT_INVOICE__METADATA and result:
            self.run_worker(self._apply_patch({"additionalMetadata": result}, "Metadata updated"))

    def _delete_invoice(self) -> None:
        try:
            self.store.delete_invoice(self.invoice.id)
        except StoreError as e:
            logger.error(f"Failed to delete invoice {self.invoice.id}: {e}")
            self.notify(e.message, title="Delete failed", severity="error")
            return
        self.exit(result="deleted", message=f"Deleted invoice {self.invoice.id}")

    async def _apply_patch(self, payload: Dict[str, Any], success_message: str) -> None:
        result = await self.store.apatch_invoice(self.invoice.id, payload)
        if not result.success:
            self.notify(result.error or "Update failed", severity="error")
            return
        self.tracker.reload(result.invoice)
        self._refresh_metadata()
        self._refresh_status()
        self.notify(success_message)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def _merchant_text(self) -> str:
        if self.merchant is None:
            return f"Merchant: {self.invoice.merchant_reference or 'unknown'}"
        return f"Merchant: {self.merchant.name} ({self.merchant.address})"

    def _load_form(self, invoice: Invoice) -> None:
        payment = invoice.payment_information
        self.query_one("#name", Input).value = invoice.name
        self.query_one("#description", Input).value = invoice.description
        self.query_one("#category", Select).value = invoice.category.value
        self.query_one("#payment-type", Select).value = payment.payment_type.value
        self.query_one("#transaction-date", Input).value = payment.transaction_date.strftime(DATE_ONLY_FORMAT)
        self.query_one("#important", Checkbox).value = invoice.is_important

    def _refresh_metadata(self) -> None:
        option_list = self.query_one("#metadata-list", OptionList)
        option_list.clear_options()
        for key, value in sorted(self.invoice.additional_metadata.items()):
            option_list.add_option(Option(f"{key} = {value}", id=key))
        shared = ", ".join(self.invoice.shared_with) or "nobody"
        self.sub_title = f"Invoice {self.invoice.id} · shared with {shared}"

    def _refresh_status(self, saving: bool = False, invalid_date: bool = False) -> None:
        status = self.query_one("#status", Static)
        if saving:
            status.update("Saving…")
        elif invalid_date:
            status.update("Transaction date must be YYYY-MM-DD")
        elif self.tracker.has_changes:
            status.update(f"● Unsaved changes: {', '.join(sorted(self.tracker.pending_changes))}")
        else:
            status.update("No unsaved changes")
        status.set_class(self.tracker.has_changes, "dirty")
