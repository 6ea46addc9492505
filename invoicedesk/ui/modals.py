#!/usr/bin/env python3
"""
Modal screens rendered for the invoice dialog slots.

Each screen receives the ``ActiveDialog`` that opened it and dismisses itself
with a result; the dialog provider closes the coordinator on dismissal.
"""

import logging
from typing import Dict, List, Optional

from textual.app import ComposeResult
from textual.containers import Grid, Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label

from invoicedesk.models import Invoice
from invoicedesk.ui.dialog_state import ActiveDialog, DialogMode, MetadataPayload

logger = logging.getLogger(__name__)

DIALOG_CSS = """
#dialog {
    padding: 1 2;
    width: 64;
    height: auto;
    border: thick $background 80%;
    background: $surface;
}

#dialog Label {
    width: 100%;
    margin-bottom: 1;
}

#dialog .buttons {
    height: 3;
    align-horizontal: right;
}

#dialog Button {
    margin-left: 1;
}
"""


class DeleteInvoiceScreen(ModalScreen[bool]):
    """Confirmation before an invoice is deleted."""

    CSS = """
    DeleteInvoiceScreen {
        align: center middle;
    }

    #dialog {
        grid-size: 2;
        grid-gutter: 1 2;
        grid-rows: 1fr 3;
        padding: 0 2;
        width: 60;
        height: 11;
        border: thick $background 80%;
        background: $surface;
    }

    #question {
        column-span: 2;
        height: 3;
        content-align: center middle;
        text-style: bold;
    }

    Button {
        width: 100%;
    }
    """

    BINDINGS = [
        ("y", "confirm_delete", "Yes"),
        ("n", "cancel", "No"),
        ("escape", "cancel", "Cancel"),
    ]

    def __init__(self, dialog: ActiveDialog):
        super().__init__()
        self.invoice: Invoice = dialog.payload

    def compose(self) -> ComposeResult:
        with Grid(id="dialog"):
            yield Label(
                f'Delete invoice {self.invoice.id}?\n"{self.invoice.name}"\n\n'
                f"[dim]Press [bold]y[/bold] to delete, [bold]n[/bold] to cancel[/dim]",
                id="question",
            )
            yield Button("Cancel (n)", variant="primary", id="delete-cancel")
            yield Button("Delete (y)", variant="error", id="delete-confirm")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.dismiss(event.button.id == "delete-confirm")

    def action_confirm_delete(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)


class ShareInvoiceScreen(ModalScreen[Optional[List[str]]]):
    """Edit the list of users an invoice is shared with."""

    CSS = "ShareInvoiceScreen { align: center middle; }\n" + DIALOG_CSS

    BINDINGS = [("escape", "cancel", "Cancel")]

    def __init__(self, dialog: ActiveDialog):
        super().__init__()
        self.invoice: Invoice = dialog.payload

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Label(f"Share [bold]{self.invoice.name or self.invoice.id}[/bold] with (comma-separated user ids):")
            yield Input(value=", ".join(self.invoice.shared_with), id="share-users")
            with Horizontal(classes="buttons"):
                yield Button("Cancel", id="share-cancel")
                yield Button("Share", variant="primary", id="share-confirm")

    def on_mount(self) -> None:
        self.query_one("#share-users", Input).focus()

    def _users(self) -> List[str]:
        raw = self.query_one("#share-users", Input).value
        return [user.strip() for user in raw.split(",") if user.strip()]

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.dismiss(self._users())

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.id == "share-confirm":
            self.dismiss(self._users())
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)


class MetadataScreen(ModalScreen[Optional[Dict[str, Optional[str]]]]):
    """Add, edit or delete one additional-metadata entry.

    Dismisses with ``{key: value}`` for add/edit, ``{key: None}`` for delete and
    ``None`` when cancelled.
    """

    CSS = "MetadataScreen { align: center middle; }\n" + DIALOG_CSS

    BINDINGS = [("escape", "cancel", "Cancel")]

    TITLES = {
        DialogMode.ADD: "Add metadata",
        DialogMode.EDIT: "Edit metadata",
        DialogMode.DELETE: "Delete metadata",
    }

    def __init__(self, dialog: ActiveDialog):
        super().__init__()
        self.mode = dialog.mode if dialog.mode in self.TITLES else DialogMode.ADD
        payload: MetadataPayload = dialog.payload
        self.invoice = payload.invoice
        self.key = payload.key or ""
        self.value = payload.value

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Label(f"[bold]{self.TITLES[self.mode]}[/bold]")
            if self.mode is DialogMode.DELETE:
                yield Label(f"Remove [bold]{self.key}[/bold] = {self.value!r}?", id="metadata-question")
            else:
                yield Input(
                    value=self.key,
                    placeholder="key",
                    disabled=self.mode is DialogMode.EDIT,
                    id="metadata-key",
                )
                yield Input(value=self.value, placeholder="value", id="metadata-value")
            with Horizontal(classes="buttons"):
                yield Button("Cancel", id="metadata-cancel")
                yield Button(
                    "Delete" if self.mode is DialogMode.DELETE else "Save",
                    variant="error" if self.mode is DialogMode.DELETE else "primary",
                    id="metadata-confirm",
                )

    def on_mount(self) -> None:
        if self.mode is DialogMode.ADD:
            self.query_one("#metadata-key", Input).focus()
        elif self.mode is DialogMode.EDIT:
            self.query_one("#metadata-value", Input).focus()

    def _result(self) -> Optional[Dict[str, Optional[str]]]:
        if self.mode is DialogMode.DELETE:
            return {self.key: None}
        key = self.query_one("#metadata-key", Input).value.strip()
        if not key:
            self.notify("Metadata key cannot be empty", severity="warning")
            return None
        return {key: self.query_one("#metadata-value", Input).value}

    def _confirm(self) -> None:
        result = self._result()
        if result is not None:
            self.dismiss(result)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self._confirm()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.id == "metadata-confirm":
            self._confirm()
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)
