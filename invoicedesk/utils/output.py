"""Console output shared by the CLI commands."""

from rich.console import Console

from invoicedesk.models import Invoice

console = Console(force_terminal=True, color_system="auto")


def print_invoice_json(invoice: Invoice) -> None:
    """Print ``invoice`` as its stored camelCase document.

    Highlighting is off so the output stays parseable when piped.
    """
    console.print_json(data=invoice.to_dict(), highlight=False)
