#!/usr/bin/env python3
"""
Main CLI entry point for invoicedesk
"""

from pathlib import Path
from typing import Optional

import typer
from rich.panel import Panel
from rich.table import Table

from invoicedesk import __version__
from invoicedesk.config.settings import get_store_path, validate_all_env_vars
from invoicedesk.error_handling import handle_error, setup_logging, warn_user
from invoicedesk.exceptions import InvoicedeskError
from invoicedesk.models import Invoice
from invoicedesk.services.invoice_store import InvoiceStore
from invoicedesk.utils.datetime_utils import format_datetime
from invoicedesk.utils.output import console, print_invoice_json

app = typer.Typer(help="invoicedesk - edit invoices from the terminal")


def _store(ctx: typer.Context) -> InvoiceStore:
    return InvoiceStore(ctx.obj["store_path"])


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-error output"),
    store: Optional[Path] = typer.Option(
        None, "--store", envvar="INVOICEDESK_STORE", help="Path to the invoice store JSON file"
    ),
):
    """
    invoicedesk - edit invoices from the terminal

    [bold]Examples:[/bold]

    List invoices:
        [cyan]invoicedesk list[/cyan]

    Edit one invoice:
        [cyan]invoicedesk edit 3f2a9c[/cyan]
    """
    if verbose and quiet:
        typer.echo("Error: --verbose and --quiet are mutually exclusive", err=True)
        raise typer.Exit(1)

    setup_logging(verbose=verbose, quiet=quiet)
    for error in validate_all_env_vars():
        warn_user(error)

    try:
        store_path = get_store_path(store)
    except InvoicedeskError as e:
        handle_error(e, "resolve store path")
        return
    ctx.obj = {"store_path": store_path}


@app.command("list")
def list_cmd(ctx: typer.Context) -> None:
    """List invoices in the store.

    Examples:
        invoicedesk list
    """
    try:
        invoices = _store(ctx).list_invoices()
    except InvoicedeskError as e:
        handle_error(e, "list invoices")
        return

    if not invoices:
        console.print("[yellow]No invoices[/yellow]")
        return

    table = Table()
    table.add_column("ID", min_width=8)
    table.add_column("Name", min_width=15)
    table.add_column("Category", width=14)
    table.add_column("Date", width=10)
    table.add_column("Total", justify="right", width=10)
    table.add_column("!", width=1)

    for invoice in invoices:
        payment = invoice.payment_information
        table.add_row(
            invoice.id,
            invoice.name,
            invoice.category.name.replace("_", " ").title(),
            format_datetime(payment.transaction_date, "%Y-%m-%d"),
            f"{payment.total_cost_amount:.2f} {payment.currency.code}",
            "★" if invoice.is_important else "",
        )

    console.print(table)


def _describe(invoice: Invoice) -> str:
    payment = invoice.payment_information
    lines = [
        f"[bold]Name:[/bold] {invoice.name}",
        f"[bold]Description:[/bold] {invoice.description or '-'}",
        f"[bold]Category:[/bold] {invoice.category.name}",
        f"[bold]Payment:[/bold] {payment.payment_type.name} on {format_datetime(payment.transaction_date)}",
        f"[bold]Total:[/bold] {payment.total_cost_amount:.2f} {payment.currency.code}"
        f" (tax {payment.total_tax_amount:.2f})",
        f"[bold]Important:[/bold] {'yes' if invoice.is_important else 'no'}",
        f"[bold]Shared with:[/bold] {', '.join(invoice.shared_with) or '-'}",
    ]
    for key, value in sorted(invoice.additional_metadata.items()):
        lines.append(f"[dim]{key}[/dim] = {value}")
    return "\n".join(lines)


@app.command()
def show(
    ctx: typer.Context,
    invoice_id: str = typer.Argument(..., help="Invoice ID"),
    json_output: bool = typer.Option(False, "--json", help="Print the stored JSON document"),
) -> None:
    """Show one invoice.

    Examples:
        invoicedesk show 3f2a9c
        invoicedesk show 3f2a9c --json
    """
    try:
        invoice = _store(ctx).get_invoice(invoice_id)
    except InvoicedeskError as e:
        handle_error(e, "show invoice")
        return

    if json_output:
        print_invoice_json(invoice)
        return

    console.print(Panel(_describe(invoice), title=f"Invoice {invoice.id}", title_align="left"))


@app.command()
def edit(
    ctx: typer.Context,
    invoice_id: str = typer.Argument(..., help="Invoice ID"),
) -> None:
    """Open the invoice editor TUI.

    Examples:
        invoicedesk edit 3f2a9c
    """
    from invoicedesk.ui.invoice_editor import InvoiceEditorApp

    store = _store(ctx)
    try:
        invoice = store.get_invoice(invoice_id)
        merchant = store.get_merchant(invoice.merchant_reference) if invoice.merchant_reference else None
    except InvoicedeskError as e:
        handle_error(e, "open invoice")
        return

    try:
        InvoiceEditorApp(store, invoice, merchant).run()
    except KeyboardInterrupt:
        pass


@app.command()
def version() -> None:
    """Show invoicedesk version"""
    typer.echo(f"invoicedesk version {__version__}")


def run():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    run()
