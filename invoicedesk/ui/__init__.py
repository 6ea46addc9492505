"""Textual UI for invoicedesk."""
