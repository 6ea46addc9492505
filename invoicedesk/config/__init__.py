"""Configuration package for invoicedesk."""
