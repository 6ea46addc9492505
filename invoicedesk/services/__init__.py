"""Services for invoicedesk."""
