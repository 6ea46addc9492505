"""
invoicedesk - terminal invoice editor
"""

__version__ = "0.1.0"
