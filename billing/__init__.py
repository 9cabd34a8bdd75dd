"""
Billing module - Companies, banks and invoices.

This module handles:
- Company and Bank entities
- Invoice entity with owned line items
- Invoice create/update/delete with the license status cascade
"""
