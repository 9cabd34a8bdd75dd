"""
Model registry for the billing app.
"""
from billing.infrastructure.models import Bank, Company, Invoice, InvoiceLineItem  # noqa: F401
