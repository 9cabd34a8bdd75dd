"""
Licenses module - License records and their status lifecycle.

This module handles:
- License entity and key generation
- Lifecycle decisions (read-time expiry, invoice-driven cascades)
- License repository (port and Django adapter)
- Create, update, delete and read handlers
"""
