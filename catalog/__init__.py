"""
Catalog module - Product and Plan management.

This module handles:
- Product entity
- Plan entity (price, device limit, duration)
- Catalog repositories (ports and Django adapters)
"""
