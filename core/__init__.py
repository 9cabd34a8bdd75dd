"""
Core module for shared domain infrastructure.

This module contains:
- Domain events, exceptions and value objects
- Clock and transaction helpers
- Middleware components (bearer auth, observability, metrics)
- Health views and management commands
"""
