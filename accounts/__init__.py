"""
Accounts module - Users, roles and access control.

This module handles:
- User entity and password login
- Roles, menus and per-menu permission grants (RBAC)
- Activity log of changes made through the dashboard
"""
