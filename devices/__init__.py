"""
Devices module - Machines bound to licenses.

This module handles:
- Device entity
- Activation (binding a machine to a license, device limit)
- Heartbeat (last-seen tracking)
"""
