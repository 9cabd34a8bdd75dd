"""
Device commands.

Commands sent by installed clients. They authenticate with the license
key, not with a user token.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ActivateDeviceCommand:
    """Command to bind a machine to a license."""

    license_key: str
    computer_id: str
    name: Optional[str] = None
    processor: Optional[str] = None
    os: Optional[str] = None
    ram: Optional[str] = None


@dataclass
class HeartbeatCommand:
    """Command sent periodically by an activated machine."""

    license_key: str
    computer_id: str
