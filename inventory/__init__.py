"""
Inventory management module.

Handles:
- Capacity per room type
- Per-day occupancy ledger
- Availability checking and commits
"""

from .rooms import RoomInventory

__all__ = [
    'RoomInventory'
]
