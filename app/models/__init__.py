"""
Database models package
"""

from .guest import WeddingGuest
from .master_guest import MasterGuest

__all__ = ["WeddingGuest", "MasterGuest"]
