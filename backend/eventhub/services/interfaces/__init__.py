"""
Service interfaces for dependency inversion.
The reservation flow depends only on these; SQL and in-memory
implementations are swapped in by the caller.
"""

from .inventory import InventoryStore
from .ledger import BookingLedger
from .catalog import QueryFacade
from .access import AccessControl

__all__ = ['InventoryStore', 'BookingLedger', 'QueryFacade', 'AccessControl']
