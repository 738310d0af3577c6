"""
Inventory store interface.
Holds the authoritative available_seats counter per event.
"""

from abc import ABC, abstractmethod


class InventoryStore(ABC):
    """
    Interface for seat inventory.

    Implementations:
    - SqlInventoryStore: conditional UPDATE, row-level atomicity in the database
    - MemoryInventoryStore: per-event asyncio.Lock

    reserve() must be linearizable per event. Calls for different events
    must not block each other.
    """

    @abstractmethod
    async def get_availability(self, event_id: str) -> int:
        """
        Current available seats.

        Raises:
            EventNotFound: If the event does not exist.
        """
        pass

    @abstractmethod
    async def reserve(self, event_id: str, count: int) -> int:
        """
        Atomically take `count` seats if at least that many are left.

        Returns:
            The new available seat count.

        Raises:
            EventNotFound: If the event does not exist.
            InsufficientInventory: If count > available seats. Nothing is changed.
        """
        pass

    @abstractmethod
    async def release(self, event_id: str, count: int) -> int:
        """
        Give `count` seats back, never going above total_seats.

        Returns:
            The new available seat count.
        """
        pass
