"""
Access-control collaborator.
"""

from abc import ABC, abstractmethod


class AccessControl(ABC):
    """Answers whether a verified user may use admin operations."""

    @abstractmethod
    async def is_admin(self, user_id: str) -> bool:
        pass
