"""
Public profile of a user. Shares its primary key with users.id and is
created together with the user at registration.
"""

from sqlalchemy import Column, String, ForeignKey

from eventhub.db.base import Base, TimestampMixin


class Profile(Base, TimestampMixin):
    __tablename__ = "profiles"

    id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    full_name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, name={self.full_name})>"
