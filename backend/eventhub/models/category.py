"""
Event category. Reference data seeded by migration 001.
"""

from sqlalchemy import Column, String

from eventhub.db.base import Base, TimestampMixin, new_id


class Category(Base, TimestampMixin):
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name})>"
