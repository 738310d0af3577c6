"""
Event model with seat inventory tracking.

Key design decisions:
- `available_seats` is denormalized (avoids SUM over bookings on every read)
  and is only ever changed by the inventory store's conditional UPDATEs
- `total_seats` is fixed at creation; CHECK constraints keep
  0 <= available_seats <= total_seats even if application code is wrong
- `version` is bumped on every inventory mutation so external readers can
  detect that a cached seat count is stale
- Index on (status, start_date) covers the public listing query
"""

import enum

from sqlalchemy import (
    Column, Integer, String, Text, Boolean, Numeric, JSON, DateTime,
    ForeignKey, Index, CheckConstraint,
)
from sqlalchemy.orm import relationship

from eventhub.db.base import Base, TimestampMixin, new_id


class EventStatus(str, enum.Enum):
    UPCOMING = "upcoming"
    PAST = "past"
    CANCELLED = "cancelled"


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    location = Column(String(255), nullable=True)
    venue_name = Column(String(255), nullable=True)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    total_seats = Column(Integer, nullable=False)
    available_seats = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default=EventStatus.UPCOMING.value)
    featured = Column(Boolean, nullable=False, default=False)
    tags = Column(JSON, nullable=False, default=list)
    organizer_id = Column(String(36), ForeignKey("profiles.id"), nullable=True)

    version = Column(Integer, nullable=False, default=1)

    category = relationship("Category", lazy="selectin")
    organizer = relationship("Profile", lazy="selectin")

    __table_args__ = (
        CheckConstraint("available_seats >= 0", name="check_available_seats_non_negative"),
        CheckConstraint("total_seats > 0", name="check_total_seats_positive"),
        CheckConstraint("available_seats <= total_seats", name="check_available_lte_total"),
        CheckConstraint("price >= 0", name="check_price_non_negative"),
        CheckConstraint("status IN ('upcoming', 'past', 'cancelled')", name="check_event_status"),
        Index("ix_events_status_start_date", "status", "start_date"),
        Index("ix_events_featured_start_date", "featured", "start_date"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title={self.title}, available={self.available_seats}/{self.total_seats})>"
