"""
Booking model: one ledger entry per successful reservation.

Key design decisions:
- Rows are never deleted by the booking flow; cancellation flips `status`
- `total_amount` is frozen at booking time (later price edits don't rewrite history)
- A user may hold several bookings for the same event
"""

import enum

from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship

from eventhub.db.base import Base, TimestampMixin, new_id


class BookingStatus(str, enum.Enum):
    CONFIRMED = "confirmed"
    PENDING = "pending"
    CANCELLED = "cancelled"


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    tickets_count = Column(Integer, nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), nullable=False, default=BookingStatus.CONFIRMED.value)

    event = relationship("Event", lazy="selectin")

    __table_args__ = (
        CheckConstraint("tickets_count > 0", name="check_booking_tickets_positive"),
        CheckConstraint("total_amount >= 0", name="check_booking_amount_non_negative"),
        CheckConstraint("status IN ('confirmed', 'pending', 'cancelled')", name="check_booking_status"),
        Index("ix_bookings_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, user={self.user_id}, event={self.event_id}, status={self.status})>"
