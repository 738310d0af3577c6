"""
Pydantic schemas for booking-related request/response validation.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, StrictInt

from eventhub.schemas.event import CategoryResponse


class BookingCreate(BaseModel):
    event_id: str
    # JSON true must not become one ticket
    tickets_count: StrictInt = Field(default=1, gt=0)


class BookingResponse(BaseModel):
    id: str
    user_id: str
    event_id: str
    tickets_count: int
    total_amount: Decimal
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class BookedEventSummary(BaseModel):
    id: str
    title: str
    start_date: datetime
    location: Optional[str]
    venue_name: Optional[str]
    price: Decimal
    category: Optional[CategoryResponse] = None

    model_config = {"from_attributes": True}


class UserBookingResponse(BookingResponse):
    event: Optional[BookedEventSummary] = None


class BookingCancelResponse(BaseModel):
    message: str
    booking_id: str
    status: str
