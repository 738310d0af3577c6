"""
Pydantic schemas for event-related request/response validation.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field


class CategoryResponse(BaseModel):
    id: str
    name: str

    model_config = {"from_attributes": True}


class OrganizerResponse(BaseModel):
    id: str
    full_name: Optional[str]

    model_config = {"from_attributes": True}


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    category_id: Optional[str] = None
    location: Optional[str] = Field(None, max_length=255)
    venue_name: Optional[str] = Field(None, max_length=255)
    start_date: datetime
    end_date: Optional[datetime] = None
    price: Decimal = Field(Decimal("0.00"), ge=0, max_digits=10, decimal_places=2)
    total_seats: int = Field(..., gt=0, le=100000)
    featured: bool = False
    tags: list[str] = Field(default_factory=list)


class EventResponse(BaseModel):
    id: str
    title: str
    description: Optional[str]
    category_id: Optional[str]
    category: Optional[CategoryResponse] = None
    location: Optional[str]
    venue_name: Optional[str]
    start_date: datetime
    end_date: Optional[datetime]
    price: Decimal
    total_seats: int
    available_seats: int
    status: str
    featured: bool
    tags: list[str]
    organizer_id: Optional[str]
    created_at: datetime

    model_config = {"from_attributes": True}


class EventDetailResponse(EventResponse):
    organizer: Optional[OrganizerResponse] = None


class EventListResponse(BaseModel):
    events: list[EventResponse]
    total: int
    cached: bool = False
