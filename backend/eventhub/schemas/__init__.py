from eventhub.schemas.user import (
    UserCreate, UserResponse, UserLogin, Token, ProfileResponse, ProfileUpdate,
)
from eventhub.schemas.event import (
    CategoryResponse, EventCreate, EventResponse, EventDetailResponse, EventListResponse,
)
from eventhub.schemas.booking import (
    BookingCreate, BookingResponse, UserBookingResponse, BookingCancelResponse,
)
from eventhub.schemas.admin import AdminStatsResponse

__all__ = [
    "UserCreate", "UserResponse", "UserLogin", "Token", "ProfileResponse", "ProfileUpdate",
    "CategoryResponse", "EventCreate", "EventResponse", "EventDetailResponse", "EventListResponse",
    "BookingCreate", "BookingResponse", "UserBookingResponse", "BookingCancelResponse",
    "AdminStatsResponse",
]
