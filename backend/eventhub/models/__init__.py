from eventhub.models.user import User, UserRole
from eventhub.models.profile import Profile
from eventhub.models.category import Category
from eventhub.models.event import Event, EventStatus
from eventhub.models.booking import Booking, BookingStatus

__all__ = [
    "User", "UserRole", "Profile", "Category",
    "Event", "EventStatus", "Booking", "BookingStatus",
]
