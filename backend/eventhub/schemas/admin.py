"""
Pydantic schemas for the admin dashboard.
"""

from decimal import Decimal
from pydantic import BaseModel


class AdminStatsResponse(BaseModel):
    total_events: int
    total_bookings: int
    total_revenue: Decimal
