from .base import BaseModel
from .region import Region
from .villa import Villa, VillaStatus, Tag, VillaTag, VillaAmenity
from .calendar import CalendarDay, CalendarStatus, EventType
from .seasonal_price import SeasonalPrice
from .reservation import Reservation, ReservationStatus, PaymentType
from .customer import Customer, CustomerStatus
from .villa_seo import VillaSEO

__all__ = [
    "BaseModel", "Region", "Villa", "VillaStatus", "Tag", "VillaTag", "VillaAmenity",
    "CalendarDay", "CalendarStatus", "EventType", "SeasonalPrice",
    "Reservation", "ReservationStatus", "PaymentType",
    "Customer", "CustomerStatus", "VillaSEO",
]
