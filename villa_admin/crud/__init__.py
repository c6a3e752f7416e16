from .region import region
from .tag import tag
from .villa import villa
from .customer import customer
from .villa_seo import villa_seo
from .seasonal_price import seasonal_price
from .calendar_day import calendar_day
from .reservation import reservation

__all__ = ["region", "tag", "villa", "customer", "villa_seo", "seasonal_price", "calendar_day", "reservation"]
