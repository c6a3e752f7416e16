# File: villa_admin/api/v1/api.py
from fastapi import APIRouter
from villa_admin.api.v1.endpoints import villas, calendar, seasonal_prices, reservations, regions, tags, customers, villa_seo

# Create main API router
api_router = APIRouter()

api_router.include_router(
    villas.router,
    prefix="/villas",
    tags=["villas"]
)

# Calendar, availability and pricing live under /villas/{villa_id}
api_router.include_router(
    calendar.router,
    prefix="/villas",
    tags=["calendar"]
)

api_router.include_router(
    seasonal_prices.router,
    prefix="/seasonal-prices",
    tags=["seasonal-prices"]
)

api_router.include_router(
    reservations.router,
    prefix="/reservations",
    tags=["reservations"]
)

api_router.include_router(
    regions.router,
    prefix="/regions",
    tags=["regions"]
)

api_router.include_router(
    tags.router,
    prefix="/tags",
    tags=["tags"]
)

api_router.include_router(
    customers.router,
    prefix="/customers",
    tags=["customers"]
)

api_router.include_router(
    villa_seo.router,
    prefix="/villa-seo",
    tags=["villa-seo"]
)
