"""
Domain errors raised by the services and CRUD helpers.

Each error carries a machine readable ``code`` and the HTTP status the API
answers with; ``villa_admin.main`` turns them into JSON responses.
"""
from datetime import date
from typing import Any, Dict, List, Optional


class VillaAdminError(Exception):
    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        body = {
            "error": self.code,
            "message": self.message,
            "status_code": self.status_code,
        }
        if self.details:
            body["details"] = self.details
        return body


# Validation errors: rejected before any write
class ValidationError(VillaAdminError):
    status_code = 422
    code = "validation_error"


class InvalidDateRangeError(ValidationError):
    code = "invalid_date_range"

    def __init__(self, start_date: date, end_date: date, message: Optional[str] = None):
        super().__init__(
            message or f"Invalid date range: {start_date} - {end_date}",
            {"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
        )


class MinimumStayError(ValidationError):
    code = "minimum_stay"

    def __init__(self, nights: int, minimum_stay: int):
        super().__init__(
            f"Stay of {nights} night(s) is shorter than the villa minimum of {minimum_stay}",
            {"nights": nights, "minimum_stay": minimum_stay},
        )


class IncompleteQuoteError(ValidationError):
    code = "incomplete_quote"

    def __init__(self, villa_id: int, missing_dates: List[date]):
        self.villa_id = villa_id
        self.missing_dates = list(missing_dates)
        super().__init__(
            f"No price available for {len(self.missing_dates)} night(s) of villa {villa_id}",
            {"missing_dates": [d.isoformat() for d in self.missing_dates]},
        )


class NotFoundError(VillaAdminError):
    status_code = 404
    code = "not_found"

    def __init__(self, resource: str, identifier: Any):
        super().__init__(f"{resource} {identifier} not found", {"resource": resource})


# Conflict errors: rejected before the primary write
class ConflictError(VillaAdminError):
    status_code = 409
    code = "conflict"


class DuplicateError(ConflictError):
    code = "duplicate"


class ReservationConflictError(ConflictError):
    code = "date_range_unavailable"

    def __init__(self, villa_id: int, start_date: date, end_date: date, booking_refs: List[str]):
        super().__init__(
            f"Villa {villa_id} is not available between {start_date} and {end_date}",
            {
                "villa_id": villa_id,
                "start_date": start_date.isoformat(),
                "end_date": end_date.isoformat(),
                "conflicting_booking_refs": booking_refs,
            },
        )


class DuplicateBookingRefError(ConflictError):
    code = "duplicate_booking_ref"

    def __init__(self, booking_ref: str):
        super().__init__(
            f"Booking reference {booking_ref} is already in use",
            {"booking_ref": booking_ref},
        )


class DuplicateDateRangeError(ConflictError):
    code = "duplicate_date_range"

    def __init__(self, villa_id: int, start_date: date, end_date: date):
        super().__init__(
            f"Villa {villa_id} already has a seasonal price for {start_date} - {end_date}",
            {"villa_id": villa_id, "start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
        )


class SeasonalPriceOverlapError(ConflictError):
    code = "seasonal_price_overlap"

    def __init__(self, villa_id: int, overlapping: List[str]):
        super().__init__(
            f"Active seasonal price overlaps existing season(s): {', '.join(overlapping)}",
            {"villa_id": villa_id, "overlapping_seasons": overlapping},
        )


# Partial failure: reservation written but calendar cache not updated
class CalendarSyncError(VillaAdminError):
    status_code = 500
    code = "calendar_sync_failed"
