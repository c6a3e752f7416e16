"""
Nightly rate resolution.

Priority for a (villa, date):
1. a SPECIAL_OFFER calendar day carrying an override price
2. the active seasonal price whose [start_date, end_date] contains the date
3. nothing: "no price", which callers must treat as "cannot quote", never as free
"""
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional
from sqlalchemy.orm import Session
import logging

from villa_admin import crud
from villa_admin.core.config import settings
from villa_admin.core.exceptions import IncompleteQuoteError, NotFoundError
from villa_admin.models.calendar import CalendarDay
from villa_admin.models.seasonal_price import SeasonalPrice
from villa_admin.schemas.pricing import NightPrice, PriceSource, Quote
from villa_admin.services.availability_ledger import iter_nights, validate_stay_range

logger = logging.getLogger(__name__)


def _changed_at(rule: SeasonalPrice) -> float:
    stamp = rule.updated_at or rule.created_at
    return stamp.timestamp() if isinstance(stamp, datetime) else 0.0


def pick_seasonal_rule(rules: Iterable[SeasonalPrice], day: date) -> Optional[SeasonalPrice]:
    """
    Active rule covering ``day``.

    Overlapping active rules are rejected on write, but older data may still
    hold them. Ties go to the narrowest range, then the most recently
    updated rule, then the highest id.
    """
    matching = [r for r in rules if r.is_active and r.start_date <= day <= r.end_date]
    if not matching:
        return None
    if len(matching) > 1:
        logger.warning(
            f"Ambiguous seasonal prices for villa {matching[0].villa_id} on {day}: "
            f"{[r.season_name for r in matching]}"
        )
    return min(matching, key=lambda r: ((r.end_date - r.start_date).days, -_changed_at(r), -r.id))


def resolve_night(
    day: date,
    offers: Dict[date, CalendarDay],
    rules: List[SeasonalPrice],
) -> NightPrice:
    offer = offers.get(day)
    if offer is not None and offer.price is not None:
        return NightPrice(date=day, price=offer.price, source=PriceSource.SPECIAL_OFFER)
    rule = pick_seasonal_rule(rules, day)
    if rule is not None:
        return NightPrice(date=day, price=rule.nightly_price, source=PriceSource.SEASONAL)
    return NightPrice(date=day, price=None, source=PriceSource.NONE)


def _load_pricing(db: Session, villa_id: int, start_date: date, end_date: date):
    """Overrides and active rules touching [start_date, end_date], loaded once."""
    offers = crud.calendar_day.get_special_offers(db, villa_id=villa_id, start_date=start_date, end_date=end_date)
    rules = crud.seasonal_price.get_active_in_range(db, villa_id=villa_id, start_date=start_date, end_date=end_date)
    return offers, rules


def resolve_with_source(db: Session, villa_id: int, day: date) -> NightPrice:
    offers, rules = _load_pricing(db, villa_id, day, day)
    return resolve_night(day, offers, rules)


def resolve(db: Session, villa_id: int, day: date) -> Optional[Decimal]:
    """Nightly price for the date, or None when nothing prices it."""
    return resolve_with_source(db, villa_id, day).price


def quote(db: Session, villa_id: int, start_date: date, end_date: date) -> Quote:
    """Per-night breakdown of the stay [start_date, end_date)."""
    validate_stay_range(start_date, end_date)
    if not crud.villa.get(db, villa_id):
        raise NotFoundError("Villa", villa_id)

    offers, rules = _load_pricing(db, villa_id, start_date, end_date - timedelta(days=1))
    breakdown = [resolve_night(day, offers, rules) for day in iter_nights(start_date, end_date)]
    missing = [night.date for night in breakdown if night.price is None]
    total = None
    if not missing:
        total = sum((night.price for night in breakdown), Decimal("0"))

    return Quote(
        villa_id=villa_id,
        start_date=start_date,
        end_date=end_date,
        nights=len(breakdown),
        currency=settings.CURRENCY,
        breakdown=breakdown,
        missing_dates=missing,
        total=total,
        complete=not missing,
    )


def total_for_range(db: Session, villa_id: int, start_date: date, end_date: date) -> Decimal:
    """Sum of the nightly prices; raises IncompleteQuoteError if any night has no price."""
    result = quote(db, villa_id, start_date, end_date)
    if not result.complete:
        raise IncompleteQuoteError(villa_id, result.missing_dates)
    return result.total
