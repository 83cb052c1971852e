from datetime import datetime, timedelta
from typing import Optional
from pydantic import BaseModel
from manzana.models.promotion import PromotionType
from manzana.services.pricing import as_utc, to_decimal, resolve_now, enum_value


SECONDS_PER_DAY = 24 * 60 * 60
SECONDS_PER_HOUR = 60 * 60


class TimeRemaining(BaseModel):
    is_expired: bool
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    total_seconds: int = 0
    formatted: str


def time_remaining(end_date, now: Optional[datetime] = None) -> TimeRemaining:
    """Countdown to end_date, formatted with the two largest units"""
    diff: timedelta = as_utc(end_date) - resolve_now(now)

    if diff.total_seconds() <= 0:
        return TimeRemaining(is_expired=True, formatted="Expired")

    total_seconds = int(diff.total_seconds())
    days = total_seconds // SECONDS_PER_DAY
    hours = (total_seconds % SECONDS_PER_DAY) // SECONDS_PER_HOUR
    minutes = (total_seconds % SECONDS_PER_HOUR) // 60
    seconds = total_seconds % 60

    if days > 0:
        formatted = f"{days}d {hours}h"
    elif hours > 0:
        formatted = f"{hours}h {minutes}m"
    elif minutes > 0:
        formatted = f"{minutes}m {seconds}s"
    else:
        formatted = f"{seconds}s"

    return TimeRemaining(
        is_expired=False,
        days=days,
        hours=hours,
        minutes=minutes,
        seconds=seconds,
        total_seconds=total_seconds,
        formatted=formatted,
    )


def format_value(value) -> str:
    """15.00 -> '15', 12.50 -> '12.5'"""
    value = to_decimal(value if value is not None else 0)
    if value == value.to_integral_value():
        return str(int(value))
    return str(value.normalize())


def badge_text(promotion, currency_symbol: str) -> str:
    promotion_type = enum_value(promotion.promotion_type)

    if promotion_type == PromotionType.PERCENTAGE.value:
        return f"-{format_value(promotion.discount_value)}%"
    if promotion_type == PromotionType.FIXED_AMOUNT.value:
        return f"-{currency_symbol}{format_value(promotion.discount_value)}"
    if promotion_type == PromotionType.BUY_X_GET_Y.value:
        return f"{promotion.buy_quantity}+{promotion.get_quantity}"
    return "PROMO"


def is_ending_soon(end_date, now: Optional[datetime] = None) -> bool:
    """Less than a day left"""
    remaining = time_remaining(end_date, now)
    return 0 < remaining.total_seconds <= SECONDS_PER_DAY


def is_new(start_date, now: Optional[datetime] = None) -> bool:
    """Started within the last day"""
    elapsed = (resolve_now(now) - as_utc(start_date)).total_seconds()
    return 0 <= elapsed <= SECONDS_PER_DAY
