"""Pure conversions between draft values and storage values.

Currency crosses the boundary here and nowhere else: drafts carry major units
(``12.35``), storage carries integer minor units (``1235``).
"""

from __future__ import annotations

import math
from dataclasses import replace
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import TYPE_CHECKING, Final

from profilesync.domain.errors import ValidationFault
from profilesync.domain.model import (
    SCALAR_FIELDS,
    Goal,
    GoalRecord,
    Platform,
    ProfileDraft,
    SocialLink,
    SocialLinkRecord,
    Theme,
    WalletDetails,
    WalletMethod,
    WalletMethodRecord,
    WalletMethodType,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from enum import StrEnum

    from profilesync.domain.model import ProfileRecord

MINOR_UNITS_PER_MAJOR: Final[int] = 100
_CURRENCY_SYMBOLS: Final[dict[str, str]] = {"USD": "$", "AUD": "A$", "EUR": "€", "GBP": "£"}
_BOOLEAN_FIELDS: Final[frozenset[str]] = frozenset(
    {"show_social_links", "show_payment_methods", "show_goals", "show_about"}
)

type Amount = float | int | Decimal | str | None


# Currency ---------------------------------------------------------------------


def to_minor_units(value: Amount, *, field: str = "amount") -> int:
    """Convert a major-unit amount to minor units, rounding half-up.

    Floats are read through their shortest repr so ``12.345`` rounds to ``1235``
    the way the user typed it, not the way binary floating point stores it.
    """

    if value is None:
        raise ValidationFault(field, value, "amount is required")
    if isinstance(value, bool):
        raise ValidationFault(field, value, "amount must be numeric")

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise ValidationFault(field, value, "amount must be finite")
        amount = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            amount = Decimal(value.strip())
        except InvalidOperation as exc:
            raise ValidationFault(field, value, "amount must be numeric") from exc
    else:
        raise ValidationFault(field, value, "amount must be numeric")

    if not amount.is_finite():
        raise ValidationFault(field, value, "amount must be finite")
    if amount < 0:
        raise ValidationFault(field, value, "amount must not be negative")

    minor = (amount * MINOR_UNITS_PER_MAJOR).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return int(minor)


def to_major_units(minor: int | float | None) -> float:
    """Convert stored minor units for display; missing or NaN values read as 0."""

    if minor is None or (isinstance(minor, float) and math.isnan(minor)):
        return 0.0
    return minor / MINOR_UNITS_PER_MAJOR


def _display_number(value: float | None) -> float:
    if value is None or not math.isfinite(value):
        return 0.0
    return value


def progress_percentage(current: float | None, target: float | None) -> float:
    safe_current = _display_number(current)
    safe_target = _display_number(target)
    if safe_target <= 0:
        safe_target = 1.0
    return min(safe_current / safe_target * 100, 100.0)


def format_currency(amount: float | None, currency: str = "USD") -> str:
    symbol = _CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    return f"{symbol}{_display_number(amount):,.0f}"


# Timestamps -------------------------------------------------------------------


def utcnow() -> datetime:
    return datetime.now(UTC)


def stamp[TRecord: (WalletMethodRecord, SocialLinkRecord, GoalRecord)](
    record: TRecord,
    now: datetime,
    *,
    created_at: datetime | None = None,
) -> TRecord:
    """Refresh ``updated_at``; keep an existing ``created_at`` or start one now."""

    return replace(record, created_at=created_at or now, updated_at=now)


# Enum coercion ----------------------------------------------------------------


def coerce_enum[TEnum: StrEnum](enum_type: type[TEnum], value: object, *, field: str) -> TEnum:
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        try:
            return enum_type(value.strip().lower())
        except ValueError:
            pass
    raise ValidationFault(field, value, f"expected one of {[item.value for item in enum_type]}")


# Wallet methods ---------------------------------------------------------------


def wallet_method_to_record(
    method: WalletMethod, *, index: int, now: datetime
) -> WalletMethodRecord:
    record = WalletMethodRecord(
        type=coerce_enum(WalletMethodType, method.type, field=f"wallet_methods[{index}].type"),
        platform=method.platform or "custom",
        name=method.name or "",
        handle=method.handle or None,
        url=method.url or None,
        details=method.details.to_dict(),
        enabled=method.enabled,
        order_index=index,
    )
    return stamp(record, now)


def wallet_method_from_record(record: WalletMethodRecord) -> WalletMethod:
    return WalletMethod(
        id=record.id,
        type=record.type,
        platform=record.platform,
        name=record.name,
        handle=record.handle,
        url=record.url,
        details=WalletDetails.from_mapping(record.details),
        enabled=record.enabled,
        order_index=record.order_index,
    )


# Social links -----------------------------------------------------------------


def social_link_to_record(
    link: SocialLink,
    *,
    platform: Platform,
    index: int,
    now: datetime,
    existing: SocialLinkRecord | None = None,
) -> SocialLinkRecord:
    record = SocialLinkRecord(
        id=existing.id if existing is not None else None,
        platform=platform,
        label=link.username or link.platform or "",
        url=link.url or "",
        photo_url=link.photo_url or None,
        photo_caption=link.photo_caption or None,
        wallet_method_id=link.wallet_method_id,
        display_order=index,
    )
    return stamp(record, now, created_at=existing.created_at if existing is not None else None)


def social_link_from_record(record: SocialLinkRecord) -> SocialLink:
    return SocialLink(
        id=record.id,
        platform=record.platform.value,
        normalized_platform=record.platform,
        username=record.label,
        url=record.url,
        photo_url=record.photo_url,
        photo_caption=record.photo_caption,
        wallet_method_id=record.wallet_method_id,
    )


# Goals ------------------------------------------------------------------------


def goal_to_record(goal: Goal, *, index: int, now: datetime) -> GoalRecord:
    record = GoalRecord(
        title=goal.title or "",
        description=goal.description or "",
        target_amount=to_minor_units(goal.target, field=f"goals[{index}].target"),
        current_amount=to_minor_units(goal.current, field=f"goals[{index}].current"),
        wallet_method_id=goal.wallet_method_id,
        is_active=goal.active,
        order_index=index,
    )
    return stamp(record, now)


def goal_from_record(record: GoalRecord) -> Goal:
    return Goal(
        id=record.id,
        title=record.title,
        description=record.description,
        target=to_major_units(record.target_amount),
        current=to_major_units(record.current_amount),
        wallet_method_id=record.wallet_method_id,
        active=record.is_active,
    )


# Profile ----------------------------------------------------------------------


def scalar_fields_to_storage(fields: Mapping[str, object]) -> dict[str, object]:
    """Validate edited scalar fields and convert them to storage values."""

    converted: dict[str, object] = {}
    for name, value in fields.items():
        if name not in SCALAR_FIELDS:
            raise ValidationFault(name, value, "not an editable profile field")
        if name == "theme":
            converted[name] = coerce_enum(Theme, value, field=name)
        elif name in _BOOLEAN_FIELDS:
            if not isinstance(value, bool):
                raise ValidationFault(name, value, "expected a boolean")
            converted[name] = value
        elif value is None or isinstance(value, str):
            converted[name] = value
        else:
            raise ValidationFault(name, value, "expected text")
    return converted


def draft_from_records(
    profile: ProfileRecord,
    *,
    wallet_methods: Sequence[WalletMethodRecord],
    social_links: Sequence[SocialLinkRecord],
    goals: Sequence[GoalRecord],
) -> ProfileDraft:
    return ProfileDraft(
        owner_id=profile.owner_id,
        username=profile.username,
        display_name=profile.display_name,
        bio=profile.bio,
        avatar_url=profile.avatar_url,
        banner_url=profile.banner_url,
        location=profile.location,
        theme=profile.theme,
        show_social_links=profile.show_social_links,
        show_payment_methods=profile.show_payment_methods,
        show_goals=profile.show_goals,
        show_about=profile.show_about,
        created_at=profile.created_at,
        updated_at=profile.updated_at,
        wallet_methods=[wallet_method_from_record(record) for record in wallet_methods],
        social_links=[social_link_from_record(record) for record in social_links],
        goals=[goal_from_record(record) for record in goals],
    )
