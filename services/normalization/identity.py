# services/normalization/identity.py
from __future__ import annotations

from typing import Any, Optional, Sequence

from domain.car_context import Identity
from domain.dealer_input import DealerInput
from .scalars import parse_leading_integer
from .specs import dig

BASE_TRIM = "Base Trim"
UNKNOWN = "Unknown"

TRIM_PATHS = ("trim", "trimName", "name")
YEAR_PATHS = ("year", "yearFrom", "startOfProduction")


def _first_text(payload: Any, paths: Sequence[str]) -> Optional[str]:
    for p in paths:
        v = dig(payload, p)
        if isinstance(v, str) and v.strip():
            return v.strip()
    return None


def _first_year(payload: Any) -> Optional[int]:
    for p in YEAR_PATHS:
        y = parse_leading_integer(dig(payload, p))
        if y is not None and y > 1885:
            return y
    return None


def resolve_identity(dealer_input: DealerInput, payload: Any) -> Identity:
    """
    Dealer is authoritative on make/model/year (what was actually sold);
    the provider is authoritative on trim. Never leaves trim blank.
    """
    hint = dealer_input.identity

    make = hint.make or _first_text(payload, ("make", "brand")) or UNKNOWN
    model = hint.model or _first_text(payload, ("model",)) or UNKNOWN
    year = hint.year if hint.year is not None else _first_year(payload)
    trim = _first_text(payload, TRIM_PATHS) or hint.trim or BASE_TRIM

    return Identity(
        make=make,
        model=model,
        year=year,
        trim=trim,
        vin=dealer_input.vin,
        body_type=_first_text(payload, ("bodyType", "body_type")),
        generation=_first_text(payload, ("generation",)),
        series=_first_text(payload, ("series",)),
    )
