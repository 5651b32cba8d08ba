# services/normalization/scalars.py
"""
Best-effort parsing of noisy provider values.

Provider text fields mix units, ranges and rpm qualifiers ("115 Hp @ 3750 rpm",
"260 Nm @ 1750-2750 rpm"). The policy is "first number wins": lossy, and none of
these functions ever raise.
"""

from __future__ import annotations

import math
import re
from typing import Any, Literal, Optional

Drivetrain = Literal["FWD", "RWD", "AWD"]
FuelType = Literal["EV", "HYBRID", "HYDROGEN", "DIESEL", "GAS"]

DRIVETRAINS = ("FWD", "RWD", "AWD")
FUEL_TYPES = ("EV", "HYBRID", "HYDROGEN", "DIESEL", "GAS")

# ערכים שמסמנים "אין נתון"
_ABSENT = {"", "n/a", "na", "null", "none", "-"}

# first digit run, thousands commas allowed, optional decimal part
_NUMBER_RE = re.compile(r"\d[\d,]*(?:\.\d+)?")


def parse_leading_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    if not isinstance(value, str):
        return None

    s = value.strip()
    if s.lower() in _ABSENT:
        return None

    m = _NUMBER_RE.search(s)
    if not m:
        return None
    digits = m.group(0).replace(",", "")
    try:
        num = float(digits)
    except ValueError:
        return None
    return num if math.isfinite(num) else None


def parse_leading_integer(value: Any) -> Optional[int]:
    num = parse_leading_number(value)
    if num is None:
        return None
    # half-up, so 2.5 -> 3 (round() would give 2)
    return int(math.floor(num + 0.5))


# "1444 l" or "0.445" (m3): anything under 10 without a litre unit is cubic metres
_LITRE_UNIT_RE = re.compile(r"\d\s*(?:l|litres?|liters?)\b", re.IGNORECASE)


def parse_volume_litres(value: Any) -> Optional[int]:
    num = parse_leading_number(value)
    if num is None:
        return None
    if num < 10 and not (isinstance(value, str) and _LITRE_UNIT_RE.search(value)):
        num *= 1000
    return int(math.floor(num + 0.5))


def parse_drivetrain(label: Any) -> Optional[Drivetrain]:
    """Like normalize_drivetrain, but None when the text names no drivetrain."""
    if label is None or isinstance(label, bool):
        return None
    d = str(label).strip().lower()
    if d in _ABSENT:
        return None
    if "all" in d or "4x4" in d or "awd" in d:
        return "AWD"
    if "rear" in d:
        return "RWD"
    if "front" in d or "fwd" in d:
        return "FWD"
    return None


def normalize_drivetrain(label: Any) -> Drivetrain:
    return parse_drivetrain(label) or "FWD"


_FOSSIL = ("PETROL", "GASOLINE", "DIESEL", "BENZIN")
_PETROL = ("PETROL", "GASOLINE", "GAS", "BENZIN", "UNLEADED", "LPG", "CNG")


def normalize_fuel_type(label: Any) -> Optional[FuelType]:
    """
    "Diesel Commonrail" -> DIESEL, "Plug-in Hybrid" -> HYBRID, "Petrol / electricity" -> HYBRID,
    "Petrol (Gasoline)" -> GAS. Absent input and text naming no fuel ("Unknown") stay None.
    """
    if label is None or isinstance(label, bool):
        return None
    s = str(label).strip().upper()
    if s.lower() in _ABSENT:
        return None
    electric = "ELECTRIC" in s or "BEV" in s
    if "HYBRID" in s or "PHEV" in s or (electric and any(k in s for k in _FOSSIL)):
        return "HYBRID"
    if electric:
        return "EV"
    if "HYDROGEN" in s or "FCEV" in s:
        return "HYDROGEN"
    if "DIESEL" in s:
        return "DIESEL"
    if any(k in s for k in _PETROL):
        return "GAS"
    return None
