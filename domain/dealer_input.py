from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from services.errors import InvalidInputError
from services.normalization.scalars import parse_leading_number


@dataclass(frozen=True)
class VehicleHint:
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    trim: Optional[str] = None  # רמז בלבד; ה-trim מה-API קודם


@dataclass(frozen=True)
class DealerInput:
    identity: VehicleHint
    rapid_api_trim_id: int
    vin: Optional[str] = None
    color: Optional[str] = None      # passthrough for the prompt builder
    mileage: Optional[float] = None  # km
    template: Optional[str] = None   # passthrough
    notes: Optional[str] = None      # free-text dealer remarks ("1 owner, clean title")
    certified_pre_owned: bool = False

    def problems(self) -> List[str]:
        out: List[str] = []
        if not isinstance(self.identity, VehicleHint):
            out.append("identity is required")
        tid = self.rapid_api_trim_id
        if isinstance(tid, bool) or not isinstance(tid, int) or tid <= 0:
            out.append("rapid_api_trim_id must be a positive integer")
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DealerInput":
        """
        Builds a DealerInput from untyped request JSON.
        Raises InvalidInputError listing every shape problem found.
        """
        if not isinstance(data, Mapping):
            raise InvalidInputError("Invalid dealer input", errors=["dealer input must be an object"])

        problems: List[str] = []

        ident = data.get("identity")
        if not isinstance(ident, Mapping):
            problems.append("identity is required")
            hint = None
        else:
            year = _to_int(ident.get("year"))
            if year is None and _text(ident.get("year")) is not None:
                problems.append("identity.year must be an integer")
            hint = VehicleHint(
                make=_text(ident.get("make")),
                model=_text(ident.get("model")),
                year=year,
                trim=_text(ident.get("trim")),
            )

        trim_id = _to_int(data.get("rapid_api_trim_id"))
        if trim_id is None or trim_id <= 0:
            problems.append("rapid_api_trim_id must be a positive integer")

        if problems:
            raise InvalidInputError("Invalid dealer input", errors=problems)

        return cls(
            identity=hint,
            rapid_api_trim_id=trim_id,
            vin=_text(data.get("vin")),
            color=_text(data.get("color")),
            mileage=parse_leading_number(data.get("mileage")),
            template=_text(data.get("template")),
            notes=_text(data.get("notes")),
            certified_pre_owned=_flag(data.get("certified_pre_owned")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vin": self.vin,
            "identity": {
                "make": self.identity.make,
                "model": self.identity.model,
                "year": self.identity.year,
                "trim": self.identity.trim,
            },
            "color": self.color,
            "mileage": self.mileage,
            "rapid_api_trim_id": self.rapid_api_trim_id,
            "template": self.template,
            "notes": self.notes,
            "certified_pre_owned": self.certified_pre_owned,
        }


# ---------- helpers ----------

def _text(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v).strip()
    return s or None


def _to_int(v: Any) -> Optional[int]:
    if v is None or isinstance(v, bool):
        return None
    # 151690.9 is not an id; inf/nan are not numbers at all
    if isinstance(v, float) and not (math.isfinite(v) and v.is_integer()):
        return None
    try:
        return int(v)
    except (TypeError, ValueError, OverflowError):
        return None


def _flag(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    s = str(v or "").strip().lower()
    return s in {"1", "true", "yes", "y"}
