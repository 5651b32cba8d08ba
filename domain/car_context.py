from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional, Tuple

from domain.dealer_input import DealerInput


@dataclass(frozen=True)
class Identity:
    make: str
    model: str
    year: Optional[int]
    trim: str
    vin: Optional[str] = None
    body_type: Optional[str] = None
    generation: Optional[str] = None
    series: Optional[str] = None


# ---------------- Normalized specs ----------------
# כל עלה: מספר סופי, ערך מתוך enum, או None

@dataclass(frozen=True)
class Performance:
    hp: Optional[int] = None
    torque_nm: Optional[int] = None
    zero_to_sixty: Optional[float] = None   # seconds (provider 0-100 km/h figure)
    top_speed: Optional[int] = None         # km/h
    engine_cylinders: Optional[int] = None
    displacement_cc: Optional[int] = None
    gears: Optional[int] = None


@dataclass(frozen=True)
class FuelEconomy:
    fuel_type: Optional[str] = None         # EV / HYBRID / HYDROGEN / DIESEL / GAS
    fuel_combined_l_100km: Optional[float] = None
    tank_capacity_l: Optional[float] = None
    range_km: Optional[int] = None
    co2_g_km: Optional[int] = None
    euro_standard: Optional[int] = None     # 6 for "Euro 6d-ISC-FCM"


@dataclass(frozen=True)
class Dimensions:
    length_mm: Optional[int] = None
    width_mm: Optional[int] = None
    height_mm: Optional[int] = None
    wheelbase_mm: Optional[int] = None
    ground_clearance_mm: Optional[int] = None
    weight_kg: Optional[int] = None
    trunk_capacity_l: Optional[int] = None
    seats: Optional[int] = None
    doors: Optional[int] = None


@dataclass(frozen=True)
class NormalizedSpecs:
    performance: Performance = field(default_factory=Performance)
    drivetrain: str = "FWD"                 # FWD / RWD / AWD
    fuel_economy: FuelEconomy = field(default_factory=FuelEconomy)
    dimensions: Dimensions = field(default_factory=Dimensions)


# ---------------- Badges & context ----------------

@dataclass(frozen=True)
class CertificationBadge:
    id: str
    label: str
    retrieval_method: str   # which strategy produced it (debugging only, not ranking)
    category: Optional[str] = None


@dataclass(frozen=True)
class CarContext:
    identity: Identity
    normalized_specs: NormalizedSpecs
    certifications: Tuple[CertificationBadge, ...]
    dealer_input: DealerInput

    def to_dict(self) -> Dict[str, Any]:
        return {
            "identity": asdict(self.identity),
            "normalized_specs": asdict(self.normalized_specs),
            "certifications": [asdict(b) for b in self.certifications],
            "dealer_input": self.dealer_input.to_dict(),
        }
