# services/normalization/specs.py
"""
Maps the provider's trim payload onto NormalizedSpecs.

SPEC_FIELDS is an ordered fallback table: for each canonical field the candidate
payload paths are tried most-specific first, and the first candidate that parses
to a non-null value wins. Adding a provider field means adding a path here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from domain.car_context import Dimensions, FuelEconomy, NormalizedSpecs, Performance
from .scalars import (
    normalize_fuel_type,
    parse_drivetrain,
    parse_leading_integer,
    parse_leading_number,
    parse_volume_litres,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldRule:
    group: Optional[str]          # None = top-level field (drivetrain)
    field: str
    paths: Tuple[str, ...]
    parser: Callable[[Any], Any]
    default: Any = None


SPEC_FIELDS: Tuple[FieldRule, ...] = (
    # ---- performance ----
    FieldRule("performance", "hp", ("engineHp", "horsepower", "hp"), parse_leading_integer),
    FieldRule("performance", "torque_nm", ("maximumTorqueNM", "torqueNm", "torque_nm", "torque"), parse_leading_integer),
    FieldRule("performance", "zero_to_sixty", ("acceleration0To100KmPerHS", "acceleration0To62MphS",
                                               "zeroToSixty", "zero_to_sixty", "acceleration"), parse_leading_number),
    FieldRule("performance", "top_speed", ("maxSpeedKmPerH", "topSpeedKmh", "top_speed", "maxSpeed"), parse_leading_integer),
    FieldRule("performance", "engine_cylinders", ("numberOfCylinders", "cylinders"), parse_leading_integer),
    FieldRule("performance", "displacement_cc", ("capacityCm3", "engineCapacityCm3", "displacement"), parse_leading_integer),
    FieldRule("performance", "gears", ("numberOfGears", "gears"), parse_leading_integer),

    # ---- drivetrain (closed enum, FWD when nothing usable) ----
    FieldRule(None, "drivetrain", ("driveWheels", "drive", "drivetrain", "driveType"), parse_drivetrain,
              default="FWD"),

    # ---- fuel economy ----
    FieldRule("fuel_economy", "fuel_type", ("fuelType", "engineType", "fuelGrade", "fuel_type"),
              normalize_fuel_type),
    FieldRule("fuel_economy", "fuel_combined_l_100km", ("mixedFuelConsumptionPer100KmL", "combinedFuelConsumptionL100Km",
                                                        "fuelConsumptionCombinedL100Km", "fuel_combined_l_100km",
                                                        "fuelConsumption.combined"), parse_leading_number),
    FieldRule("fuel_economy", "tank_capacity_l", ("fuelTankCapacityL", "tankCapacityL", "fuel_tank"), parse_leading_number),
    FieldRule("fuel_economy", "range_km", ("electricRangeKm", "allElectricRangeKm", "rangeKm", "range"), parse_leading_integer),
    FieldRule("fuel_economy", "co2_g_km", ("co2EmissionsGPerKm", "co2Emissions", "co2"), parse_leading_integer),
    # "Euro 6d-ISC-FCM" -> 6
    FieldRule("fuel_economy", "euro_standard", ("emissionStandards", "emissionStandard", "euroStandard"), parse_leading_integer),

    # ---- dimensions ----
    FieldRule("dimensions", "length_mm", ("lengthMm", "length"), parse_leading_integer),
    FieldRule("dimensions", "width_mm", ("widthMm", "width"), parse_leading_integer),
    FieldRule("dimensions", "height_mm", ("heightMm", "height"), parse_leading_integer),
    FieldRule("dimensions", "wheelbase_mm", ("wheelbaseMm", "wheelbase"), parse_leading_integer),
    FieldRule("dimensions", "ground_clearance_mm", ("groundClearanceMm", "groundClearance"), parse_leading_integer),
    FieldRule("dimensions", "weight_kg", ("curbWeightKg", "weightKg", "weight"), parse_leading_integer),
    FieldRule("dimensions", "trunk_capacity_l", ("trunkCapacityL", "minTrunkCapacityL", "luggageCapacityL",
                                                 "cargoVolumeM3", "trunk"), parse_volume_litres),
    FieldRule("dimensions", "seats", ("numberOfSeats", "seats"), parse_leading_integer),
    FieldRule("dimensions", "doors", ("numberOfDoors", "doors"), parse_leading_integer),
)

_GROUPS = {
    "performance": Performance,
    "fuel_economy": FuelEconomy,
    "dimensions": Dimensions,
}


def dig(payload: Any, path: str) -> Any:
    """Walks a dotted path through nested dicts; None on any miss."""
    cur = payload
    for part in path.split("."):
        if not isinstance(cur, dict):
            return None
        cur = cur.get(part)
    return cur


def _is_blank(v: Any) -> bool:
    return v is None or (isinstance(v, str) and not v.strip())


def resolve_field(payload: Any, rule: FieldRule) -> Any:
    for path in rule.paths:
        raw = dig(payload, path)
        if _is_blank(raw):
            continue
        parsed = rule.parser(raw)
        if parsed is not None:
            return parsed
    logger.debug("spec field %s unresolved, using %r", rule.field, rule.default)
    return rule.default


def normalize_specs(payload: Any) -> NormalizedSpecs:
    values: Dict[str, Dict[str, Any]] = {g: {} for g in _GROUPS}
    top: Dict[str, Any] = {}

    for rule in SPEC_FIELDS:
        v = resolve_field(payload, rule)
        if rule.group is None:
            top[rule.field] = v
        else:
            values[rule.group][rule.field] = v

    groups = {name: cls(**values[name]) for name, cls in _GROUPS.items()}
    return NormalizedSpecs(drivetrain=top.get("drivetrain") or "FWD", **groups)
