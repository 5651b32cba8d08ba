import math

import pytest

from services.normalization.scalars import (
    normalize_drivetrain,
    normalize_fuel_type,
    parse_drivetrain,
    parse_leading_integer,
    parse_leading_number,
    parse_volume_litres,
)


@pytest.mark.parametrize("raw, expected", [
    ("115 Hp @ 3750 rpm", 115),
    ("260 Nm @ 1750-2750 rpm", 260),
    ("1,200", 1200),
    ("10.2 sec", 10.2),
    ("Euro 6d-ISC-FCM", 6),
    ("approx. 4341 mm", 4341),
])
def test_parse_leading_number_takes_first_number(raw, expected):
    assert parse_leading_number(raw) == expected


def test_parse_leading_number_keeps_numbers():
    assert parse_leading_number(42) == 42
    assert parse_leading_number(5.8) == 5.8


@pytest.mark.parametrize("raw", [None, "", "   ", "N/A", "null", "n/a", "no digits here", ",", [], {}, True])
def test_parse_leading_number_is_total(raw):
    assert parse_leading_number(raw) is None


def test_parse_leading_number_drops_non_finite():
    assert parse_leading_number(float("nan")) is None
    assert parse_leading_number(float("inf")) is None


def test_parse_leading_integer_rounds():
    assert parse_leading_integer("5.8 seconds") == 6
    assert parse_leading_integer("2.5") == 3
    assert parse_leading_integer("175 km/h") == 175
    assert isinstance(parse_leading_integer(114.6), int)
    assert parse_leading_integer("N/A") is None
    assert parse_leading_integer(None) is None


@pytest.mark.parametrize("label, expected", [
    ("All Wheel Drive", "AWD"),
    ("All wheel drive (4x4)", "AWD"),
    ("4x4", "AWD"),
    ("awd", "AWD"),
    ("Rear-wheel", "RWD"),
    ("REAR WHEEL DRIVE", "RWD"),
    ("Front", "FWD"),
    ("Front-wheel drive", "FWD"),
    ("", "FWD"),
    (None, "FWD"),
    ("something odd", "FWD"),
])
def test_normalize_drivetrain(label, expected):
    assert normalize_drivetrain(label) == expected


@pytest.mark.parametrize("label, expected", [
    ("Diesel", "DIESEL"),
    ("Diesel Commonrail", "DIESEL"),
    ("Plug-in Hybrid", "HYBRID"),
    ("Hybrid Electric", "HYBRID"),
    ("Electric", "EV"),
    ("Hydrogen", "HYDROGEN"),
    ("Petrol (Gasoline)", "GAS"),
    ("Petrol / electricity", "HYBRID"),
    ("Electricity", "EV"),
    ("Unknown", None),
    ("see brochure", None),
    ("", None),
    (None, None),
    ("N/A", None),
])
def test_normalize_fuel_type(label, expected):
    assert normalize_fuel_type(label) == expected


def test_results_are_finite():
    for raw in ("1e400", "9" * 400):
        v = parse_leading_number(raw)
        assert v is None or math.isfinite(v)


@pytest.mark.parametrize("label, expected", [
    ("All Wheel Drive", "AWD"),
    ("Rear wheel drive", "RWD"),
    ("Front wheel drive", "FWD"),
    ("N/A", None),
    ("", None),
    ("4WD", None),
    ("unknown", None),
    (None, None),
])
def test_parse_drivetrain_misses_are_none(label, expected):
    assert parse_drivetrain(label) == expected


@pytest.mark.parametrize("raw, expected", [
    ("1444 l", 1444),
    ("445 litres", 445),
    ("0.445", 445),
    (0.445, 445),
    ("1.5 m3", 1500),
    ("N/A", None),
])
def test_parse_volume_litres(raw, expected):
    assert parse_volume_litres(raw) == expected
