from domain.dealer_input import DealerInput, VehicleHint
from services.normalization.identity import BASE_TRIM, resolve_identity


def _input(**hint):
    return DealerInput(identity=VehicleHint(**hint), rapid_api_trim_id=151690, vin="UNKNOWN_VIN")


def test_dealer_wins_make_model_year_payload_wins_trim():
    payload = {"make": "DACIA", "model": "Duster II", "yearFrom": "2021", "trim": "1.5 Blue dCi (115 Hp) 4WD"}
    ident = resolve_identity(_input(make="Dacia", model="Duster", year=2022, trim="Essential"), payload)

    assert (ident.make, ident.model, ident.year) == ("Dacia", "Duster", 2022)
    assert ident.trim == "1.5 Blue dCi (115 Hp) 4WD"
    assert ident.vin == "UNKNOWN_VIN"


def test_payload_fills_missing_dealer_fields():
    payload = {"make": "Toyota", "model": "Prius Prime", "yearFrom": "2020 year", "bodyType": "Hatchback"}
    ident = resolve_identity(_input(), payload)
    assert (ident.make, ident.model, ident.year) == ("Toyota", "Prius Prime", 2020)
    assert ident.body_type == "Hatchback"


def test_trim_falls_back_to_dealer_hint_then_base_trim():
    assert resolve_identity(_input(make="Dacia", trim="Essential"), {"trim": "  "}).trim == "Essential"
    assert resolve_identity(_input(make="Dacia"), {}).trim == BASE_TRIM
    assert resolve_identity(_input(make="Dacia"), None).trim == BASE_TRIM


def test_never_blank_make_model():
    ident = resolve_identity(_input(), ["not", "a", "dict"])
    assert ident.make and ident.model and ident.trim
    assert ident.year is None
