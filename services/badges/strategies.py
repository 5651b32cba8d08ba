# services/badges/strategies.py
"""
Independent badge detectors. Each one looks at the raw payload, the normalized
specs and the dealer input, and tags what it finds with its own retrieval method.
"""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, List, Optional

from domain.car_context import CertificationBadge, Identity, NormalizedSpecs
from domain.dealer_input import DealerInput
from services.normalization.identity import resolve_identity
from services.normalization.scalars import parse_leading_integer
from services.normalization.specs import dig
from .registry import lookup, make_badge, slugify

EXPLICIT = "explicit"
DERIVED = "derived_from_specs"
DEALER = "dealer_supplied"


class BadgeStrategy(ABC):
    name: str = ""

    @abstractmethod
    def detect(self, payload: Any, specs: NormalizedSpecs, dealer_input: DealerInput) -> List[CertificationBadge]:
        ...


# ---------------- 1) Explicit: listed by the provider ----------------

class ExplicitBadges(BadgeStrategy):
    name = EXPLICIT

    LIST_FIELDS = ("certifications", "badges", "awards")
    RATING_FIELDS = ("safetyRating", "ncapRating", "euroNcapStars")

    def detect(self, payload, specs, dealer_input):
        out: List[CertificationBadge] = []
        for f in self.LIST_FIELDS:
            items = dig(payload, f)
            if isinstance(items, (str, dict)):
                items = [items]
            if not isinstance(items, list):
                continue
            for it in items:
                badge = self._to_badge(it)
                if badge is not None:
                    out.append(badge)

        for f in self.RATING_FIELDS:
            stars = parse_leading_integer(dig(payload, f))
            if stars is not None:
                if stars == 5:
                    out.append(make_badge("safety_ncap_5", self.name))
                break
        return out

    def _to_badge(self, item: Any) -> Optional[CertificationBadge]:
        if isinstance(item, dict):
            token = item.get("id") or item.get("badge_id")
            label = item.get("label") or item.get("name") or item.get("title")
            category = item.get("category") if isinstance(item.get("category"), str) else None
        elif isinstance(item, str):
            token, label, category = None, item, None
        else:
            return None

        known = lookup(token) or lookup(label)
        if known is not None:
            return make_badge(known.id, self.name)

        # badge the registry doesn't know: keep it under a slug id
        bid = slugify(token or label)
        if not bid:
            return None
        return CertificationBadge(id=bid, label=str(label or token).strip(),
                                  retrieval_method=self.name, category=category)


# ---------------- keyword scanning ----------------

def keywords(*words: str) -> re.Pattern:
    """Whole-word, case-insensitive match: "1 OWNER" hits "1 owner" but not "21 owners"."""
    alt = "|".join(re.escape(w) for w in words)
    return re.compile(rf"(?<!\w)(?:{alt})(?!\w)", re.IGNORECASE)


def listing_text(payload: Any, identity: Identity, dealer_input: DealerInput) -> str:
    """Everything a keyword may appear in: trim, series, dealer notes and the raw payload."""
    parts = [identity.trim, identity.series, dealer_input.notes,
             json.dumps(payload, ensure_ascii=False, default=str)]
    return "\n".join(p for p in parts if p)


HYBRID_TRIM = keywords("PHEV", "HYBRID", "EQ BOOST")

CARPLAY = keywords("APPLE CARPLAY", "CARPLAY", "PHONE INTEGRATION")
ANDROID_AUTO = keywords("ANDROID AUTO", "ANDROID")
BLUETOOTH = keywords("BLUETOOTH", "HANDS-FREE", "HANDSFREE")
DOLBY_ATMOS = keywords("DOLBY", "ATMOS")
PREMIUM_AUDIO = keywords("BOSE", "HARMAN", "KARDON", "BURMESTER", "MERIDIAN", "JBL", "BANG & OLUFSEN", "B&O")

ONE_OWNER = keywords("1 OWNER", "ONE OWNER", "SINGLE OWNER", "1-OWNER")
CLEAN_HISTORY = keywords("ACCIDENT FREE", "CLEAN TITLE", "NO ACCIDENTS", "CLEAN CARFAX")
BUYBACK = keywords("BUYBACK PROTECTION", "AUTOCHECK CERTIFIED")
TUEV = keywords("TÜV", "TUV", "HU/AU", "INSPECTED")
DEKRA = keywords("DEKRA", "SEAL OF QUALITY")


# ---------------- 2) Derived from normalized specs ----------------

def euro_from_year(year: Optional[int]) -> Optional[int]:
    """Mandatory EU emission standard by model year."""
    if year is None:
        return None
    if year >= 2015:
        return 6
    if year >= 2011:
        return 5
    if year >= 2006:
        return 4
    if year >= 2001:
        return 3
    return 2


class SpecThresholdBadges(BadgeStrategy):
    """Regional stickers, efficiency classes and equipment, from the specs and the listing text."""
    name = DERIVED

    ECO_MAX_L_100KM = 5.0
    SPORT_MAX_0_TO_60 = 6.0

    def detect(self, payload, specs, dealer_input):
        identity = resolve_identity(dealer_input, payload)
        fe = specs.fuel_economy

        fuel = fe.fuel_type
        if fuel != "EV" and HYBRID_TRIM.search(identity.trim):
            fuel = "HYBRID"
        fuel = fuel or "GAS"   # לא ידוע -> בנזין
        euro = fe.euro_standard if fe.euro_standard in range(1, 8) else euro_from_year(identity.year)

        ids: List[str] = []
        ids += self._stickers(fuel, euro)
        ids += self._efficiency(fuel, fe.co2_g_km)

        if fe.fuel_combined_l_100km is not None and fe.fuel_combined_l_100km <= self.ECO_MAX_L_100KM:
            ids.append("eco_choice")

        z = specs.performance.zero_to_sixty
        if z is not None and 0 < z < self.SPORT_MAX_0_TO_60:
            ids.append("sport_tuned")

        ids += self._technology(listing_text(payload, identity, dealer_input))
        return [make_badge(i, self.name) for i in ids]

    @staticmethod
    def _stickers(fuel: str, euro: Optional[int]) -> List[str]:
        zero = fuel in ("EV", "HYDROGEN")
        ids: List[str] = []

        # France – Crit'Air
        if zero:
            ids.append("eco_critair_0")
        elif fuel == "HYBRID":
            ids.append("eco_critair_1")
        elif euro is not None and fuel == "GAS":
            if euro >= 5:
                ids.append("eco_critair_1")
            elif euro == 4:
                ids.append("eco_critair_2")
            elif euro >= 2:
                ids.append("eco_critair_3")
        elif euro is not None and fuel == "DIESEL":
            if euro >= 5:
                ids.append("eco_critair_2")
            elif euro == 4:
                ids.append("eco_critair_3")

        # Germany – E-Kennzeichen, green Umweltplakette from Euro 4
        if fuel in ("EV", "HYBRID"):
            ids.append("eco_de_ekennzeichen")
        if zero or (euro is not None and euro >= 4):
            ids.append("eco_de_umwelt_4")

        # Spain – DGT
        if fuel == "EV":
            ids.append("eco_es_dgt_0")
        elif fuel == "HYBRID":
            ids.append("eco_es_dgt_eco")
        elif euro is not None and ((fuel == "GAS" and euro >= 4) or (fuel == "DIESEL" and euro >= 6)):
            ids.append("eco_es_dgt_c")

        # UK – ULEZ: petrol Euro 4+, diesel Euro 6+
        if zero or (euro is not None and (
                (fuel in ("GAS", "HYBRID") and euro >= 4) or (fuel == "DIESEL" and euro >= 6))):
            ids.append("eco_uk_ulez")

        # Belgium – LEZ: diesel Euro 5+, everything else Euro 2+
        if zero or (euro is not None and (
                (fuel == "DIESEL" and euro >= 5) or (fuel != "DIESEL" and euro >= 2))):
            ids.append("eco_be_lez")
        return ids

    @staticmethod
    def _efficiency(fuel: str, co2: Optional[int]) -> List[str]:
        ids: List[str] = []
        if fuel in ("EV", "HYDROGEN"):
            ids.append("energy_zero_emission")
        # CO2 as a proxy for the EU energy label
        if co2 is not None:
            if co2 < 50:
                ids.append("energy_eu_a_plus")
            elif co2 < 100:
                ids.append("energy_eu_a")
            elif co2 < 120:
                ids.append("energy_eu_b")
        elif fuel == "EV":
            ids.append("energy_eu_a_plus")
        return ids

    @staticmethod
    def _technology(text: str) -> List[str]:
        rules = (
            ("tech_apple_carplay", CARPLAY),
            ("tech_android_auto", ANDROID_AUTO),
            ("tech_bluetooth", BLUETOOTH),
            ("tech_dolby_atmos", DOLBY_ATMOS),
            ("tech_premium_audio", PREMIUM_AUDIO),
        )
        return [bid for bid, pattern in rules if pattern.search(text)]


# ---------------- 3) Dealer-supplied ----------------

class DealerSuppliedBadges(BadgeStrategy):
    name = DEALER

    KM_PER_YEAR = 15000
    LOW_MILEAGE_RATIO = 0.6

    HISTORY = (
        ("trust_one_owner", ONE_OWNER),
        ("trust_clean_history", CLEAN_HISTORY),
        ("trust_autocheck_buyback", BUYBACK),
        ("trust_tuev", TUEV),
        ("trust_dekra", DEKRA),
    )

    def __init__(self, current_year: Optional[int] = None):
        self.current_year = current_year

    def detect(self, payload, specs, dealer_input):
        identity = resolve_identity(dealer_input, payload)
        ids: List[str] = []

        if dealer_input.certified_pre_owned:
            ids.append("certified_pre_owned")

        if self._is_low_mileage(identity.year, dealer_input.mileage):
            ids.append("low_mileage")

        text = listing_text(payload, identity, dealer_input)
        ids += [bid for bid, pattern in self.HISTORY if pattern.search(text)]

        return [make_badge(i, self.name) for i in ids]

    def _is_low_mileage(self, year: Optional[int], km: Optional[float]) -> bool:
        if year is None or km is None:
            return False
        age = (self.current_year or date.today().year) - year
        if age <= 0:
            return False
        return km < age * self.KM_PER_YEAR * self.LOW_MILEAGE_RATIO


def default_strategies() -> List[BadgeStrategy]:
    # הסדר קובע מי מנצח בהתנגשות id
    return [ExplicitBadges(), SpecThresholdBadges(), DealerSuppliedBadges()]
