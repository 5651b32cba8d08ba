# services/badges/registry.py
"""
Known certification badges. Strategies emit registry ids so that the same
real-world certification found by two strategies collapses to one entry.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from domain.car_context import CertificationBadge


@dataclass(frozen=True)
class BadgeDef:
    id: str
    label: str
    category: str
    aliases: Tuple[str, ...] = ()


BADGES: Tuple[BadgeDef, ...] = (
    # Safety
    BadgeDef("safety_ncap_5", "5-Star Safety", "Safety",
             ("5 star safety", "nhtsa 5", "safety nhtsa 5", "euro ncap 5", "euroncap 5 stars", "5-star")),
    BadgeDef("safety_iihs_tsp", "IIHS Top Safety Pick", "Safety", ("iihs top safety pick", "iihs tsp")),
    BadgeDef("safety_iihs_tsp_plus", "IIHS Top Safety Pick+", "Safety",
             ("iihs top safety pick+", "iihs top safety pick plus", "iihs tsp plus")),

    # Eco / regulatory stickers
    BadgeDef("eco_critair_0", "Crit'Air 0", "Eco", ("critair 0", "crit air 0")),
    BadgeDef("eco_critair_1", "Crit'Air 1", "Eco", ("critair 1", "crit air 1")),
    BadgeDef("eco_critair_2", "Crit'Air 2", "Eco", ("critair 2", "crit air 2")),
    BadgeDef("eco_critair_3", "Crit'Air 3", "Eco", ("critair 3", "crit air 3")),
    BadgeDef("eco_uk_ulez", "ULEZ Compliant", "Eco", ("ulez", "ulez compliant")),
    BadgeDef("eco_de_ekennzeichen", "E-Kennzeichen", "Eco", ("e kennzeichen",)),
    BadgeDef("eco_de_umwelt_4", "Umweltplakette 4 (Green)", "Eco", ("umweltplakette", "green sticker", "umwelt 4")),
    BadgeDef("eco_be_lez", "Belgium LEZ Compliant", "Eco", ("be lez", "belgium lez")),
    BadgeDef("eco_es_dgt_0", "DGT Zero", "Eco", ("dgt 0", "dgt zero")),
    BadgeDef("eco_es_dgt_eco", "DGT ECO", "Eco", ("dgt eco",)),
    BadgeDef("eco_es_dgt_c", "DGT C", "Eco", ("dgt c",)),
    BadgeDef("eco_choice", "Eco Choice", "Eco", ("eco choice",)),

    # Energy
    BadgeDef("energy_zero_emission", "Zero Emission", "Energy", ("zero emission", "zev")),
    BadgeDef("energy_eu_a_plus", "EU Energy Label A+", "Energy", ("energy class a+", "eu a+")),
    BadgeDef("energy_eu_a", "EU Energy Label A", "Energy", ("energy class a", "eu a")),
    BadgeDef("energy_eu_b", "EU Energy Label B", "Energy", ("energy class b", "eu b")),
    BadgeDef("energy_epa_smartway", "EPA SmartWay", "Energy", ("smartway", "epa smartway")),

    # Performance
    BadgeDef("sport_tuned", "Sport Tuned", "Performance", ("sport tuned",)),

    # Technology
    BadgeDef("tech_apple_carplay", "Apple CarPlay", "Technology", ("carplay",)),
    BadgeDef("tech_android_auto", "Android Auto", "Technology", ()),
    BadgeDef("tech_bluetooth", "Bluetooth", "Technology", ("bluetooth hands free",)),
    BadgeDef("tech_dolby_atmos", "Dolby Atmos", "Technology", ("dolby",)),
    BadgeDef("tech_premium_audio", "Premium Audio", "Technology", ("premium sound",)),

    # Trust / history
    BadgeDef("certified_pre_owned", "Certified Pre-Owned", "Trust", ("cpo", "certified pre owned")),
    BadgeDef("low_mileage", "Low Mileage", "Trust", ("low mileage", "low km")),
    BadgeDef("trust_one_owner", "1 Owner", "Trust", ("1 owner", "one owner", "single owner")),
    BadgeDef("trust_clean_history", "Clean History", "Trust",
             ("clean title", "accident free", "no accidents", "clean carfax")),
    BadgeDef("trust_tuev", "TÜV Inspected", "Trust", ("tuv", "tüv", "tuev")),
    BadgeDef("trust_dekra", "DEKRA Seal", "Trust", ("dekra", "dekra seal of quality")),
    BadgeDef("trust_autocheck_buyback", "AutoCheck Buyback Protection", "Trust",
             ("autocheck certified", "buyback protection")),

    # Awards
    BadgeDef("award_wcoty", "World Car of the Year", "Award", ("world car of the year", "wcoty")),
    BadgeDef("award_red_dot", "Red Dot Design Award", "Award", ("red dot", "red dot design award")),
)

BADGE_REGISTRY: Dict[str, BadgeDef] = {b.id: b for b in BADGES}


def slugify(text: Any) -> str:
    """Crit'Air 1 -> crit_air_1"""
    s = str(text or "").strip().lower().replace("+", " plus")
    return re.sub(r"[^0-9a-zà-ÿ]+", "_", s).strip("_")


def _build_aliases() -> Dict[str, str]:
    out: Dict[str, str] = {}
    for b in BADGES:
        for token in (b.id, b.label, *b.aliases):
            out.setdefault(slugify(token), b.id)
    return out


_ALIASES = _build_aliases()


def lookup(token: Any) -> Optional[BadgeDef]:
    """Finds a registry badge by id, label or alias (case/punctuation-insensitive)."""
    key = slugify(token)
    if not key:
        return None
    bid = _ALIASES.get(key)
    return BADGE_REGISTRY.get(bid) if bid else None


def make_badge(badge_id: str, retrieval_method: str) -> CertificationBadge:
    b = BADGE_REGISTRY[badge_id]
    return CertificationBadge(id=b.id, label=b.label, retrieval_method=retrieval_method, category=b.category)
