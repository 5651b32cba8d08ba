# services/pipeline/ingestion.py
"""
Builds a CarContext from dealer input + the provider's trim payload.

Failure policy: only the boundary is fatal (bad dealer input, failed trim fetch).
Everything after the fetch degrades instead: unparseable fields become None and a
failing badge strategy contributes no badges.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Union

from domain.car_context import CarContext
from domain.dealer_input import DealerInput
from ..badges.deriver import CertificationDeriver
from ..errors import InvalidInputError, RemoteLookupError
from ..normalization.identity import resolve_identity
from ..normalization.specs import normalize_specs
from ..providers.protocols import TrimSource
from ..providers.rapidapi import RapidApiSpecs

logger = logging.getLogger(__name__)

DealerInputLike = Union[DealerInput, Mapping[str, Any]]


def _coerce_input(dealer_input: DealerInputLike) -> DealerInput:
    if isinstance(dealer_input, DealerInput):
        problems = dealer_input.problems()
        if problems:
            raise InvalidInputError("Invalid dealer input", errors=problems)
        return dealer_input
    return DealerInput.from_dict(dealer_input)


class IngestionService:
    def __init__(self, trim_source: TrimSource | None = None, deriver: CertificationDeriver | None = None):
        self.trim_source = trim_source or RapidApiSpecs()
        self.deriver = deriver or CertificationDeriver()

    def fetch_payload(self, trim_id: int) -> Any:
        try:
            return self.trim_source.fetch_trim(trim_id)
        except RemoteLookupError:
            raise
        except Exception as e:
            raise RemoteLookupError(f"Trim lookup failed for {trim_id}: {e}", errors=[e]) from e

    def build_car_context(self, dealer_input: DealerInputLike) -> CarContext:
        di = _coerce_input(dealer_input)
        hint = di.identity
        logger.info("Ingesting %s %s %s (trim id %s)", hint.year, hint.make, hint.model, di.rapid_api_trim_id)

        payload = self.fetch_payload(di.rapid_api_trim_id)

        # שלושת השלבים בלתי תלויים זה בזה
        identity = resolve_identity(di, payload)
        specs = normalize_specs(payload)
        badges = self.deriver.derive(payload, specs, di)

        logger.info("Context ready: %s %s %s %s, %d certifications",
                    identity.year, identity.make, identity.model, identity.trim, len(badges))
        return CarContext(
            identity=identity,
            normalized_specs=specs,
            certifications=tuple(badges),
            dealer_input=di,
        )


def build_car_context(dealer_input: DealerInputLike, trim_source: TrimSource | None = None) -> CarContext:
    """
    Single entry point. Raises InvalidInputError before any network call when the
    input is malformed, RemoteLookupError when the trim fetch fails.
    """
    di = _coerce_input(dealer_input)
    return IngestionService(trim_source=trim_source).build_car_context(di)
