# services/providers/rapidapi.py
"""
RapidAPI "car-specs" provider (v2). Returns the raw trim JSON as-is; no normalization here.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

from services.errors import RemoteLookupError
from .http import Http, DEFAULT_TIMEOUT

BASE = "https://car-specs.p.rapidapi.com/v2"
DEFAULT_HOST = "car-specs.p.rapidapi.com"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RapidApiConfig:
    api_key: Optional[str] = None
    host: str = DEFAULT_HOST
    base_url: str = BASE
    timeout: int = DEFAULT_TIMEOUT
    max_retries: int = 1

    @classmethod
    def from_env(cls) -> "RapidApiConfig":
        return cls(
            api_key=os.getenv("RAPIDAPI_KEY") or None,
            host=os.getenv("RAPIDAPI_HOST", DEFAULT_HOST),
            base_url=os.getenv("RAPIDAPI_BASE_URL", BASE).rstrip("/"),
            timeout=_env_int("RAPIDAPI_TIMEOUT", DEFAULT_TIMEOUT),
            max_retries=_env_int("RAPIDAPI_MAX_RETRIES", 1),
        )


class RapidApiSpecs:
    def __init__(self, config: RapidApiConfig | None = None, http: Http | None = None):
        self.config = config or RapidApiConfig.from_env()
        self.http = http or Http(timeout=self.config.timeout, max_retries=self.config.max_retries)

    def fetch_trim(self, trim_id: int) -> Any:
        endpoint = f"/cars/trims/{trim_id}"
        logger.info("RapidAPI call [GET] %s", endpoint,
                    extra={"method": "GET", "endpoint": endpoint, "trim_id": trim_id})

        if not self.config.api_key:
            raise RemoteLookupError("RAPIDAPI_KEY is required for trim lookups")

        headers = {
            "x-rapidapi-key": self.config.api_key,
            "x-rapidapi-host": self.config.host,
        }
        try:
            return self.http.get_json(f"{self.config.base_url}{endpoint}", headers=headers)
        except RemoteLookupError as e:
            logger.error("RapidAPI error [%s]: %s", endpoint, e,
                         extra={"method": "GET", "endpoint": endpoint, "status": e.status})
            raise


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default
