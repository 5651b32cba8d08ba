# services/providers/http.py
import logging
import time
from typing import Any, Dict, Optional

import requests

from services.errors import RemoteLookupError

DEFAULT_TIMEOUT = 10
DEFAULT_MAX_RETRIES = 1
DEFAULT_UA = "AutoSense-Ingestion/1.0"

logger = logging.getLogger(__name__)


class Http:
    """
    HTTP wrapper: User-Agent header, timeout and optional retries with linear backoff.
    Every failure surfaces as RemoteLookupError (status + upstream message).
    """
    def __init__(self, user_agent: str = DEFAULT_UA, timeout: int = DEFAULT_TIMEOUT,
                 max_retries: int = DEFAULT_MAX_RETRIES, headers: Optional[Dict[str, str]] = None):
        self.user_agent = user_agent or DEFAULT_UA
        self.timeout = timeout
        self.max_retries = max_retries
        self.headers = dict(headers or {})

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None,
                 headers: Optional[Dict[str, str]] = None, timeout: Optional[int] = None) -> Any:
        req_headers = {"User-Agent": self.user_agent, "Accept": "application/json", **self.headers}
        if headers:
            req_headers.update(headers)

        use_timeout = timeout if timeout is not None else self.timeout
        attempts = max(self.max_retries or 1, 1)

        for attempt in range(1, attempts + 1):
            try:
                r = requests.get(url, params=params, headers=req_headers, timeout=use_timeout)
                if r.status_code >= 400:
                    # 4xx/5xx: לא מנסים שוב
                    raise RemoteLookupError(f"{url} -> HTTP {r.status_code}: {_upstream_message(r)}",
                                            status=r.status_code)
                return r.json()
            except (requests.RequestException, ValueError) as e:
                if attempt < attempts:
                    logger.debug("GET %s failed (attempt %d/%d): %s", url, attempt, attempts, e)
                    time.sleep(0.6 * attempt)
                else:
                    raise RemoteLookupError(f"Failed {url}: {e}", errors=[e]) from e


def _upstream_message(r: requests.Response) -> str:
    # RapidAPI מחזיר לרוב {"message": "..."}
    try:
        body = r.json()
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
    except ValueError:
        pass
    return (r.text or "")[:200]
