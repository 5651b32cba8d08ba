from typing import Any, Protocol


class TrimSource(Protocol):
    """Anything that can return the raw spec payload for a trim id."""
    def fetch_trim(self, trim_id: int) -> Any: ...
