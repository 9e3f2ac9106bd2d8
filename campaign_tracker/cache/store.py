import copy
import threading
from typing import Any, Dict, Optional


class LastKnownCache:
    """
    Most recent successful result payload.

    Overwritten on every success and read on every failure. There is no
    expiry: a value lives until it is replaced, cleared or the process exits.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._payload: Optional[Dict[str, Any]] = None

    def get(self) -> Optional[Dict[str, Any]]:
        """Copy of the cached payload, or None if nothing has succeeded yet"""
        with self._lock:
            return copy.deepcopy(self._payload)

    def set(self, payload: Dict[str, Any]) -> None:
        with self._lock:
            self._payload = copy.deepcopy(payload)

    def clear(self) -> None:
        with self._lock:
            self._payload = None

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            payload = self._payload
            return {
                "has_value": payload is not None,
                "updated_at": payload.get("updatedAt") if payload else None,
                "total_raised": payload.get("totalRaised") if payload else None,
                "method": payload.get("method") if payload else None,
            }


# Process-wide default used by the API routes
last_known = LastKnownCache()
