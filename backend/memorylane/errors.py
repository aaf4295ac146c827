"""Error taxonomy for the memory contract.

``NotFoundOrUnauthorized`` deliberately covers both "no such record" and
"record owned by someone else" so callers cannot probe for other owners'
records.
"""

from typing import Any


class MemoryLaneError(Exception):
    """Base class for contract failures."""

    detail = "Request failed"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.detail
        super().__init__(self.detail)


class Unauthenticated(MemoryLaneError):
    """No caller identity was resolved for a write."""

    detail = "Not authenticated"


class NotFoundOrUnauthorized(MemoryLaneError):
    """Record absent, or owned by another caller."""

    detail = "Not found or unauthorized"

    def __init__(self, kind: str = "Record"):
        super().__init__(f"{kind} not found or unauthorized")


class InvalidArgument(MemoryLaneError):
    """A value falls outside its declared domain."""

    detail = "Invalid argument"

    def __init__(self, detail: str | None = None, errors: list[dict[str, Any]] | None = None):
        super().__init__(detail)
        self.errors = errors or []
