# app/errors.py
"""
Exception types shared by the store, form parsers, and routes.
"""


class ValidationError(ValueError):
    """Submitted form input was rejected before reaching the store."""


class RecordNotFound(LookupError):
    """The requested transaction, category, or budget does not exist."""

    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} {record_id!r} not found")
        self.kind = kind
        self.record_id = record_id
