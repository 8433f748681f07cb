"""Input validation helpers."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError


class MissingFieldsError(ValueError):
    """Required write fields were absent or blank; nothing was written."""

    def __init__(self, fields: list[str]):
        super().__init__("missing_fields")
        self.fields = fields


def require_fields(**values: Any) -> None:
    missing = [
        name
        for name, value in values.items()
        if value is None or (isinstance(value, str) and not value.strip())
    ]
    if missing:
        raise MissingFieldsError(missing)


def jsonable_errors(exc: ValidationError) -> list[dict]:
    errors = exc.errors()
    for err in errors:
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
    return errors
