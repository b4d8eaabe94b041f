from __future__ import annotations

from typing import Any


class InvalidReportParams(ValueError):
    """A report query parameter is missing, malformed or out of range."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = {'detail': str(self)}
        if self.field:
            result['field'] = self.field
        return result
