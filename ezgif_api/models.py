"""
Request model for /api/convert.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, field_validator

# Reported as the input when the client sent a file instead of a URL
FILE_UPLOADED = "file_uploaded"


def is_present(value: Any) -> bool:
    """False only for None, empty strings, zero and False.

    Empty objects and lists still count as supplied values.
    """
    if value is None:
        return False
    if isinstance(value, (str, int, float)):
        return bool(value)
    return True


class ConvertRequest(BaseModel):
    """Fields read from a /api/convert body; presence is checked by the router."""

    model_config = ConfigDict(extra="ignore")

    action: Any = None
    url: Any = None
    file: Any = None
    options: Dict[str, Any] = {}

    @field_validator("options", mode="before")
    @classmethod
    def mapping_or_empty(cls, value: Any) -> Dict[str, Any]:
        return value if isinstance(value, dict) else {}

    @classmethod
    def from_payload(cls, payload: Any) -> 'ConvertRequest':
        if not isinstance(payload, dict):
            payload = {}
        return cls.model_validate(payload)

    @property
    def has_action(self) -> bool:
        return is_present(self.action)

    @property
    def has_source(self) -> bool:
        return is_present(self.url) or is_present(self.file)

    @property
    def input_reference(self) -> Any:
        return self.url if is_present(self.url) else FILE_UPLOADED
