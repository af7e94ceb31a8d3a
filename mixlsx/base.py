from __future__ import annotations

from pydantic import BaseModel as _PydanticBaseModel, ConfigDict


class JsonModel(_PydanticBaseModel):
    """Base model with JSON helpers.

    Chart and drawing options travel as JSON format strings (the same shape a
    caller passes to `Workbook.add_chart`). `to_json()` and `from_json()` are
    thin wrappers around Pydantic v2 `model_dump_json` and
    `model_validate_json`; `coerce()` accepts a model, a mapping or a string.
    """

    model_config = ConfigDict(populate_by_name=True)

    def to_json(self, **kwargs) -> str:
        kwargs.setdefault("by_alias", True)
        return self.model_dump_json(**kwargs)

    @classmethod
    def from_json(cls, data: str | bytes):
        return cls.model_validate_json(data)

    @classmethod
    def coerce(cls, value):
        if isinstance(value, cls):
            return value
        if isinstance(value, (str, bytes)):
            return cls.model_validate_json(value)
        return cls.model_validate(value)
