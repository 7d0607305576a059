"""
Shared base classes for NIP data, metadata, and log models.

    [BaseData][relayoptimizer.nips.base.BaseData]
        Frozen model with declarative lenient parsing via
        [FieldSpec][relayoptimizer.nips.parsing.FieldSpec].
    [BaseLogs][relayoptimizer.nips.base.BaseLogs]
        Operation log with success/reason semantic validation.
    [BaseMetadata][relayoptimizer.nips.base.BaseMetadata]
        Container pairing a data object with a logs object.

See Also:
    [relayoptimizer.nips.nip11][]: Relay information document models.
    [relayoptimizer.nips.nip01][]: Profile metadata model.
"""

from __future__ import annotations

from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, StrictBool, model_validator

from .parsing import FieldSpec, parse_fields


class BaseData(BaseModel):
    """Base class for data models parsed from untrusted JSON.

    Subclasses declare ``_FIELD_SPEC``; [parse()][relayoptimizer.nips.base.BaseData.parse]
    turns a raw dictionary into valid constructor arguments, and
    [from_raw()][relayoptimizer.nips.base.BaseData.from_raw] builds the
    instance in one step. Subclasses with nested objects override
    ``parse()``.
    """

    model_config = ConfigDict(frozen=True)

    _FIELD_SPEC: ClassVar[FieldSpec] = FieldSpec()

    @classmethod
    def parse(cls, data: Any) -> dict[str, Any]:
        """Parse arbitrary data into constructor arguments, dropping invalid values."""
        if not isinstance(data, dict):
            return {}
        return parse_fields(data, cls._FIELD_SPEC)

    @classmethod
    def from_raw(cls, data: Any) -> Self:
        """Build an instance from untrusted data. Never raises on bad input."""
        return cls.model_validate(cls.parse(data))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create an instance from a dictionary with strict validation."""
        return cls.model_validate(data)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary, excluding fields with ``None`` values."""
        return self.model_dump(exclude_none=True)


class BaseLogs(BaseModel):
    """Base class for operation logs with success/reason validation.

    * When ``success=True``, ``reason`` must be ``None``.
    * When ``success=False``, ``reason`` is required.
    """

    model_config = ConfigDict(frozen=True)

    success: StrictBool
    reason: str | None = None

    @model_validator(mode="after")
    def validate_semantic(self) -> Self:
        """Enforce success/reason consistency."""
        if self.success and self.reason is not None:
            raise ValueError("reason must be None when success is True")
        if not self.success and self.reason is None:
            raise ValueError("reason is required when success is False")
        return self

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class BaseMetadata(BaseModel):
    """Base class for containers pairing data with operation logs.

    [to_dict()][relayoptimizer.nips.base.BaseMetadata.to_dict] delegates to
    nested objects that define their own ``to_dict()``.
    """

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Self:
        return cls.model_validate(raw)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary, skipping ``None`` fields."""
        result: dict[str, Any] = {}
        for key in type(self).model_fields:
            value = getattr(self, key)
            if value is None:
                continue
            result[key] = value.to_dict() if hasattr(value, "to_dict") else value
        return result


__all__ = ["BaseData", "BaseLogs", "BaseMetadata"]
