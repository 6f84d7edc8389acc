from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator


class IsolationLevel(Enum):
    DEFAULT = "default"
    READ_UNCOMMITTED = "read_uncommitted"
    READ_COMMITTED = "read_committed"
    WRITE_COMMITTED = "write_committed"
    REPEATABLE_READ = "repeatable_read"
    SNAPSHOT = "snapshot"
    SERIALIZABLE = "serializable"
    LINEARIZABLE = "linearizable"

    @classmethod
    def from_any(cls, value):
        if value is None:
            return cls.DEFAULT
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower().replace("-", "_").replace(" ", "_")
            if not normalized:
                return cls.DEFAULT
            for member in cls:
                if member.value == normalized:
                    return member
        raise ValueError(f"Cannot parse {value!r} into {cls.__name__}")

    @property
    def label(self):
        return self.value.replace("_", " ").title()


class TxOptions(BaseModel):
    """Options forwarded verbatim to ``begin``. Engines decide what they honour."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    isolation: IsolationLevel = IsolationLevel.DEFAULT
    read_only: bool = False

    @field_validator("isolation", mode="before")
    @classmethod
    def _parse_isolation(cls, v):
        return IsolationLevel.from_any(v)
