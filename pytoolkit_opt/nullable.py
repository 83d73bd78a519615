from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from typing_extensions import Self

T = TypeVar("T")


@dataclass(frozen=True)
class NullableColumn(Generic[T]):
    """
    Two-field shape for a nullable database column.

    ``valid=False`` is SQL NULL, in which case ``v`` is ``None``.
    """

    valid: bool = False
    v: T | None = None

    @classmethod
    def null(cls) -> Self:
        return cls()

    @classmethod
    def of(cls, v: T) -> Self:
        return cls(valid=True, v=v)

    @classmethod
    def scan(cls, raw: Any) -> Self:
        """Build a column from a raw DB-API value, where ``None`` is NULL."""
        if raw is None:
            return cls()
        return cls(valid=True, v=raw)

    def to_db_value(self) -> T | None:
        """Return the value to bind as a DB-API query parameter."""
        return self.v if self.valid else None
