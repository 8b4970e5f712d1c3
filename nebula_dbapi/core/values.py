"""Tagged value variant shared by parameter binding and result reading.

Every value crossing the adapter is wrapped in `TypedValue`, which pairs the
host object with an explicit `ValueKind`. Literal rendering dispatches on the
kind, and result coercions check it before converting, so no code path needs
to guess a value's kind from its runtime type more than once.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from decimal import Decimal, InvalidOperation, localcontext
from enum import Enum
from typing import Any, Optional

from .errors import TypeCoercionError


class ValueKind(str, Enum):
    """Value kinds the graph backend can produce or accept as literals."""

    NULL = "null"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    DECIMAL = "decimal"
    STRING = "string"
    DATE = "date"
    LOCAL_TIME = "local_time"
    LOCAL_DATETIME = "local_datetime"
    ZONED_TIME = "zoned_time"
    ZONED_DATETIME = "zoned_datetime"
    DURATION = "duration"
    OTHER = "other"


_INT_WIDTHS = (8, 16, 32, 64)


def classify(obj: Any) -> ValueKind:
    """Return the value kind of one host object."""

    if obj is None:
        return ValueKind.NULL
    # bool is an int subclass; datetime is a date subclass.
    if isinstance(obj, bool):
        return ValueKind.BOOL
    if isinstance(obj, int):
        return ValueKind.INT
    if isinstance(obj, float):
        return ValueKind.FLOAT
    if isinstance(obj, Decimal):
        return ValueKind.DECIMAL
    if isinstance(obj, str):
        return ValueKind.STRING
    if isinstance(obj, datetime):
        return ValueKind.LOCAL_DATETIME if _is_naive(obj) else ValueKind.ZONED_DATETIME
    if isinstance(obj, date):
        return ValueKind.DATE
    if isinstance(obj, time):
        return ValueKind.LOCAL_TIME if _is_naive(obj) else ValueKind.ZONED_TIME
    if isinstance(obj, timedelta):
        return ValueKind.DURATION
    return ValueKind.OTHER


@dataclass(frozen=True)
class TypedValue:
    """One backend value tagged with its kind.

    Attributes:
        kind: Value kind tag.
        value: Host object; `None` exactly when `kind` is `NULL`.
    """

    kind: ValueKind
    value: Any = None

    def __post_init__(self) -> None:
        if (self.kind is ValueKind.NULL) != (self.value is None):
            raise ValueError(
                f"TypedValue of kind {self.kind.value!r} cannot hold {self.value!r}."
            )

    @classmethod
    def of(cls, obj: Any) -> TypedValue:
        """Wrap a host object, classifying it by type.

        Already-wrapped values are returned unchanged.
        """

        if isinstance(obj, TypedValue):
            return obj
        return cls(classify(obj), obj)

    @classmethod
    def null(cls) -> TypedValue:
        return cls(ValueKind.NULL, None)

    @property
    def is_null(self) -> bool:
        return self.kind is ValueKind.NULL

    def to_python(self) -> Any:
        """Return the wrapped host object as is."""

        return self.value

    def as_str(self) -> Optional[str]:
        return self._expect("str", ValueKind.STRING)

    def as_bool(self) -> Optional[bool]:
        return self._expect("bool", ValueKind.BOOL)

    def as_int(self, bits: int | None = None) -> Optional[int]:
        """Return an INT value, optionally checked against a signed width.

        Args:
            bits: One of 8, 16, 32, 64, or `None` for no width check.

        Raises:
            TypeCoercionError: If the kind is not INT or the value does not fit.
        """

        if bits is not None and bits not in _INT_WIDTHS:
            raise ValueError(f"Unsupported integer width: {bits}")
        requested = "int" if bits is None else f"int{bits}"
        value = self._expect(requested, ValueKind.INT)
        if value is None or bits is None:
            return value
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
        if not low <= value <= high:
            raise self._mismatch(requested, f"{value} is outside [{low}, {high}]")
        return value

    def as_float(self) -> Optional[float]:
        value = self._expect("float", ValueKind.FLOAT, ValueKind.INT)
        return None if value is None else float(value)

    def as_decimal(self, scale: int | None = None) -> Optional[Decimal]:
        """Return a DECIMAL or INT value as `Decimal`.

        Args:
            scale: Number of fractional digits to rescale to. Rescaling that
                would need rounding fails instead of rounding.
        """

        requested = "decimal" if scale is None else f"decimal(scale={scale})"
        value = self._expect(requested, ValueKind.DECIMAL, ValueKind.INT)
        if value is None:
            return None
        number = value if isinstance(value, Decimal) else Decimal(value)
        if scale is None:
            return number
        if not number.is_finite():
            raise self._mismatch(requested, f"{number} is not finite")
        with localcontext() as ctx:
            # Room for every integer digit plus the requested fraction.
            ctx.prec = max(ctx.prec, number.adjusted() + scale + 2)
            try:
                rescaled = number.quantize(Decimal(1).scaleb(-scale))
            except InvalidOperation:
                raise self._mismatch(requested, f"{number} cannot take scale {scale}") from None
        if rescaled != number:
            raise self._mismatch(requested, f"{number} needs rounding")
        return rescaled

    def as_date(self, tz: tzinfo | None = None) -> Optional[date]:
        """Return a DATE value.

        With `tz`, datetime kinds are also accepted: local datetimes are read
        as wall-clock time in `tz` and zoned datetimes are shifted into `tz`.
        """

        if tz is None:
            return self._expect("date", ValueKind.DATE)
        value = self._expect(
            "date",
            ValueKind.DATE,
            ValueKind.LOCAL_DATETIME,
            ValueKind.ZONED_DATETIME,
        )
        if self.kind is ValueKind.ZONED_DATETIME:
            return value.astimezone(tz).date()
        if self.kind is ValueKind.LOCAL_DATETIME:
            return value.date()
        return value

    def as_time(self, tz: tzinfo | None = None) -> Optional[time]:
        """Return a LOCAL_TIME value, or a ZONED_TIME shifted into `tz`."""

        if tz is None:
            return self._expect("time", ValueKind.LOCAL_TIME)
        value = self._expect("time", ValueKind.LOCAL_TIME, ValueKind.ZONED_TIME)
        if self.kind is ValueKind.ZONED_TIME:
            anchored = datetime.combine(date.today(), value)
            return anchored.astimezone(tz).time()
        return value

    def as_timestamp(self, tz: tzinfo | None = None) -> Optional[datetime]:
        """Return a naive datetime from a local or zoned datetime.

        Zoned values keep their own wall-clock time unless `tz` is given, in
        which case they are shifted into `tz` first.
        """

        value = self._expect(
            "timestamp", ValueKind.LOCAL_DATETIME, ValueKind.ZONED_DATETIME
        )
        if value is None or self.kind is ValueKind.LOCAL_DATETIME:
            return value
        if tz is not None:
            value = value.astimezone(tz)
        return value.replace(tzinfo=None)

    def as_duration(self) -> Optional[timedelta]:
        return self._expect("duration", ValueKind.DURATION)

    def _expect(self, requested: str, *kinds: ValueKind) -> Any:
        if self.kind is ValueKind.NULL:
            return None
        if self.kind not in kinds:
            raise self._mismatch(requested)
        return self.value

    def _mismatch(self, requested: str, detail: str | None = None) -> TypeCoercionError:
        return TypeCoercionError(self.kind, requested, detail)


def _is_naive(value: datetime | time) -> bool:
    return value.utcoffset() is None
