"""Dynamically typed cell values.

``Value`` is a closed variant type. Every cell of a ``DataFrame`` holds one:

================  ===================================  =====================
Kind              Payload                              ``type_of()``
================  ===================================  =====================
``NULL``          ``None``                             ``DataType.NULL``
``BOOL``          ``bool``                             ``DataType.BOOL``
``STRING``        ``str``                              ``DataType.STRING``
``ARRAY``         ``tuple[Value, ...]``                ``DataType.ARRAY``
``MAP``           ``ValueMap`` (sorted, unique keys)   ``DataType.MAP``
``NUMBER``        ``Number``                           the number's tag
``DATE``          naive ``datetime.datetime``          ``DataType.DATE``
``BINARY``        ``bytes``                            ``DataType.BINARY``
================  ===================================  =====================

Values are immutable and hashable. Equality and ordering only hold between
values of the same kind: comparing a string with a number is not an error,
``==`` is simply ``False`` and ``partial_cmp()`` returns ``None``.
"""

from __future__ import annotations

import base64
import datetime
import decimal
import enum
import json
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from flatframe.dtypes import DataType
from flatframe.number import Number


class Kind(enum.Enum):
    """The variant of a ``Value``."""

    NULL = "null"
    BOOL = "boolean"
    STRING = "string"
    ARRAY = "array"
    MAP = "object"
    NUMBER = "number"
    DATE = "date"
    BINARY = "binary"


_KIND_TYPES: dict[Kind, DataType] = {
    Kind.NULL: DataType.NULL,
    Kind.BOOL: DataType.BOOL,
    Kind.STRING: DataType.STRING,
    Kind.ARRAY: DataType.ARRAY,
    Kind.MAP: DataType.MAP,
    Kind.DATE: DataType.DATE,
    Kind.BINARY: DataType.BINARY,
}


# ---------------------------------------------------------------------------
# ValueMap
# ---------------------------------------------------------------------------


class ValueMap(Mapping[str, "Value"]):
    """Immutable string-keyed mapping of values, iterated in sorted key order."""

    __slots__ = ("_inner",)

    def __init__(self, items: Mapping[str, Any] | Iterable[tuple[str, Any]] = ()) -> None:
        pairs = items.items() if isinstance(items, Mapping) else items
        inner: dict[str, Value] = {}
        for key, item in pairs:
            if not isinstance(key, str):
                raise TypeError(f"Map keys must be str, got {type(key).__name__}")
            inner[key] = Value.from_python(item)
        self._inner = dict(sorted(inner.items()))

    def __getitem__(self, key: str) -> Value:
        return self._inner[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._inner)

    def __len__(self) -> int:
        return len(self._inner)

    def __hash__(self) -> int:
        return hash(tuple(self._inner.items()))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ValueMap):
            return self._inner == other._inner
        return NotImplemented

    def __repr__(self) -> str:
        return f"ValueMap({self._inner!r})"

    def contains(self, key: str) -> bool:
        return key in self._inner


# ---------------------------------------------------------------------------
# Value
# ---------------------------------------------------------------------------


class Value:
    """A single dynamically typed datum.

    Use the named constructors (``Value.string("x")``,
    ``Value.number(Number.uint8(3))``, ...) or ``Value.from_python()``::

        Value.from_python(3)            # Number(int64, 3)
        Value.from_python([1, "a"])     # Array
        Value.from_python(None) is NULL
    """

    __slots__ = ("_kind", "_payload")

    def __init__(self, kind: Kind, payload: Any) -> None:
        self._kind = kind
        self._payload = payload

    # --- Named constructors ---

    @staticmethod
    def null() -> Value:
        return NULL

    @classmethod
    def bool(cls, value: bool) -> Value:
        if not isinstance(value, bool):
            raise TypeError(f"Expected bool, got {type(value).__name__}")
        return cls(Kind.BOOL, value)

    @classmethod
    def string(cls, value: str) -> Value:
        if not isinstance(value, str):
            raise TypeError(f"Expected str, got {type(value).__name__}")
        return cls(Kind.STRING, value)

    @classmethod
    def array(cls, items: Iterable[Any]) -> Value:
        return cls(Kind.ARRAY, tuple(cls.from_python(item) for item in items))

    @classmethod
    def map(cls, items: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> Value:
        return cls(Kind.MAP, items if isinstance(items, ValueMap) else ValueMap(items))

    @classmethod
    def number(cls, number: Number) -> Value:
        if not isinstance(number, Number):
            raise TypeError(f"Expected Number, got {type(number).__name__}")
        return cls(Kind.NUMBER, number)

    @classmethod
    def date(cls, value: datetime.datetime | datetime.date) -> Value:
        if not isinstance(value, datetime.datetime):
            if not isinstance(value, datetime.date):
                raise TypeError(f"Expected datetime, got {type(value).__name__}")
            value = datetime.datetime.combine(value, datetime.time())
        if value.tzinfo is not None:
            raise ValueError("Date values are naive timestamps, got a timezone-aware datetime")
        return cls(Kind.DATE, value)

    @classmethod
    def binary(cls, value: bytes | bytearray | memoryview) -> Value:
        return cls(Kind.BINARY, bytes(value))

    @classmethod
    def from_python(cls, obj: Any) -> Value:
        """Build a value from a native Python object.

        ``None`` → Null, ``bool`` → Bool, ``int``/``float``/``Decimal`` →
        Number (see ``Number.from_python``), ``str`` → String, bytes-like →
        Binary, ``datetime``/``date`` → Date, mappings → Map, lists and
        tuples → Array. Values and Numbers pass through. Anything else raises
        ``TypeError``.
        """
        if isinstance(obj, Value):
            return obj
        if obj is None:
            return NULL
        if isinstance(obj, bool):
            return cls(Kind.BOOL, obj)
        if isinstance(obj, Number):
            return cls(Kind.NUMBER, obj)
        if isinstance(obj, (int, float, decimal.Decimal)):
            return cls(Kind.NUMBER, Number.from_python(obj))
        if isinstance(obj, str):
            return cls(Kind.STRING, obj)
        if isinstance(obj, (bytes, bytearray, memoryview)):
            return cls.binary(obj)
        if isinstance(obj, (datetime.datetime, datetime.date)):
            return cls.date(obj)
        if isinstance(obj, Mapping):
            return cls.map(obj)
        if isinstance(obj, (list, tuple)):
            return cls.array(obj)
        raise TypeError(f"Cannot build a Value from {type(obj).__name__}")

    # --- Introspection ---

    @property
    def kind(self) -> Kind:
        return self._kind

    @property
    def payload(self) -> Any:
        return self._payload

    def type_of(self) -> DataType:
        """Return the ``DataType`` of this value. Numbers report their width tag."""
        if self._kind is Kind.NUMBER:
            return self._payload.tag
        return _KIND_TYPES[self._kind]

    def is_null(self) -> bool:
        return self._kind is Kind.NULL

    def as_bool(self) -> bool | None:
        return self._payload if self._kind is Kind.BOOL else None

    def as_str(self) -> str | None:
        return self._payload if self._kind is Kind.STRING else None

    def as_array(self) -> tuple[Value, ...] | None:
        return self._payload if self._kind is Kind.ARRAY else None

    def as_map(self) -> ValueMap | None:
        return self._payload if self._kind is Kind.MAP else None

    def as_number(self) -> Number | None:
        return self._payload if self._kind is Kind.NUMBER else None

    def as_date(self) -> datetime.datetime | None:
        return self._payload if self._kind is Kind.DATE else None

    def as_binary(self) -> bytes | None:
        return self._payload if self._kind is Kind.BINARY else None

    def to_python(self) -> Any:
        """Inverse of ``from_python``: Arrays become lists, Maps become dicts."""
        if self._kind is Kind.ARRAY:
            return [item.to_python() for item in self._payload]
        if self._kind is Kind.MAP:
            return {key: item.to_python() for key, item in self._payload.items()}
        if self._kind is Kind.NUMBER:
            return self._payload.to_python()
        return self._payload

    def __getitem__(self, key: str | int) -> Value:
        """Look up a Map entry (or Array element); ``Null`` when there is none."""
        if self._kind is Kind.MAP and isinstance(key, str):
            return self._payload.get(key, NULL)
        if self._kind is Kind.ARRAY and isinstance(key, int) and not isinstance(key, bool):
            if -len(self._payload) <= key < len(self._payload):
                return self._payload[key]
        return NULL

    # --- Comparison ---

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        # values of different kinds are never equal
        if self._kind is not other._kind:
            return False
        return self._payload == other._payload

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        return hash((self._kind, self._payload))

    def partial_cmp(self, other: Value) -> int | None:
        """Order two values of the same kind.

        Returns -1, 0 or 1, or ``None`` when the pair is incomparable: values
        of different kinds, numbers of different widths, maps, or anything
        involving NaN.
        """
        if not isinstance(other, Value) or self._kind is not other._kind:
            return None
        kind = self._kind
        if kind is Kind.NULL:
            return 0
        if kind is Kind.NUMBER:
            return self._payload.partial_cmp(other._payload)
        if kind is Kind.ARRAY:
            for left, right in zip(self._payload, other._payload):
                cmp = left.partial_cmp(right)
                if cmp != 0:
                    return cmp
            return _cmp(len(self._payload), len(other._payload))
        if kind is Kind.MAP:
            return None
        # BOOL, STRING, DATE, BINARY
        return _cmp(self._payload, other._payload)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        cmp = self.partial_cmp(other)
        return cmp is not None and cmp < 0

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        cmp = self.partial_cmp(other)
        return cmp is not None and cmp <= 0

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        cmp = self.partial_cmp(other)
        return cmp is not None and cmp > 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        cmp = self.partial_cmp(other)
        return cmp is not None and cmp >= 0

    # --- Display ---

    def __str__(self) -> str:
        kind = self._kind
        if kind is Kind.NULL:
            return "null"
        if kind is Kind.BOOL:
            return "true" if self._payload else "false"
        if kind is Kind.STRING:
            return self._payload
        if kind is Kind.NUMBER:
            return str(self._payload)
        if kind is Kind.DATE:
            return self._payload.isoformat(sep=" ")
        if kind is Kind.BINARY:
            return f"<binary {len(self._payload)} bytes>"
        if kind is Kind.ARRAY:
            return f"<array {len(self._payload)} items>"
        return f"<map {len(self._payload)} keys>"

    def __repr__(self) -> str:
        if self._kind is Kind.NULL:
            return "Value.null()"
        if self._kind is Kind.NUMBER:
            return f"Value.number({self._payload!r})"
        return f"Value.{self._kind.name.lower()}({self._payload!r})"

    # --- Serialization ---

    def to_dict(self) -> dict[str, Any]:
        """Tagged, JSON-compatible form: ``{"type": <kind>, "value": <payload>}``."""
        kind = self._kind
        if kind is Kind.ARRAY:
            payload: Any = [item.to_dict() for item in self._payload]
        elif kind is Kind.MAP:
            payload = {key: item.to_dict() for key, item in self._payload.items()}
        elif kind is Kind.NUMBER:
            payload = self._payload.to_dict()
        elif kind is Kind.DATE:
            payload = self._payload.isoformat()
        elif kind is Kind.BINARY:
            payload = base64.b64encode(self._payload).decode("ascii")
        else:
            payload = self._payload
        return {"type": kind.value, "value": payload}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Value:
        kind = Kind(data["type"])
        payload = data["value"]
        if kind is Kind.NULL:
            return NULL
        if kind is Kind.BOOL:
            return cls.bool(payload)
        if kind is Kind.STRING:
            return cls.string(payload)
        if kind is Kind.ARRAY:
            return cls(Kind.ARRAY, tuple(cls.from_dict(item) for item in payload))
        if kind is Kind.MAP:
            return cls(Kind.MAP, ValueMap({k: cls.from_dict(v) for k, v in payload.items()}))
        if kind is Kind.NUMBER:
            return cls(Kind.NUMBER, Number.from_dict(payload))
        if kind is Kind.DATE:
            return cls.date(datetime.datetime.fromisoformat(payload))
        return cls.binary(base64.b64decode(payload))

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: str) -> Value:
        return cls.from_dict(json.loads(text))


def _cmp(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


NULL = Value(Kind.NULL, None)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def val(obj: Any, dtype: DataType | None = None) -> Value:
    """Build a value, optionally casting it to ``dtype`` with ``try_cast``::

        val(7)                    # Number(int64, 7)
        val(7, DataType.UINT8)    # Number(uint8, 7)
    """
    value = Value.from_python(obj)
    if dtype is None:
        return value
    from flatframe.ops.cast import try_cast

    return try_cast(value, dtype)


def row(*items: Any, dtype: DataType | None = None) -> list[Value]:
    """Build a row of values: ``row(1, "a", None)``."""
    return [val(item, dtype) for item in items]
