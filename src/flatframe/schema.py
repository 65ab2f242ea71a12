"""Schema and Field metadata.

A ``Schema`` is the ordered list of column descriptors (``Field``) of a frame.
Position order is the column order of the backing buffer, so it pairs the
field list with a name → position index and keeps both in step on every
mutation::

    schema = Schema()
    schema.add_field("id")                     # 0
    schema.push_field(Field("name", DataType.STRING, nullable=False))  # 1
    schema.field_names()                       # ["id", "name"]
    schema.is_weak()                           # True, "id" is still ANY

Field names are read-only on the ``Field`` itself; renaming goes through
``Schema.rename_field`` so the index cannot drift from the list.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Iterable, Iterator
from typing import Any

from flatframe.dtypes import DataType
from flatframe.errors import DuplicateColumnName, IndexOutOfBounds
from flatframe.value import Value

# ---------------------------------------------------------------------------
# Field
# ---------------------------------------------------------------------------


class Field:
    """Descriptor of a single column.

    A bare ``Field("a")`` is weakly typed (``DataType.ANY``) and nullable
    until a dtype is declared or derived from data.
    """

    __slots__ = ("_name", "dtype", "nullable", "default", "doc")

    def __init__(
        self,
        name: str,
        dtype: DataType = DataType.ANY,
        *,
        nullable: bool = True,
        default: Value | None = None,
        doc: str | None = None,
    ) -> None:
        if not isinstance(name, str):
            raise TypeError(f"Field name must be str, got {type(name).__name__}")
        self._name = name
        self.dtype = dtype
        self.nullable = nullable
        self.default = default
        self.doc = doc

    @property
    def name(self) -> str:
        return self._name

    def with_name(self, name: str) -> Field:
        """Return a copy of this field under another name."""
        clone = copy.copy(self)
        clone._name = name
        return clone

    def __repr__(self) -> str:
        null = ", nullable" if self.nullable else ""
        return f"Field({self._name!r}, {self.dtype.as_str()}{null})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Field):
            return NotImplemented
        return (
            self._name == other._name
            and self.dtype is other.dtype
            and self.nullable == other.nullable
            and self.default == other.default
            and self.doc == other.doc
        )

    __hash__ = None  # type: ignore[assignment]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self._name,
            "dtype": self.dtype.as_str(),
            "nullable": self.nullable,
            "default": self.default.to_dict() if self.default is not None else None,
            "doc": self.doc,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Field:
        default = data.get("default")
        return cls(
            data["name"],
            DataType.from_name(data.get("dtype", "any")),
            nullable=data.get("nullable", True),
            default=Value.from_dict(default) if default is not None else None,
            doc=data.get("doc"),
        )


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


class Schema:
    """Ordered, name-indexed collection of fields."""

    __slots__ = ("name", "doc", "_fields", "_index")

    def __init__(
        self,
        fields: Iterable[Field | str] = (),
        *,
        name: str | None = None,
        doc: str | None = None,
    ) -> None:
        self.name = name
        self.doc = doc
        self._fields: list[Field] = []
        self._index: dict[str, int] = {}
        for field in fields:
            if isinstance(field, str):
                self.add_field(field)
            else:
                self.push_field(field)

    @classmethod
    def with_fields(cls, fields: Iterable[Field | str]) -> Schema:
        return cls(fields)

    def copy(self) -> Schema:
        """Deep enough copy: fields are cloned, values are immutable."""
        return Schema(
            [copy.copy(field) for field in self._fields], name=self.name, doc=self.doc
        )

    # --- Mutation ---

    def add_field(self, name: str) -> int:
        """Append a weakly typed field and return its position."""
        return self.push_field(Field(name))

    def push_field(self, field: Field) -> int:
        """Append ``field`` and return its position.

        Raises :class:`DuplicateColumnName` if the name is taken.
        """
        if field.name in self._index:
            raise DuplicateColumnName(field.name)
        position = len(self._fields)
        self._fields.append(field)
        self._index[field.name] = position
        return position

    def rename_field(self, old: str, new: str) -> str | None:
        """Rename a field in place.

        Returns the new name, or ``None`` when ``old`` does not exist.
        Raises :class:`DuplicateColumnName` if ``new`` belongs to another field.
        """
        position = self._index.get(old)
        if position is None:
            return None
        if new == old:
            return new
        if new in self._index:
            raise DuplicateColumnName(new)
        self._fields[position] = self._fields[position].with_name(new)
        del self._index[old]
        self._index[new] = position
        return new

    def remove(self, name: str) -> Field | None:
        """Remove a field by name and return it, or ``None`` if it does not exist."""
        position = self._index.get(name)
        if position is None:
            return None
        return self.remove_at(position)

    def remove_at(self, position: int) -> Field:
        """Remove the field at ``position`` and return it."""
        if not 0 <= position < len(self._fields):
            raise IndexOutOfBounds(position, len(self._fields))
        field = self._fields.pop(position)
        self._reindex()
        return field

    def clear(self) -> None:
        self._fields.clear()
        self._index.clear()

    def _reindex(self) -> None:
        self._index = {field.name: i for i, field in enumerate(self._fields)}

    # --- Lookup ---

    def get_field(self, name: str) -> Field | None:
        """Return a copy of the named field, or ``None``.

        The copy can be inspected freely; use ``get_field_mut`` to change the
        field held by the schema.
        """
        position = self._index.get(name)
        return copy.copy(self._fields[position]) if position is not None else None

    def get_field_mut(self, name: str) -> Field | None:
        """Return the named field itself, for in-place changes to its dtype,
        nullability, default or doc. Its name stays read-only."""
        position = self._index.get(name)
        return self._fields[position] if position is not None else None

    def get_field_full(self, name: str) -> tuple[int, Field] | None:
        """Return ``(position, field)`` for the named field, or ``None``."""
        position = self._index.get(name)
        if position is None:
            return None
        return position, self._fields[position]

    def field_at(self, position: int) -> Field:
        if not 0 <= position < len(self._fields):
            raise IndexOutOfBounds(position, len(self._fields))
        return self._fields[position]

    def find_index(self, name: str) -> int | None:
        return self._index.get(name)

    def field_exists(self, name: str) -> bool:
        return name in self._index

    def field_names(self) -> list[str]:
        """Names in position order."""
        return [field.name for field in self._fields]

    def dtypes(self) -> list[DataType]:
        return [field.dtype for field in self._fields]

    def fields(self) -> list[Field]:
        return list(self._fields)

    def is_weak(self) -> bool:
        """True if any field is still typed ``ANY``."""
        return any(field.dtype is DataType.ANY for field in self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[Field]:
        return iter(self._fields)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schema):
            return NotImplemented
        return self._fields == other._fields

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        label = self.name or "Schema"
        if not self._fields:
            return label
        cols = ", ".join(f"{f.name}: {f.dtype.as_str()}" for f in self._fields)
        return f"{label}({cols})"

    def _repr_html_(self) -> str:
        label = self.name or "Schema"
        if not self._fields:
            return f"<b>{label}</b>"
        rows = "".join(
            f"<tr><td>{f.name}</td><td>{f.dtype.as_str()}</td>"
            f"<td>{'yes' if f.nullable else 'no'}</td></tr>"
            for f in self._fields
        )
        return (
            f"<b>{label}</b><table><tr><th>Column</th><th>Type</th><th>Nullable</th></tr>"
            f"{rows}</table>"
        )

    # --- Serialization ---

    def to_dict(self) -> dict[str, Any]:
        """Serialize as the field list in position order."""
        return {
            "name": self.name,
            "doc": self.doc,
            "fields": [field.to_dict() for field in self._fields],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Schema:
        return cls(
            [Field.from_dict(f) for f in data.get("fields", [])],
            name=data.get("name"),
            doc=data.get("doc"),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: str) -> Schema:
        return cls.from_dict(json.loads(text))
