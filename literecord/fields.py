"""
Field state tracking for records.

A record is an open-ended, ordered bag of named fields. Whether a field takes
part in generated SQL as an explicit value is decided by one predicate: the
field is set *and* its value is not empty. By default a field set to ``None``
or ``""`` counts as unset; record types can opt out of that rule and use
`is_set` / `clear` as the only source of truth.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, Mapping, Tuple, Union

FieldData = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]


def is_empty(value: Any) -> bool:
    """``None`` and empty strings are the empty values of a field."""
    if value is None:
        return True
    return isinstance(value, (str, bytes)) and len(value) == 0


class FieldState:
    """
    Ordered field name -> value container with attribute and item access.

    Names starting with an underscore are ordinary instance attributes and are
    never treated as fields. A field whose name is also an attribute of the
    class (`update`, `metadata`, `snapshot`...) is only reachable through item
    access: ``record["metadata"] = value``. Assigning it as an attribute raises
    AttributeError instead of storing a value that reads back as the method.
    """

    def __init__(self, data: FieldData | None = None, /, **fields: Any) -> None:
        object.__setattr__(self, "_values", {})
        if data:
            self.dump(data)
        if fields:
            self.dump(fields)

    def dump(self, data: FieldData) -> None:
        """Bulk assign: every key becomes a field, later keys win."""
        items = data.items() if isinstance(data, Mapping) else data
        for name, value in items:
            self._values[name] = value

    def is_set(self, field: str) -> bool:
        """Whether the field was assigned, regardless of its value."""
        return field in self._values

    def is_present(self, field: str, empty_as_unset: bool = True) -> bool:
        """Whether the field participates in SQL as an explicit value."""
        if field not in self._values:
            return False
        return not (empty_as_unset and is_empty(self._values[field]))

    def clear(self, field: str) -> None:
        """Unset a field. Clearing an unset field is a no-op."""
        self._values.pop(field, None)

    def snapshot(self, fields: Iterable[str], empty_as_unset: bool = True) -> Dict[str, Any]:
        """Present fields among `fields`, in the order of `fields`."""
        return {f: self._values[f] for f in fields if self.is_present(f, empty_as_unset)}

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    def field_names(self) -> Iterator[str]:
        return iter(list(self._values))

    def __getattr__(self, name: str) -> Any:
        values = self.__dict__.get("_values", {})
        if name in values:
            return values[name]
        raise AttributeError(f"'{type(self).__name__}' has no field '{name}'")

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
        elif hasattr(type(self), name):
            raise AttributeError(
                f"'{name}' is an attribute of {type(self).__name__}; "
                f"set the field with item access: record['{name}'] = ..."
            )
        else:
            self._values[name] = value

    def __delattr__(self, name: str) -> None:
        if name in self._values:
            del self._values[name]
        else:
            object.__delattr__(self, name)

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __setitem__(self, name: str, value: Any) -> None:
        self._values[name] = value

    def __delitem__(self, name: str) -> None:
        del self._values[name]

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._values == other._values  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._values!r})"


__all__ = ["FieldState", "FieldData", "is_empty"]
