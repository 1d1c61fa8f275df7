"""Draft field store for the listing wizard."""

import copy
import math
from typing import Any, Callable, Iterable, Optional

from src.models.property_schema import FieldKind, FieldSpec, PROPERTY_FIELDS
from src.utils.errors import FieldTypeError, UnknownFieldError

ChangeCallback = Callable[[str], None]


def _coerce_number(path: str, value: Any):
    """Accept ints, floats and numeric strings; blank clears the field."""
    if isinstance(value, bool):
        raise FieldTypeError(path, "number", value)
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            raise FieldTypeError(path, "number", value)
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return ""
        try:
            number = float(text)
        except ValueError:
            raise FieldTypeError(path, "number", value)
        if not math.isfinite(number):
            raise FieldTypeError(path, "number", value)
        return int(number) if number.is_integer() else number
    raise FieldTypeError(path, "number", value)


def _coerce_text(path: str, value: Any) -> str:
    if not isinstance(value, str):
        raise FieldTypeError(path, "text", value)
    return value


def _coerce_list(path: str, value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        raise FieldTypeError(path, "list of text", value)
    for item in value:
        if not isinstance(item, str):
            raise FieldTypeError(path, "list of text", value)
    return list(value)


def _dedupe(items: Iterable[str]) -> list[str]:
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


class FieldStore:
    """Ordered mapping from field path to value over a fixed schema.

    Every field always holds a value; absence is the field's explicit empty
    value. Mutations go through ``set`` and ``toggle``; subscribers are told
    which path changed after each mutation.
    """

    def __init__(
        self,
        values: Optional[dict[str, Any]] = None,
        schema: Iterable[FieldSpec] = PROPERTY_FIELDS,
    ):
        self._schema: dict[str, FieldSpec] = {}
        for spec in schema:
            if spec.path in self._schema:
                raise ValueError(f"Duplicate field in schema: {spec.path}")
            self._schema[spec.path] = spec
        self._groups = self._collect_groups()
        self._values: dict[str, Any] = {
            path: copy.deepcopy(spec.default) for path, spec in self._schema.items()
        }
        self._subscribers: list[ChangeCallback] = []

        for path, value in self._flatten(values or {}).items():
            self._assign(path, value)

    def _collect_groups(self) -> set[str]:
        groups = set()
        for path in self._schema:
            parts = path.split(".")
            for i in range(1, len(parts)):
                groups.add(".".join(parts[:i]))
        clash = groups & set(self._schema)
        if clash:
            raise ValueError(f"Schema paths used both as field and group: {sorted(clash)}")
        return groups

    def _flatten(self, values: dict[str, Any], prefix: str = "") -> dict[str, Any]:
        """Flatten nested group dicts into dotted paths."""
        flat = {}
        for key, value in values.items():
            path = f"{prefix}{key}"
            if path in self._groups:
                if not isinstance(value, dict):
                    raise FieldTypeError(path, "object", value)
                flat.update(self._flatten(value, prefix=f"{path}."))
            else:
                flat[path] = value
        return flat

    @property
    def paths(self) -> list[str]:
        return list(self._schema)

    def spec(self, path: str) -> FieldSpec:
        """Return the schema entry for a field path."""
        try:
            return self._schema[path]
        except KeyError:
            raise UnknownFieldError(path)

    def get(self, path: str) -> Any:
        """Return a copy of a field value, or the nested dict for a group path."""
        if path in self._schema:
            return copy.deepcopy(self._values[path])
        if path in self._groups:
            prefix = f"{path}."
            group = {}
            for field_path in self._schema:
                if field_path.startswith(prefix):
                    _nest(group, field_path[len(prefix):], copy.deepcopy(self._values[field_path]))
            return group
        raise UnknownFieldError(path)

    def get_all(self) -> dict[str, Any]:
        """Deep-copied nested snapshot of every field."""
        snapshot: dict[str, Any] = {}
        for path, value in self._values.items():
            _nest(snapshot, path, copy.deepcopy(value))
        return snapshot

    snapshot = get_all

    def set(self, path: str, value: Any) -> None:
        """Set a field (or every child of a group from a dict) and notify subscribers.

        For toggle lists a scalar value toggles membership; a list replaces the
        selection.
        """
        if path in self._groups:
            if not isinstance(value, dict):
                raise FieldTypeError(path, "object", value)
            changed = []
            for child_path, child_value in self._flatten(value, prefix=f"{path}.").items():
                self._assign(child_path, child_value)
                changed.append(child_path)
            for child_path in changed:
                self._notify(child_path)
            return

        spec = self.spec(path)
        if spec.kind == FieldKind.TOGGLE_LIST and isinstance(value, str):
            self.toggle(path, value)
            return
        self._assign(path, value)
        self._notify(path)

    def toggle(self, path: str, value: str) -> None:
        """Add value to a toggle list if absent, remove it if present."""
        spec = self.spec(path)
        if spec.kind != FieldKind.TOGGLE_LIST:
            raise FieldTypeError(path, "toggle list", value)
        if not isinstance(value, str):
            raise FieldTypeError(path, "text item", value)
        current = self._values[path]
        if value in current:
            self._values[path] = [item for item in current if item != value]
        else:
            self._values[path] = current + [value]
        self._notify(path)

    def _assign(self, path: str, value: Any) -> None:
        """Validate and store a value without notifying subscribers."""
        spec = self.spec(path)
        if spec.kind == FieldKind.TEXT:
            self._values[path] = _coerce_text(path, value)
        elif spec.kind == FieldKind.NUMBER:
            self._values[path] = _coerce_number(path, value)
        elif spec.kind == FieldKind.TOGGLE_LIST:
            self._values[path] = _dedupe(_coerce_list(path, value))
        else:
            self._values[path] = _coerce_list(path, value)

    def write_derived(self, path: str, value: Any) -> None:
        """Store a computed value. Subscribers are not notified, so derivations cannot chain."""
        self._assign(path, value)

    def subscribe(self, callback: ChangeCallback) -> None:
        """Register a callback invoked with the changed path after each mutation."""
        self._subscribers.append(callback)

    def _notify(self, path: str) -> None:
        for callback in list(self._subscribers):
            callback(path)

    @classmethod
    def from_snapshot(cls, data: dict[str, Any]) -> "FieldStore":
        """Rebuild a store from ``get_all()`` output (or any nested subset of it)."""
        return cls(values=data)

    def __contains__(self, path: str) -> bool:
        return path in self._schema

    def __repr__(self) -> str:
        return f"FieldStore(fields={len(self._schema)})"


def _nest(target: dict, path: str, value: Any) -> None:
    parts = path.split(".")
    node = target
    for part in parts[:-1]:
        node = node.setdefault(part, {})
    node[parts[-1]] = value
