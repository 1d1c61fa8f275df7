"""Derivation rules that recompute draft fields from other fields."""

from typing import Any, Callable, Iterable, Optional

from src.models.catalog import is_day_picnic
from src.utils.errors import DerivationConfigError
from src.utils.logging import get_structured_logger
from src.wizard.field_store import FieldStore

logger = get_structured_logger(__name__)

# Sentinel returned by a compute function that has nothing to write
NO_CHANGE = object()


class DerivationRule:
    """One-directional rule: when any trigger changes, recompute ``target``."""

    def __init__(self, name: str, triggers: Iterable[str], target: str, compute: Callable[[FieldStore], Any]):
        self.name = name
        self.triggers = frozenset(triggers)
        self.target = target
        self.compute = compute

    def apply(self, store: FieldStore) -> bool:
        """Write the computed value. Returns True when the target changed."""
        value = self.compute(store)
        if value is NO_CHANGE:
            return False
        if store.get(self.target) == value:
            return False
        store.write_derived(self.target, value)
        return True

    def __repr__(self) -> str:
        return f"DerivationRule({self.name!r}, target={self.target!r})"


def compute_max_guests(store: FieldStore) -> Any:
    """Room-based capacity, or the flat day picnic capacity; never both."""
    if is_day_picnic(store.get("property_type")):
        return store.get("day_picnic_capacity")

    rooms = store.get("rooms_count")
    per_room = store.get("capacity_per_room")
    if rooms == "" or per_room == "":
        return NO_CHANGE
    return rooms * per_room


def compose_address(store: FieldStore) -> str:
    parts = [store.get(path).strip() for path in ("area", "city", "state", "country")]
    return ", ".join(part for part in parts if part)


DEFAULT_RULES: tuple[DerivationRule, ...] = (
    DerivationRule(
        "max_guests",
        triggers=("rooms_count", "capacity_per_room", "day_picnic_capacity", "property_type"),
        target="max_guests",
        compute=compute_max_guests,
    ),
    DerivationRule(
        "address",
        triggers=("area", "city", "state", "country"),
        target="address",
        compute=compose_address,
    ),
)


class DerivationEngine:
    """Runs derivation rules synchronously after trigger fields change."""

    def __init__(self, rules: Iterable[DerivationRule] = DEFAULT_RULES):
        self.rules = tuple(rules)
        triggers = set()
        for rule in self.rules:
            triggers |= rule.triggers
        for rule in self.rules:
            if rule.target in triggers:
                raise DerivationConfigError(
                    f"Derived field {rule.target!r} of rule {rule.name!r} is also a trigger"
                )
        self._store: Optional[FieldStore] = None

    def bind(self, store: FieldStore) -> "DerivationEngine":
        """Subscribe to a store so rules run after every mutation."""
        if self._store is not None:
            raise DerivationConfigError("DerivationEngine is already bound to a store")
        for rule in self.rules:
            store.spec(rule.target)
            for trigger in rule.triggers:
                store.spec(trigger)
        self._store = store
        store.subscribe(self.on_change)
        return self

    def on_change(self, path: str) -> None:
        """Apply every rule triggered by ``path``."""
        if self._store is None:
            return
        for rule in self.rules:
            if path in rule.triggers and rule.apply(self._store):
                logger.debug(
                    "Derived field recomputed",
                    rule=rule.name,
                    trigger=path,
                    target=rule.target,
                )

    def recompute_all(self) -> None:
        """Apply each rule once regardless of what changed."""
        if self._store is None:
            return
        for rule in self.rules:
            rule.apply(self._store)
