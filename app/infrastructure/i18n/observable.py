"""Observable-property capability used by live resolutions.

The live binding adapter only needs two operations from its host:
subscribe to a named property of an object, and read the property's
current value. ``PropertyObserver`` is that contract. ``ObservableObject``
and ``AttributeObserver`` are a small in-process implementation of it, and
``UpdateCycle`` models the host's update batch so several property changes
can be applied before dependents recompute.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from threading import RLock, local
from typing import (
    Any,
    Callable,
    Dict,
    Generator,
    Hashable,
    List,
    Optional,
    Protocol,
    Tuple,
    runtime_checkable,
)

from core.logging import get_module_logger

logger = get_module_logger()

ChangeCallback = Callable[[Any], None]
Unsubscribe = Callable[[], None]


@runtime_checkable
class PropertyObserver(Protocol):
    """Capability to watch a property of a host object.

    ``subscribe`` must deliver the current value synchronously, then every
    subsequent value, until the returned handle is called.
    """

    def subscribe(
        self, source: Any, property_path: str, callback: ChangeCallback
    ) -> Unsubscribe: ...

    def get_current_value(self, source: Any, property_path: str) -> Any: ...


def get_path(source: Any, property_path: str) -> Any:
    """Read a dotted property path from an object or mapping.

    Missing attributes resolve to None.
    """
    value = source
    for segment in property_path.split("."):
        if value is None:
            return None
        if isinstance(value, ObservableObject):
            value = value.get(segment)
        elif isinstance(value, dict):
            value = value.get(segment)
        else:
            value = getattr(value, segment, None)
    return value


class UpdateCycle:
    """Batches deferred work triggered by property changes.

    Work scheduled while a batch is open runs once, after the outermost
    batch exits. Outside a batch, scheduled work runs immediately.

    Usage:
        cycle = UpdateCycle()
        with cycle.batch():
            counter.set("count", 4)
            counter.set("label", "apples")
        # dependents recompute once here
    """

    def __init__(self):
        self._state = local()

    def _pending(self) -> Dict[Hashable, Callable[[], None]]:
        pending = getattr(self._state, "pending", None)
        if pending is None:
            pending = {}
            self._state.pending = pending
        return pending

    @property
    def depth(self) -> int:
        return getattr(self._state, "depth", 0)

    @property
    def in_batch(self) -> bool:
        return self.depth > 0

    @contextmanager
    def batch(self) -> Generator["UpdateCycle", None, None]:
        self._state.depth = self.depth + 1
        try:
            yield self
        finally:
            self._state.depth -= 1
            if self._state.depth == 0:
                self.flush()

    def schedule(self, token: Hashable, work: Callable[[], None]) -> None:
        """Run ``work`` now, or once at the end of the open batch.

        Scheduling the same token twice in one batch keeps a single entry.
        """
        if not self.in_batch:
            work()
            return
        self._pending()[token] = work

    def flush(self) -> None:
        """Run all deferred work. Work scheduled while flushing also runs."""
        pending = self._pending()
        while pending:
            token = next(iter(pending))
            work = pending.pop(token)
            try:
                work()
            except Exception as e:
                logger.exception(
                    "update_cycle_work_failed",
                    token=repr(token),
                    error=str(e),
                )


update_cycle = UpdateCycle()


class ObservableObject:
    """Host object whose properties notify subscribers on change.

    Usage:
        counter = ObservableObject(count=3)
        unsubscribe = counter.observe("count", print)  # prints 3
        counter.set("count", 4)                         # prints 4
        unsubscribe()
    """

    def __init__(self, **properties: Any):
        self._lock = RLock()
        self._values: Dict[str, Any] = dict(properties)
        self._observers: Dict[str, List[Tuple[int, ChangeCallback]]] = {}
        self._next_token = 0

    def get(self, name: str) -> Any:
        return self._values.get(name)

    def set(self, name: str, value: Any) -> None:
        """Set a property and notify its observers with the new value."""
        with self._lock:
            previous = self._values.get(name, _UNSET)
            self._values[name] = value
            observers = list(self._observers.get(name, []))
        if previous is not _UNSET and previous == value:
            return
        for _token, callback in observers:
            callback(value)

    def observe(self, name: str, callback: ChangeCallback) -> Unsubscribe:
        """Register a callback, deliver the current value, return an unsubscribe handle."""
        with self._lock:
            token = self._next_token
            self._next_token += 1
            self._observers.setdefault(name, []).append((token, callback))
            current = self._values.get(name)

        def _unsubscribe() -> None:
            with self._lock:
                remaining = [
                    entry for entry in self._observers.get(name, []) if entry[0] != token
                ]
                if remaining:
                    self._observers[name] = remaining
                else:
                    self._observers.pop(name, None)

        callback(current)
        return _unsubscribe

    def observer_count(self, name: Optional[str] = None) -> int:
        with self._lock:
            if name is not None:
                return len(self._observers.get(name, []))
            return sum(len(entries) for entries in self._observers.values())


class _Unset:
    def __repr__(self) -> str:
        return "<unset>"


_UNSET = _Unset()


class AttributeObserver:
    """PropertyObserver over ObservableObject hosts.

    The first segment of a dotted path must name an observable property on
    the source; remaining segments are read from the property's value.
    """

    def get_current_value(self, source: Any, property_path: str) -> Any:
        return get_path(source, property_path)

    def subscribe(
        self, source: Any, property_path: str, callback: ChangeCallback
    ) -> Unsubscribe:
        if not isinstance(source, ObservableObject):
            raise TypeError(
                f"Cannot observe {type(source).__name__}; expected ObservableObject"
            )
        head, _, rest = property_path.partition(".")
        if not rest:
            return source.observe(head, callback)
        return source.observe(head, lambda value: callback(get_path(value, rest)))


@dataclass(frozen=True, eq=False)
class BindingDescriptor:
    """Declares that a param takes its value from a host object's property.

    Attributes:
        source: Host object holding the property.
        property_path: Dotted property path on the source (e.g. "count").
    """

    source: Any
    property_path: str

    @property
    def identity(self) -> Tuple[int, str]:
        return (id(self.source), self.property_path)

    def current_value(self, observer: PropertyObserver) -> Any:
        return observer.get_current_value(self.source, self.property_path)


def bind(source: Any, property_path: str) -> BindingDescriptor:
    """Create a binding descriptor for use as a param value.

    Example:
        translator.resolve("bars.all", {"count": bind(namespace, "count")})
    """
    return BindingDescriptor(source=source, property_path=property_path)
