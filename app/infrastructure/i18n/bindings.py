"""Live resolutions that re-publish their text when bound params change.

A LiveResolution owns an explicit subscription table keyed by
(source identity, property path). Changes arriving inside one update
cycle batch are coalesced into a single re-resolution computed from the
batch's final values, and a new value is delivered only when the text
actually changed.
"""

from threading import RLock
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from core.logging import get_module_logger
from infrastructure.i18n.exceptions import TranslationConfigError
from infrastructure.i18n.models import ResolvedOutput
from infrastructure.i18n.observable import (
    BindingDescriptor,
    PropertyObserver,
    Unsubscribe,
    UpdateCycle,
    bind,
    update_cycle,
)
from infrastructure.i18n.translator import Translator

logger = get_module_logger()

OnChange = Callable[[str], None]
BindingKey = Tuple[int, str]

BINDING_SUFFIX = "Binding"


def parse_binding_params(
    params: Mapping[str, Any],
    roots: Mapping[str, Any],
    suffix: str = BINDING_SUFFIX,
) -> Dict[str, Any]:
    """Turn ``<name>Binding="root.path"`` params into binding descriptors.

    Args:
        params: Raw params, e.g. {"countBinding": "TestNamespace.count"}.
        roots: Objects addressable by the first path segment, e.g.
            {"TestNamespace": namespace, "view": view}.
        suffix: Param name suffix marking a path binding.

    Returns:
        Params with bindings keyed by their bare name ({"count": BindingDescriptor}).

    Raises:
        TranslationConfigError: If a binding path is malformed or names an
            unknown root.
    """
    result: Dict[str, Any] = {}
    for name, value in params.items():
        if not (name.endswith(suffix) and len(name) > len(suffix)):
            result[name] = value
            continue

        param_name = name[: -len(suffix)]
        if isinstance(value, BindingDescriptor):
            result[param_name] = value
            continue

        root_name, _, property_path = str(value).strip().partition(".")
        if not root_name or not property_path:
            raise TranslationConfigError(
                f"Binding path for '{param_name}' must be 'root.property': {value!r}"
            )
        if root_name not in roots:
            raise TranslationConfigError(
                f"Unknown binding root '{root_name}' for '{param_name}'"
            )
        result[param_name] = bind(roots[root_name], property_path)
    return result


class LiveResolution:
    """A resolution kept current with its bound params.

    Created by BindingAdapter.establish(); the instance is the subscription
    handle passed to teardown(). Bound source objects are held by strong
    reference until teardown(), so a resolution that is never torn down keeps
    its hosts alive.

    Attributes:
        key: Translation key being resolved.
        output: Last delivered ResolvedOutput, or None before establishment.
    """

    def __init__(
        self,
        translator: Translator,
        key: str,
        params: Optional[Mapping[str, Any]],
        on_change: OnChange,
        observer: Optional[PropertyObserver] = None,
        cycle: Optional[UpdateCycle] = None,
        locale: Optional[str] = None,
    ):
        self.key = key
        self.locale = locale
        self.output: Optional[ResolvedOutput] = None
        self._translator = translator
        self._observer = observer or translator.observer
        self._cycle = cycle or update_cycle
        self._on_change: Optional[OnChange] = on_change
        self._lock = RLock()
        self._torn_down = False

        self._static: Dict[str, Any] = {}
        self._bindings: Dict[str, BindingDescriptor] = {}
        for name, value in (params or {}).items():
            if isinstance(value, BindingDescriptor):
                self._bindings[name] = value
            else:
                self._static[name] = value

        self._values: Dict[str, Any] = {}
        self._subscriptions: Dict[BindingKey, Unsubscribe] = {}

    @property
    def active(self) -> bool:
        return not self._torn_down and self.output is not None

    @property
    def text(self) -> Optional[str]:
        return self.output.text if self.output is not None else None

    @property
    def subscription_count(self) -> int:
        return len(self._subscriptions)

    def establish(self) -> "LiveResolution":
        """Deliver the current value and make sure every binding is observed.

        Calling this again (e.g. on re-render) re-delivers the current value
        and keeps exactly one observer per (object, property path).

        Raises:
            RuntimeError: If the resolution was torn down.
            TranslationConfigError: If the initial resolution is misconfigured.
        """
        with self._lock:
            if self._torn_down:
                raise RuntimeError(f"Live resolution for '{self.key}' was torn down")

            for name, binding in self._bindings.items():
                self._values[name] = binding.current_value(self._observer)

            output = self._compute()
            self._deliver(output)
            self._subscribe_all()

        logger.debug(
            "live_resolution_established",
            key=self.key,
            binding_count=len(self._bindings),
            subscription_count=len(self._subscriptions),
        )
        return self

    def teardown(self) -> None:
        """Stop observing. No delivery starts after this returns."""
        with self._lock:
            if self._torn_down:
                return
            self._torn_down = True
            subscriptions = list(self._subscriptions.values())
            self._subscriptions.clear()
            self._bindings.clear()
            self._values.clear()
            self._on_change = None

            for unsubscribe in subscriptions:
                try:
                    unsubscribe()
                except Exception as e:
                    logger.exception(
                        "live_resolution_unsubscribe_failed",
                        key=self.key,
                        error=str(e),
                    )

        logger.debug(
            "live_resolution_torn_down",
            key=self.key,
            released_subscriptions=len(subscriptions),
        )

    def refresh(self) -> None:
        """Re-resolve from current values, e.g. after the dictionary was swapped."""
        if self._torn_down:
            return
        self._cycle.schedule(self, self._refresh)

    def _binding_groups(self) -> Dict[BindingKey, List[str]]:
        groups: Dict[BindingKey, List[str]] = {}
        for name, binding in self._bindings.items():
            groups.setdefault(binding.identity, []).append(name)
        return groups

    def _subscribe_all(self) -> None:
        for identity, names in self._binding_groups().items():
            if identity in self._subscriptions:
                continue
            binding = self._bindings[names[0]]
            self._subscriptions[identity] = self._observer.subscribe(
                binding.source,
                binding.property_path,
                self._make_callback(identity),
            )

    def _make_callback(self, identity: BindingKey) -> Callable[[Any], None]:
        def _on_value(value: Any) -> None:
            self._on_value(identity, value)

        return _on_value

    def _on_value(self, identity: BindingKey, value: Any) -> None:
        with self._lock:
            if self._torn_down:
                return
            changed = False
            for name, binding in self._bindings.items():
                if binding.identity != identity:
                    continue
                if name in self._values:
                    current = self._values[name]
                    if current is value or current == value:
                        continue
                self._values[name] = value
                changed = True
            if not changed or self.output is None:
                return
        self._cycle.schedule(self, self._refresh)

    def _compute(self) -> ResolvedOutput:
        params = dict(self._static)
        params.update(self._values)
        return self._translator.resolve_output(self.key, params, locale=self.locale)

    def _refresh(self) -> None:
        with self._lock:
            if self._torn_down:
                return
            try:
                output = self._compute()
            except Exception as e:
                logger.exception(
                    "live_resolution_failed",
                    key=self.key,
                    error=str(e),
                )
                return
            if self.output is not None and output.text == self.output.text:
                self.output = output
                return
            self._deliver(output)

    def _deliver(self, output: ResolvedOutput) -> None:
        self.output = output
        if self._on_change is None:
            return
        try:
            self._on_change(output.text)
        except Exception as e:
            logger.exception(
                "live_resolution_callback_failed",
                key=self.key,
                error=str(e),
            )


class BindingAdapter:
    """Creates and tears down live resolutions over a Translator.

    Usage:
        adapter = BindingAdapter(translator)
        handle = adapter.establish(
            "bars.all", {"count": bind(namespace, "count")}, on_change=render
        )
        ...
        adapter.teardown(handle)
    """

    def __init__(
        self,
        translator: Translator,
        observer: Optional[PropertyObserver] = None,
        cycle: Optional[UpdateCycle] = None,
    ):
        self.translator = translator
        self.observer = observer or translator.observer
        self.cycle = cycle or update_cycle

    def establish(
        self,
        key: str,
        params: Optional[Mapping[str, Any]],
        on_change: OnChange,
        locale: Optional[str] = None,
    ) -> LiveResolution:
        """Start a live resolution and deliver its initial value.

        Raises:
            TranslationConfigError: If the initial resolution is misconfigured.
        """
        live = LiveResolution(
            self.translator,
            key,
            params,
            on_change,
            observer=self.observer,
            cycle=self.cycle,
            locale=locale,
        )
        return live.establish()

    def teardown(self, handle: LiveResolution) -> None:
        handle.teardown()
