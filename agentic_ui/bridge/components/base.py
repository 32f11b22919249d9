"""Base class for bridge components.

A bridge component is the agent-facing half of a UI widget: it owns some
state, publishes readables describing that state and registers actions that
let the agent change it. Mounting a component opens a ``RegistrationScope`` on
a registry; unmounting closes it, which removes every capability the
component registered.

Subclasses declare their capabilities in ``setup`` using ``use_readable`` and
``use_action``. Action handlers are bound methods or closures over the
component, so they always see current state. Readables are snapshots, so
``set_state`` re-publishes them immediately.
"""

from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple
from uuid import uuid4

from agentic_ui.bridge.capabilities import (
    ActionDescriptor,
    ActionHandler,
    CapabilityRegistry,
    Disposer,
    ParameterSpec,
    ReadableEntry,
    RegistrationScope,
)
from agentic_ui.core.logging_config import get_logger

logger = get_logger(__name__)


class BridgeComponent:
    """A component whose lifecycle drives capability registration.

    Attributes:
        component_name: Prefix used for the owner token and log lines
        state: Current component state
    """

    component_name: str = "component"

    def __init__(self, initial_state: Optional[Dict[str, Any]] = None) -> None:
        self.state: Dict[str, Any] = dict(initial_state or {})
        self._owner_id = f"{self.component_name}-{uuid4().hex[:8]}"
        self._scope: Optional[RegistrationScope] = None
        self._readables: Dict[str, Tuple[str, Callable[[], Any]]] = {}

    @property
    def owner_id(self) -> str:
        return self._owner_id

    @property
    def mounted(self) -> bool:
        return self._scope is not None and not self._scope.closed

    def setup(self) -> None:
        """Declare readables and actions. Called once per mount."""

    def mount(self, registry: CapabilityRegistry) -> "BridgeComponent":
        """
        Register the component's capabilities into ``registry``.

        Raises:
            RuntimeError: If the component is already mounted.
        """
        if self.mounted:
            raise RuntimeError(f"{self._owner_id} is already mounted")

        self._scope = registry.scope(self._owner_id)
        self._readables.clear()
        try:
            self.setup()
        except Exception:
            self.unmount()
            raise
        logger.debug(f"Mounted {self._owner_id}")
        return self

    def unmount(self) -> None:
        """Remove every capability this component registered. Safe to call twice."""
        if self._scope is None:
            return
        self._scope.close()
        self._scope = None
        logger.debug(f"Unmounted {self._owner_id}")

    @contextmanager
    def mounted_in(self, registry: CapabilityRegistry) -> Iterator["BridgeComponent"]:
        """Keep the component mounted for the duration of a ``with`` block."""
        self.mount(registry)
        try:
            yield self
        finally:
            self.unmount()

    def use_action(
        self,
        name: str,
        description: str,
        handler: ActionHandler,
        parameters: Sequence[ParameterSpec] = (),
    ) -> Disposer:
        """Register an action owned by this component."""
        descriptor = ActionDescriptor(
            name=name,
            description=description,
            parameters=list(parameters),
            handler=handler,
        )
        return self._require_scope().register_action(descriptor)

    def use_readable(self, readable_id: str, description: str, value: Callable[[], Any]) -> Disposer:
        """
        Publish a readable computed from component state.

        Args:
            readable_id: Id unique within this component.
            description: What the readable represents.
            value: Zero-argument callable producing the current snapshot.
        """
        self._readables[readable_id] = (description, value)
        return self._publish_readable(readable_id)

    def set_state(self, **changes: Any) -> None:
        """Update state and re-publish readables so the next agent turn sees it."""
        self.state.update(changes)
        if self.mounted:
            self.publish()

    def publish(self) -> List[Disposer]:
        return [self._publish_readable(readable_id) for readable_id in self._readables]

    def _publish_readable(self, readable_id: str) -> Disposer:
        description, value = self._readables[readable_id]
        entry = ReadableEntry(description=description, value=value(), owner_id=self._owner_id)
        return self._require_scope().register_readable(f"{self._owner_id}:{readable_id}", entry)

    def _require_scope(self) -> RegistrationScope:
        if self._scope is None or self._scope.closed:
            raise RuntimeError(f"{self._owner_id} is not mounted")
        return self._scope

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(owner_id={self._owner_id}, mounted={self.mounted})"
