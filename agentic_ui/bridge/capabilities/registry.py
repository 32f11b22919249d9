from __future__ import annotations

"""Capability registry.

The registry is the live table of currently registered actions and readables.
Components register on mount and dispose on unmount; the dispatch executor and
the readable aggregator read from it on every agent turn.

A registry is an explicit object owned by the application context. Nothing in
this package keeps a module-level registry, so independent registries can
coexist (one per application, one per test).
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Union
from uuid import uuid4

from agentic_ui.core.logging_config import get_logger

from .base import ActionDescriptor, CapabilityKind, ReadableEntry

logger = get_logger(__name__)

Descriptor = Union[ActionDescriptor, ReadableEntry]


@dataclass(frozen=True)
class _Slot:
    descriptor: Descriptor
    owner_id: Optional[str]
    token: str = field(default_factory=lambda: uuid4().hex)


class Disposer:
    """Removes exactly the registration that produced it.

    Calling a disposer more than once is a no-op, and so is calling it after a
    newer registration replaced the entry under the same id.
    """

    def __init__(self, registry: "CapabilityRegistry", kind: CapabilityKind, entry_id: str, token: str) -> None:
        self._registry = registry
        self._kind = kind
        self._entry_id = entry_id
        self._token = token
        self._disposed = False

    @property
    def kind(self) -> CapabilityKind:
        return self._kind

    @property
    def entry_id(self) -> str:
        return self._entry_id

    @property
    def disposed(self) -> bool:
        return self._disposed

    def __call__(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._registry.unregister(self._kind, self._entry_id, registration=self._token)

    def __enter__(self) -> "Disposer":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self()

    def __repr__(self) -> str:
        return f"Disposer(kind={self._kind.value}, id={self._entry_id}, disposed={self._disposed})"


class CapabilityRegistry:
    """
    In-memory table of actions and readables keyed by id.

    Actions are keyed by their ``name``; readables by a caller-chosen id.
    Both namespaces keep insertion order.

    Notes:
        - ``register`` replaces any existing entry under the same id (last
          writer wins) and keeps the entry's original position.
        - ``list`` returns a snapshot copy; mutating it never touches the registry.
    """

    def __init__(self) -> None:
        """Initialize an empty capability registry."""
        self._slots: Dict[CapabilityKind, Dict[str, _Slot]] = {kind: {} for kind in CapabilityKind}

    def register(
        self,
        kind: CapabilityKind,
        entry_id: str,
        descriptor: Descriptor,
        owner: Optional[str] = None,
    ) -> Disposer:
        """
        Insert or replace a capability.

        Args:
            kind: Which namespace the entry belongs to.
            entry_id: Action name or readable id.
            descriptor: ``ActionDescriptor`` for actions, ``ReadableEntry`` for readables.
            owner: Lifecycle token of the owning component.

        Returns:
            A ``Disposer`` that removes this registration.

        Raises:
            TypeError: If the descriptor does not match ``kind``.
            ValueError: If an action is registered under an id other than its name.
        """
        kind = CapabilityKind(kind)
        if kind == CapabilityKind.ACTION:
            if not isinstance(descriptor, ActionDescriptor):
                raise TypeError(f"Action '{entry_id}' must be registered with an ActionDescriptor")
            if descriptor.name != entry_id:
                raise ValueError(f"Action id '{entry_id}' does not match descriptor name '{descriptor.name}'")
        elif not isinstance(descriptor, ReadableEntry):
            raise TypeError(f"Readable '{entry_id}' must be registered with a ReadableEntry")

        table = self._slots[kind]
        previous = table.get(entry_id)
        if previous is not None and previous.owner_id != owner:
            logger.debug(f"{kind.value} '{entry_id}' owned by {previous.owner_id} replaced by {owner}")

        slot = _Slot(descriptor=descriptor, owner_id=owner)
        table[entry_id] = slot
        return Disposer(self, kind, entry_id, slot.token)

    def register_action(self, descriptor: ActionDescriptor, owner: Optional[str] = None) -> Disposer:
        return self.register(CapabilityKind.ACTION, descriptor.name, descriptor, owner=owner)

    def register_readable(self, entry_id: str, entry: ReadableEntry, owner: Optional[str] = None) -> Disposer:
        if owner is not None and entry.owner_id != owner:
            entry = entry.model_copy(update={"owner_id": owner})
        return self.register(CapabilityKind.READABLE, entry_id, entry, owner=owner)

    def unregister(self, kind: CapabilityKind, entry_id: str, registration: Optional[str] = None) -> bool:
        """
        Remove a capability.

        Args:
            kind: Namespace of the entry.
            entry_id: Action name or readable id.
            registration: Token of the registration to remove. When given, the
                entry is only removed if it still belongs to that registration.

        Returns:
            True if an entry was removed, False otherwise.
        """
        table = self._slots[CapabilityKind(kind)]
        slot = table.get(entry_id)
        if slot is None:
            return False
        if registration is not None and slot.token != registration:
            return False
        del table[entry_id]
        return True

    def list(self, kind: CapabilityKind) -> Dict[str, Descriptor]:
        """Return a snapshot of the entries of ``kind`` in insertion order."""
        return {entry_id: slot.descriptor for entry_id, slot in self._slots[CapabilityKind(kind)].items()}

    def get_action(self, name: str) -> Optional[ActionDescriptor]:
        slot = self._slots[CapabilityKind.ACTION].get(name)
        return slot.descriptor if slot is not None else None  # type: ignore[return-value]

    def owner_of(self, kind: CapabilityKind, entry_id: str) -> Optional[str]:
        slot = self._slots[CapabilityKind(kind)].get(entry_id)
        return slot.owner_id if slot is not None else None

    def is_current(self, kind: CapabilityKind, entry_id: str, descriptor: Descriptor) -> bool:
        """Check whether ``descriptor`` is still the live entry under ``entry_id``."""
        slot = self._slots[CapabilityKind(kind)].get(entry_id)
        return slot is not None and slot.descriptor is descriptor

    def scope(self, owner: Optional[str] = None) -> "RegistrationScope":
        """Open a scope whose registrations are all disposed when it closes."""
        return RegistrationScope(self, owner or uuid4().hex)

    def __len__(self) -> int:
        return sum(len(table) for table in self._slots.values())

    def __repr__(self) -> str:
        return (
            f"CapabilityRegistry(actions={len(self._slots[CapabilityKind.ACTION])}, "
            f"readables={len(self._slots[CapabilityKind.READABLE])})"
        )


class RegistrationScope:
    """Scoped acquisition of registrations for one owner.

    Every disposer created through the scope runs when the scope closes, on
    every exit path of a ``with`` block. Registering the same id twice through
    a scope keeps only the newest disposer for it.
    """

    def __init__(self, registry: CapabilityRegistry, owner_id: str) -> None:
        self._registry = registry
        self._owner_id = owner_id
        self._disposers: Dict[Tuple[CapabilityKind, str], Disposer] = {}
        self._closed = False

    @property
    def owner_id(self) -> str:
        return self._owner_id

    @property
    def closed(self) -> bool:
        return self._closed

    def register_action(self, descriptor: ActionDescriptor) -> Disposer:
        self._ensure_open()
        return self._track(self._registry.register_action(descriptor, owner=self._owner_id))

    def register_readable(self, entry_id: str, entry: ReadableEntry) -> Disposer:
        self._ensure_open()
        return self._track(self._registry.register_readable(entry_id, entry, owner=self._owner_id))

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError(f"Registration scope {self._owner_id} is already closed")

    def _track(self, disposer: Disposer) -> Disposer:
        self._disposers[(disposer.kind, disposer.entry_id)] = disposer
        return disposer

    def close(self) -> None:
        """Dispose every registration of the scope, newest first."""
        if self._closed:
            return
        self._closed = True
        for disposer in reversed(list(self._disposers.values())):
            disposer()
        self._disposers.clear()

    def __enter__(self) -> "RegistrationScope":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
