"""Capability registry and capability data models.

A *capability* is what a mounted UI component exposes to the agent.

- Actions are named operations with a declared parameter schema and a handler.
- Readables are described snapshots of component state.
- Components register both on mount and dispose them on unmount; the
  registry hands out a ``Disposer`` per registration.

This package exports:

- ``ActionDescriptor``/``ParameterSpec``/``ParameterType``: action contract.
- ``ReadableEntry``: readable contribution.
- ``CapabilityRegistry``: the live table, with ``Disposer`` and
  ``RegistrationScope`` for lifecycle management.
"""

from .base import (
    ActionDescriptor,
    ActionHandler,
    CapabilityKind,
    ParameterSpec,
    ParameterType,
    ReadableEntry,
    build_tool_schema,
    coerce_result_text,
)
from .registry import CapabilityRegistry, Disposer, RegistrationScope

__all__ = [
    "ActionDescriptor",
    "ActionHandler",
    "CapabilityKind",
    "CapabilityRegistry",
    "Disposer",
    "ParameterSpec",
    "ParameterType",
    "ReadableEntry",
    "RegistrationScope",
    "build_tool_schema",
    "coerce_result_text",
]
