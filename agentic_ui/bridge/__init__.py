"""Agent-component bridge.

The bridge lets independent UI components expose themselves to a
natural-language agent:

- ``capabilities``: the registry of actions and readables, with
  disposer-based registration lifecycle.
- ``readable``: aggregation of readables into the agent's context document.
- ``dispatch``: validation and execution of agent-issued action invocations.
- ``components``: the component base class and the catalog widgets built on it.
"""

from .capabilities import (
    ActionDescriptor,
    CapabilityKind,
    CapabilityRegistry,
    ParameterSpec,
    ParameterType,
    ReadableEntry,
)
from .dispatch import DispatchExecutor, InvocationResult
from .readable import ReadableAggregator, ReadableSnapshotItem

__all__ = [
    "ActionDescriptor",
    "CapabilityKind",
    "CapabilityRegistry",
    "DispatchExecutor",
    "InvocationResult",
    "ParameterSpec",
    "ParameterType",
    "ReadableAggregator",
    "ReadableEntry",
    "ReadableSnapshotItem",
]
