"""Bridge components.

Agent-facing halves of catalog widgets. Each component mounts into a
``CapabilityRegistry``, publishes readables and registers actions, and
removes all of them when it unmounts.
"""

from .base import BridgeComponent
from .catalog import CATALOG, CatalogDiscovery, CatalogEntry, SmartRegistry
from .data_grid import CopilotTable, SmartDataGrid

__all__ = [
    "BridgeComponent",
    "CATALOG",
    "CatalogDiscovery",
    "CatalogEntry",
    "CopilotTable",
    "SmartDataGrid",
    "SmartRegistry",
]
