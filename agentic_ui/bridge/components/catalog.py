"""Catalog components.

``CatalogDiscovery`` lets the agent search, open and compare entries of the
component catalog. ``SmartRegistry`` exposes the catalog view state (active
category, search query) and lets the agent filter it.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from agentic_ui.bridge.capabilities import ParameterSpec, ParameterType

from .base import BridgeComponent


class CatalogEntry(BaseModel):
    """Metadata describing one catalog component."""

    slug: str = Field(..., description="URL slug of the component")
    name: str = Field(..., description="Display name")
    description: str = Field(..., description="What the component does")
    category: str = Field(..., description="Catalog category id")
    tags: List[str] = Field(default_factory=list, description="Search tags")
    hooks: List[str] = Field(
        default_factory=lambda: ["useCopilotReadable", "useCopilotAction"],
        description="Agent hooks the component uses",
    )

    @property
    def url(self) -> str:
        return f"/components/{self.slug}"

    def matches(self, query: str) -> bool:
        q = query.lower()
        return (
            q in self.name.lower()
            or q in self.description.lower()
            or any(q in tag.lower() for tag in self.tags)
            or q in self.category
        )


CATALOG: List[CatalogEntry] = [
    CatalogEntry(
        slug="copilot-table",
        name="CopilotTable",
        description="A smart data grid that lets users sort, filter, and analyze data through natural language.",
        category="data",
        tags=["table", "data-grid", "sort", "filter", "analytics"],
    ),
    CatalogEntry(
        slug="copilot-form",
        name="CopilotForm",
        description="An intent-driven form that fills itself when users describe what they want.",
        category="forms",
        tags=["form", "input", "auto-fill", "intent", "settings"],
    ),
    CatalogEntry(
        slug="copilot-canvas",
        name="CopilotCanvas",
        description="A kanban board that responds to text commands to add, move and reorder tasks.",
        category="canvas",
        tags=["kanban", "board", "drag-drop", "tasks", "project"],
    ),
    CatalogEntry(
        slug="copilot-chart",
        name="CopilotChart",
        description="Data visualization with bar and line charts driven by natural language queries.",
        category="data",
        tags=["chart", "visualization", "bar-chart", "line-chart", "analytics"],
    ),
    CatalogEntry(
        slug="copilot-chat",
        name="CopilotChat",
        description="A custom chat interface with message bubbles, typing indicators and message management.",
        category="chat",
        tags=["chat", "messaging", "conversation", "messages", "communication"],
    ),
    CatalogEntry(
        slug="copilot-calendar",
        name="CopilotCalendar",
        description="A weekly calendar view with scheduling through natural language.",
        category="productivity",
        tags=["calendar", "schedule", "events", "planner", "time"],
    ),
    CatalogEntry(
        slug="copilot-search",
        name="CopilotSearch",
        description="Faceted search with filter chips and result sorting controlled by the agent.",
        category="data",
        tags=["search", "filter", "facets", "results", "catalog"],
    ),
    CatalogEntry(
        slug="research-agent",
        name="ResearchAgent",
        description="A multi-step research pipeline that gathers sources and synthesizes findings.",
        category="agentic",
        tags=["agent", "research", "pipeline", "multi-step", "synthesis"],
    ),
]

CATEGORIES: List[str] = ["all", "data", "forms", "canvas", "chat", "productivity", "agentic"]


def find_entry(catalog: List[CatalogEntry], slug: str) -> Optional[CatalogEntry]:
    return next((entry for entry in catalog if entry.slug == slug), None)


class CatalogDiscovery(BridgeComponent):
    """Catalog search and navigation for the agent."""

    component_name = "catalog-discovery"

    def __init__(self, catalog: Optional[List[CatalogEntry]] = None) -> None:
        super().__init__({"current_path": "/"})
        self.catalog = list(catalog if catalog is not None else CATALOG)

    def setup(self) -> None:
        self.use_readable(
            "catalog",
            "The complete catalog of agentic UI components available in this registry.",
            lambda: [{**entry.model_dump(), "url": entry.url} for entry in self.catalog],
        )
        self.use_action(
            "searchComponents",
            "Search the component catalog by keyword, category, or use case. Returns matching components.",
            self.search_components,
            [
                ParameterSpec(
                    name="query",
                    type=ParameterType.STRING,
                    description="Search query - can be a keyword, category, or use case description",
                ),
            ],
        )
        self.use_action(
            "viewComponent",
            "Navigate to a specific component's detail page to see a live demo and code.",
            self.view_component,
            [
                ParameterSpec(
                    name="slug",
                    type=ParameterType.STRING,
                    description="The component slug. Available: " + ", ".join(e.slug for e in self.catalog),
                ),
            ],
        )
        self.use_action(
            "compareComponents",
            "Compare two or more components to help the user decide which to use.",
            self.compare_components,
            [
                ParameterSpec(
                    name="slugs",
                    type=ParameterType.STRING_ARRAY,
                    description="Array of component slugs to compare",
                ),
            ],
        )

    def search_components(self, params: Dict[str, Any]) -> str:
        matches = [entry for entry in self.catalog if entry.matches(params["query"])]
        if not matches:
            return "No components match that query. Available components: " + ", ".join(
                entry.name for entry in self.catalog
            )
        return "\n\n".join(
            f"**{entry.name}** ({entry.category}): {entry.description} -> {entry.url}" for entry in matches
        )

    def view_component(self, params: Dict[str, Any]) -> str:
        entry = find_entry(self.catalog, params["slug"])
        if entry is None:
            return f"Component {params['slug']} not found"
        self.set_state(current_path=entry.url)
        return f"Navigating to {entry.url}"

    def compare_components(self, params: Dict[str, Any]) -> str:
        found = [entry for entry in (find_entry(self.catalog, slug) for slug in params["slugs"]) if entry]
        if not found:
            return "No matching components found."
        return "\n\n---\n\n".join(
            f"**{entry.name}**\n"
            f"- Category: {entry.category}\n"
            f"- Hooks: {', '.join(entry.hooks)}\n"
            f"- Tags: {', '.join(entry.tags)}\n"
            f"- {entry.description}"
            for entry in found
        )


class SmartRegistry(BridgeComponent):
    """The catalog grid view: active category and search query."""

    component_name = "smart-registry"

    def __init__(self, catalog: Optional[List[CatalogEntry]] = None) -> None:
        super().__init__({"active_category": "all", "search_query": ""})
        self.catalog = list(catalog if catalog is not None else CATALOG)

    def setup(self) -> None:
        self.use_readable(
            "view",
            "The state of the component registry the user is viewing",
            lambda: {
                "activeCategory": self.state["active_category"],
                "searchQuery": self.state["search_query"],
                "availableCategories": CATEGORIES,
                "visibleComponents": [entry.name for entry in self.visible()],
            },
        )
        self.use_action(
            "filterRegistry",
            "Filter the component registry by category or search query",
            self.filter_registry,
            [
                ParameterSpec(
                    name="category",
                    type=ParameterType.STRING,
                    required=False,
                    description="The category ID to filter by (e.g., 'data', 'forms', 'canvas', 'all')",
                ),
                ParameterSpec(
                    name="query",
                    type=ParameterType.STRING,
                    required=False,
                    description="The search query to filter components by name or description",
                ),
            ],
        )

    def visible(self) -> List[CatalogEntry]:
        category = self.state["active_category"]
        query = self.state["search_query"]
        entries = self.catalog if category == "all" else [e for e in self.catalog if e.category == category]
        if query:
            entries = [e for e in entries if e.matches(query)]
        return entries

    def filter_registry(self, params: Dict[str, Any]) -> str:
        changes: Dict[str, Any] = {}
        if params.get("category"):
            changes["active_category"] = params["category"]
        if params.get("query") is not None:
            changes["search_query"] = params["query"]
        self.set_state(**changes)
        return "Registry filter updated."
