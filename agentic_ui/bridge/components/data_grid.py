"""Data grid components.

``SmartDataGrid`` is a fixed employee roster the agent can filter, sort and
highlight. ``CopilotTable`` is a generic table over arbitrary rows with
agent-driven sorting, filtering, highlighting and reset.
"""

import re
from typing import Any, Callable, Dict, List, Optional

from agentic_ui.bridge.capabilities import ParameterSpec, ParameterType

from .base import BridgeComponent

EMPLOYEES: List[Dict[str, str]] = [
    {"id": "1", "name": "Alice Johnson", "role": "Frontend Dev", "status": "Active", "lastSeen": "Now"},
    {"id": "2", "name": "Bob Smith", "role": "Product Manager", "status": "Busy", "lastSeen": "1h ago"},
    {"id": "3", "name": "Charlie Brown", "role": "Designer", "status": "Offline", "lastSeen": "2d ago"},
    {"id": "4", "name": "Diana Prince", "role": "DevOps", "status": "Active", "lastSeen": "Now"},
    {"id": "5", "name": "Evan Wright", "role": "Backend Dev", "status": "Busy", "lastSeen": "4h ago"},
]

EMPLOYEE_STATUSES = ("Active", "Busy", "Offline")
EMPLOYEE_SORT_FIELDS = ("name", "role", "status")


class SmartDataGrid(BridgeComponent):
    """Employee roster exposed to the agent."""

    component_name = "smart-data-grid"

    def __init__(self, employees: Optional[List[Dict[str, str]]] = None) -> None:
        self.all_employees = [dict(e) for e in (employees if employees is not None else EMPLOYEES)]
        super().__init__({"rows": list(self.all_employees), "highlighted_ids": []})

    def setup(self) -> None:
        self.use_readable(
            "employees",
            "The current list of employees in the Smart Data Grid",
            lambda: {"rows": self.state["rows"], "highlightedIds": self.state["highlighted_ids"]},
        )
        self.use_action(
            "filterAndSortEmployees",
            "Filter, sort, or highlight employees in the table",
            self.filter_and_sort,
            [
                ParameterSpec(
                    name="filterText",
                    required=False,
                    description="Text to filter rows by name or role",
                ),
                ParameterSpec(
                    name="statusFilter",
                    type=ParameterType.ENUM,
                    enum=EMPLOYEE_STATUSES,
                    required=False,
                    description="Filter by status (Active, Busy, Offline)",
                ),
                ParameterSpec(
                    name="sortBy",
                    type=ParameterType.ENUM,
                    enum=EMPLOYEE_SORT_FIELDS,
                    required=False,
                    description="Field to sort by",
                ),
                ParameterSpec(
                    name="highlightIds",
                    type=ParameterType.STRING_ARRAY,
                    required=False,
                    description="List of employee IDs to highlight",
                ),
            ],
        )

    async def filter_and_sort(self, params: Dict[str, Any]) -> str:
        rows = list(self.all_employees)

        if params.get("filterText"):
            q = params["filterText"].lower()
            rows = [e for e in rows if q in e["name"].lower() or q in e["role"].lower()]

        if params.get("statusFilter"):
            rows = [e for e in rows if e["status"] == params["statusFilter"]]

        if params.get("sortBy"):
            rows.sort(key=lambda e: str(e[params["sortBy"]]))

        self.set_state(rows=rows, highlighted_ids=list(params.get("highlightIds") or []))
        return f"Updated table: {len(rows)} rows visible."


FILTER_OPERATORS = ("contains", "equals", "gt", "lt", "gte", "lte")

SAAS_METRIC_COLUMNS = ["name", "mrr", "customers", "growth", "plan", "status"]

SAAS_METRICS: List[Dict[str, Any]] = [
    {"name": "Acme Corp", "mrr": 48500, "customers": 312, "growth": "+18.2%", "plan": "Enterprise", "status": "Active"},
    {"name": "Globex Inc", "mrr": 32100, "customers": 187, "growth": "+12.5%", "plan": "Pro", "status": "Active"},
    {"name": "Initech", "mrr": 8900, "customers": 45, "growth": "-3.1%", "plan": "Starter", "status": "Churned"},
    {"name": "Umbrella Ltd", "mrr": 67200, "customers": 523, "growth": "+24.8%", "plan": "Enterprise", "status": "Active"},
    {"name": "Stark Industries", "mrr": 125000, "customers": 891, "growth": "+31.4%", "plan": "Enterprise", "status": "Active"},
    {"name": "Wayne Enterprises", "mrr": 95400, "customers": 678, "growth": "+22.1%", "plan": "Enterprise", "status": "Active"},
    {"name": "Pied Piper", "mrr": 5200, "customers": 23, "growth": "+45.0%", "plan": "Starter", "status": "Trial"},
    {"name": "Hooli", "mrr": 78300, "customers": 412, "growth": "+8.7%", "plan": "Pro", "status": "Active"},
    {"name": "Dunder Mifflin", "mrr": 12400, "customers": 67, "growth": "-1.2%", "plan": "Pro", "status": "Churned"},
    {"name": "Prestige Worldwide", "mrr": 3100, "customers": 12, "growth": "+52.3%", "plan": "Starter", "status": "Trial"},
    {"name": "Cyberdyne Systems", "mrr": 41800, "customers": 234, "growth": "+15.6%", "plan": "Pro", "status": "Active"},
    {"name": "Soylent Corp", "mrr": 19500, "customers": 98, "growth": "+9.3%", "plan": "Pro", "status": "Active"},
    {"name": "Aperture Science", "mrr": 56700, "customers": 345, "growth": "+19.8%", "plan": "Enterprise", "status": "Active"},
]


_LEADING_NUMBER = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def _as_number(value: Any) -> Optional[float]:
    """Parse the leading number of a cell, so ``"+18.2%"`` reads as 18.2."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    match = _LEADING_NUMBER.match(str(value))
    return float(match.group(0)) if match else None


_NUMERIC_COMPARISONS: Dict[str, Callable[[float, float], bool]] = {
    "gt": lambda a, b: a > b,
    "lt": lambda a, b: a < b,
    "gte": lambda a, b: a >= b,
    "lte": lambda a, b: a <= b,
}


def row_matches(row: Dict[str, Any], column_key: str, operator: str, value: str) -> bool:
    """Apply one agent-issued filter to a row."""
    cell = str(row.get(column_key) if row.get(column_key) is not None else "").lower()
    target = value.lower()
    if operator == "contains":
        return target in cell
    if operator == "equals":
        return cell == target
    left, right = _as_number(cell), _as_number(target)
    if left is None or right is None:
        return False
    return _NUMERIC_COMPARISONS[operator](left, right)


def _sort_key(value: Any):
    number = _as_number(value)
    if number is not None:
        return (0, number, "")
    return (1, 0.0, str(value if value is not None else "").lower())


class CopilotTable(BridgeComponent):
    """A table over arbitrary rows with agent-driven sort, filter and highlight."""

    component_name = "copilot-table"

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None, columns: Optional[List[str]] = None) -> None:
        self.rows = [dict(r) for r in (rows if rows is not None else SAAS_METRICS)]
        self.columns = list(columns if columns is not None else SAAS_METRIC_COLUMNS)
        super().__init__({"sort": None, "active_filters": [], "highlighted_rows": []})

    def visible_rows(self) -> List[Dict[str, Any]]:
        result = list(self.rows)
        for f in self.state["active_filters"]:
            result = [row for row in result if row_matches(row, f["columnKey"], f["operator"], f["value"])]
        sort = self.state["sort"]
        if sort:
            result.sort(key=lambda row: _sort_key(row.get(sort["columnKey"])), reverse=sort["direction"] == "desc")
        return result

    def setup(self) -> None:
        self.use_readable(
            "table",
            "Current data table state including all rows, active sort, and active filters",
            lambda: {
                "totalRows": len(self.rows),
                "visibleRows": len(self.visible_rows()),
                "columns": self.columns,
                "currentSort": self.state["sort"],
                "activeFilters": self.state["active_filters"],
                "highlightedRows": self.state["highlighted_rows"],
                "data": self.visible_rows(),
            },
        )
        available = ", ".join(self.columns)
        self.use_action(
            "sortTable",
            "Sort the table by a specific column in ascending or descending order",
            self.sort_table,
            [
                ParameterSpec(name="columnKey", description=f"The column to sort by. Available columns: {available}"),
                ParameterSpec(
                    name="direction",
                    type=ParameterType.ENUM,
                    enum=("asc", "desc"),
                    description="Sort direction: 'asc' for ascending or 'desc' for descending",
                ),
            ],
        )
        self.use_action(
            "filterTable",
            "Filter the table rows by a specific column and value. Use operator to control matching: "
            "contains, equals, gt (greater than), lt (less than), gte (>=), lte (<=)",
            self.filter_table,
            [
                ParameterSpec(name="columnKey", description=f"The column to filter by. Available columns: {available}"),
                ParameterSpec(name="value", description="The value to filter for"),
                ParameterSpec(
                    name="operator",
                    type=ParameterType.ENUM,
                    enum=FILTER_OPERATORS,
                    description="The filter operator: contains, equals, gt, lt, gte, lte",
                ),
            ],
        )
        self.use_action(
            "highlightRows",
            "Highlight specific rows in the table. Provide 0-based row indices from the currently visible data.",
            self.highlight_rows,
            [
                ParameterSpec(
                    name="rowIndices",
                    type=ParameterType.NUMBER_ARRAY,
                    description="Array of row indices (0-based) to highlight",
                ),
            ],
        )
        self.use_action(
            "clearFilters",
            "Remove all active filters, sort, and highlighted rows to reset the table to its original state",
            self.clear_filters,
        )

    def sort_table(self, params: Dict[str, Any]) -> str:
        column_key, direction = params["columnKey"], params["direction"]
        if column_key not in self.columns:
            return f"Column {column_key} not found"
        self.set_state(sort={"columnKey": column_key, "direction": direction})
        return f"Table sorted by {column_key} in {direction}ending order"

    def filter_table(self, params: Dict[str, Any]) -> str:
        column_key, value, operator = params["columnKey"], params["value"], params["operator"]
        if column_key not in self.columns:
            return f"Column {column_key} not found"
        new_filter = {"columnKey": column_key, "value": value, "operator": operator}
        self.set_state(active_filters=self.state["active_filters"] + [new_filter])
        return f'Filter applied: {column_key} {operator} "{value}"'

    def highlight_rows(self, params: Dict[str, Any]) -> str:
        indices = [int(i) for i in params["rowIndices"]]
        self.set_state(highlighted_rows=indices)
        return f"Highlighted {len(indices)} row(s)"

    def clear_filters(self, params: Dict[str, Any]) -> str:
        self.set_state(sort=None, active_filters=[], highlighted_rows=[])
        return "All filters, sorting, and highlights cleared"
