"""JSON dashboard export.

Amounts are Decimal inside the engine; on the wire they are plain JSON
numbers (IEEE-754 doubles).
"""

import json
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from finflow.dashboard.data_provider import DashboardData


def _to_jsonable(obj: Any) -> Any:
    """Convert Decimal/datetime/Enum values for JSON serialization."""
    if isinstance(obj, Decimal):
        return float(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def to_wire(model: BaseModel) -> dict[str, Any]:
    """Dump a model to JSON-compatible python data with float amounts."""
    return json.loads(json.dumps(model.model_dump(), default=_to_jsonable))


def generate_dashboard_json(data: DashboardData, indent: int | None = 2) -> str:
    """Render dashboard data as a JSON document."""
    return json.dumps(data.model_dump(), default=_to_jsonable, indent=indent)


def save_dashboard(content: str, output_path: Path) -> None:
    """Save dashboard export to file.

    Args:
        content: JSON content.
        output_path: Output file path.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding="utf-8")
