"""API Version Records.

Provides the dated version model:
- Calendar-date version identifiers
- Changes carrying type-keyed field-map transforms
- Date parsing and ordering
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Dict, List

from pinned.core.errors import ParseError

DATE_FORMAT = "%Y-%m-%d"

# A transform from one field map to another
FieldMap = Dict[str, Any]
Action = Callable[[FieldMap], FieldMap]


def parse_version_date(value: str, date_format: str = DATE_FORMAT) -> date:
    """Parse a version identifier into a calendar date.

    Args:
        value: Date string like "2018-01-02".
        date_format: strptime format the identifier must follow.

    Returns:
        The parsed date.

    Raises:
        ParseError: If the string is not a valid date in the given format.
    """
    if not isinstance(value, str):
        raise ParseError(f"Invalid version date: {value!r}", value=value)
    try:
        parsed = datetime.strptime(value, date_format)
    except ValueError as exc:
        raise ParseError(f"Invalid version date: {value!r}", value=value) from exc
    # strptime accepts unpadded fields (2018-1-2)
    if parsed.strftime(date_format) != value:
        raise ParseError(f"Invalid version date: {value!r}", value=value)
    return parsed.date()


@dataclass
class Change:
    """A described delta introduced by a version."""
    description: str = ""
    actions: Dict[str, Action] = field(default_factory=dict)

    def action_for(self, type_name: str) -> Action | None:
        """Get the transform registered for a type name."""
        return self.actions.get(type_name)


@dataclass
class Version:
    """A dated snapshot of the data model's shape."""
    date: str
    deprecated: bool = False
    changes: List[Change] = field(default_factory=list)
    description: str = ""

    def actions_for(self, type_name: str) -> List[Action]:
        """Get this version's transforms for a type, in recorded order."""
        actions = []
        for change in self.changes:
            action = change.action_for(type_name)
            if action is not None:
                actions.append(action)
        return actions

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "deprecated": self.deprecated,
            "description": self.description,
            "changes": [
                {"description": c.description, "types": sorted(c.actions)}
                for c in self.changes
            ],
        }

    def __str__(self) -> str:
        status = " (deprecated)" if self.deprecated else ""
        return f"{self.date}{status}"
