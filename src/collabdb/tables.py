"""In-memory table store."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping

from collabdb.errors import UnknownTableError

Row = dict[str, Any]

TABLE_NAMES: tuple[str, ...] = (
    "colleges",
    "corporate_partners",
    "expertise_areas",
    "research_projects",
    "research_project_expertise",
    "industry_challenges",
    "matchmaking_scores",
    "collaboration_requests",
    "agreements",
    "agreement_versions",
    "agreement_sections",
    "agreement_comments",
    "agreement_checklist_items",
    "agreement_templates",
    "active_projects",
    "project_milestones",
    "project_team_members",
    "project_documents",
    "ip_disclosures",
    "ip_contributors",
    "licensing_opportunities",
    "licensing_inquiries",
    "negotiation_messages",
    "project_scopes",
    "student_profiles",
    "student_skills",
    "student_project_involvement",
    "saved_candidates",
    "interview_requests",
    "user_sessions",
    "activity_logs",
)

# Tables modelling entities with a mutable lifecycle; every update stamps updated_at.
LIFECYCLE_TABLES: frozenset[str] = frozenset({
    "agreements",
    "active_projects",
    "student_profiles",
    "agreement_checklist_items",
})


def utc_now() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(timezone.utc)


def now_iso(clock: Callable[[], datetime] = utc_now) -> str:
    """Render the clock's current time as an ISO-8601 UTC timestamp."""
    return clock().astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string into an aware datetime, or None if it is not one.

    A trailing Z is read as UTC, and so is a string without an offset.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_number(value: Any) -> bool:
    """Return True for ints and floats, excluding bools."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class TableStore:
    """Owns every named table as an immutable snapshot of rows.

    Mutations never edit a snapshot in place: callers build the new row
    sequence and commit it with set_table(), so a reader holding the previous
    snapshot is never affected.
    """

    def __init__(
        self,
        tables: Mapping[str, Iterable[Row]] | None = None,
        names: Iterable[str] = TABLE_NAMES,
    ) -> None:
        """Initialize the store.

        Args:
            tables: Initial rows per table name. Every key must be in names.
            names: The fixed set of table names this store holds.
        """
        self._tables: dict[str, tuple[Row, ...]] = {name: () for name in names}
        for name, rows in (tables or {}).items():
            self.set_table(name, [dict(row) for row in rows])

    def _check(self, name: str) -> None:
        if name not in self._tables:
            raise UnknownTableError(name)

    def table_names(self) -> list[str]:
        """List all table names in declaration order."""
        return list(self._tables)

    def has_table(self, name: str) -> bool:
        return name in self._tables

    def get_table(self, name: str) -> tuple[Row, ...]:
        """Return the latest committed rows of a table."""
        self._check(name)
        return self._tables[name]

    def set_table(self, name: str, rows: Iterable[Row]) -> None:
        """Replace a table's rows in one step."""
        self._check(name)
        self._tables[name] = tuple(rows)

    def count(self, name: str) -> int:
        return len(self.get_table(name))

    def new_id(self, name: str, pending: Iterable[Row] = ()) -> int:
        """Allocate the next id for a table.

        The id is one above the largest numeric id among the committed rows
        and any pending rows not yet committed, or 1 for an empty table.
        Deleting the current maximum therefore lets its id be handed out again.
        """
        highest = 0
        for row in (*self.get_table(name), *pending):
            row_id = row.get("id")
            if is_number(row_id) and row_id > highest:
                highest = row_id
        return highest + 1


def strict_equals(left: Any, right: Any) -> bool:
    """Equality that never equates bools with numbers or numbers with text."""
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if is_number(left) and is_number(right):
        return left == right
    if is_number(left) or is_number(right):
        return False
    return left == right
