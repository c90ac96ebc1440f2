"""Relation attachment: synthesized embeds that mimic foreign-key joins."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

from collabdb.scoring import calculate_synergy, predict_trl_transition
from collabdb.tables import Row, TableStore, parse_timestamp, strict_equals


@dataclass(frozen=True)
class BelongsTo:
    """Embed the row referenced by one of this row's foreign keys.

    With fields set, the embed is a reduced projection of the target row.
    Without, the target row is embedded decorated by its own table's rules,
    or by ``rules`` in their place when given.
    """

    key: str
    table: str
    foreign_key: str
    fields: tuple[str, ...] | None = None
    rules: tuple[Relation, ...] | None = None


@dataclass(frozen=True)
class HasMany:
    """Embed every row of another table whose foreign key points back here."""

    key: str
    table: str
    foreign_key: str
    fields: tuple[str, ...] | None = None
    order_by: str | None = None
    descending: bool = False


@dataclass(frozen=True)
class Computed:
    """Embed a value derived from the row by a pure function."""

    key: str
    compute: Callable[[Row, TableStore], Any]


Relation = BelongsTo | HasMany | Computed


def _find_by_id(rows: Sequence[Row], row_id: Any) -> Row | None:
    if row_id is None:
        return None
    for row in rows:
        if strict_equals(row.get("id"), row_id):
            return row
    return None


def _pick(row: Row, fields: Sequence[str]) -> Row:
    return {name: row.get(name) for name in fields}


def project_expertise_names(store: TableStore, project_id: Any) -> list[str]:
    """Resolve a research project's expertise area names through the link table."""
    area_ids = [
        link.get("expertise_area_id")
        for link in store.get_table("research_project_expertise")
        if strict_equals(link.get("research_project_id"), project_id)
    ]
    areas = store.get_table("expertise_areas")
    names = []
    for area_id in area_ids:
        area = _find_by_id(areas, area_id)
        if area is not None and area.get("name"):
            names.append(area["name"])
    return names


def _trl_prediction(row: Row, store: TableStore) -> dict[str, Any]:
    return predict_trl_transition(row).as_row()


def _live_synergy(row: Row, store: TableStore) -> dict[str, Any] | None:
    project = _find_by_id(store.get_table("research_projects"), row.get("research_project_id"))
    challenge = _find_by_id(store.get_table("industry_challenges"), row.get("industry_challenge_id"))
    if project is None or challenge is None:
        return None
    project = {**project, "expertise_areas": project_expertise_names(store, project.get("id"))}
    return calculate_synergy(project, challenge).as_row()


DEFAULT_RELATIONS: dict[str, tuple[Relation, ...]] = {
    "research_projects": (
        BelongsTo("colleges", "colleges", "college_id", ("name", "location")),
        HasMany("activity_logs", "activity_logs", "project_id", order_by="timestamp", descending=True),
        Computed("trl_prediction", _trl_prediction),
    ),
    "industry_challenges": (
        BelongsTo("corporate_partners", "corporate_partners", "corporate_partner_id", ("name",)),
    ),
    "collaboration_requests": (
        BelongsTo("corporate_partners", "corporate_partners", "corporate_partner_id", ("name", "industry")),
        BelongsTo("research_projects", "research_projects", "research_project_id"),
        BelongsTo("industry_challenges", "industry_challenges", "industry_challenge_id", ("title",)),
    ),
    "agreements": (
        BelongsTo(
            "collaboration_requests",
            "collaboration_requests",
            "collaboration_request_id",
            rules=(
                BelongsTo("corporate_partners", "corporate_partners", "corporate_partner_id", ("name",)),
                BelongsTo("research_projects", "research_projects", "research_project_id"),
            ),
        ),
    ),
    "matchmaking_scores": (
        BelongsTo("research_projects", "research_projects", "research_project_id"),
        BelongsTo("industry_challenges", "industry_challenges", "industry_challenge_id"),
        Computed("synergy", _live_synergy),
    ),
    "student_profiles": (
        BelongsTo("colleges", "colleges", "college_id", ("name",)),
        HasMany("student_skills", "student_skills", "student_profile_id", ("skill_name",)),
        HasMany(
            "student_project_involvement",
            "student_project_involvement",
            "student_profile_id",
            ("id", "research_project_id"),
        ),
    ),
    "saved_candidates": (
        BelongsTo("student_profiles", "student_profiles", "student_profile_id"),
    ),
    "licensing_opportunities": (
        BelongsTo("ip_disclosures", "ip_disclosures", "ip_disclosure_id", ("invention_category", "status")),
    ),
    "ip_disclosures": (
        BelongsTo("research_projects", "research_projects", "research_project_id", ("title",)),
        HasMany(
            "ip_contributors",
            "ip_contributors",
            "ip_disclosure_id",
            ("contributor_name", "organization", "ownership_percentage", "role"),
        ),
    ),
}


class RelationAttacher:
    """Decorates rows with embedded related data.

    attach() never touches the store: it reads the latest committed tables and
    returns new dicts, so callers may mutate the result freely.
    """

    def __init__(
        self,
        store: TableStore,
        relations: Mapping[str, Sequence[Relation]] = DEFAULT_RELATIONS,
    ) -> None:
        self.store = store
        self.relations = relations

    def attach(self, table: str, row: Row) -> Row:
        """Return a shallow copy of row enriched with its table's relations."""
        return self._attach(table, row, frozenset())

    def attach_all(self, table: str, rows: Sequence[Row]) -> list[Row]:
        return [self.attach(table, row) for row in rows]

    def _attach(
        self,
        table: str,
        row: Row,
        visiting: frozenset[tuple[str, Any]],
        rules: Sequence[Relation] | None = None,
    ) -> Row:
        result = dict(row)
        marker = (table, row.get("id"))
        if marker in visiting:
            # Already being decorated further up this chain
            return result
        visiting = visiting | {marker}

        if rules is None:
            rules = self.relations.get(table, ())
        for relation in rules:
            if isinstance(relation, BelongsTo):
                result[relation.key] = self._belongs_to(relation, row, visiting)
            elif isinstance(relation, HasMany):
                result[relation.key] = self._has_many(relation, row, visiting)
            else:
                result[relation.key] = relation.compute(row, self.store)
        return result

    def _belongs_to(self, relation: BelongsTo, row: Row, visiting: frozenset[tuple[str, Any]]) -> Row | None:
        target = _find_by_id(self.store.get_table(relation.table), row.get(relation.foreign_key))
        if target is None:
            return None
        if relation.fields is not None:
            return _pick(target, relation.fields)
        return self._attach(relation.table, target, visiting, relation.rules)

    def _has_many(self, relation: HasMany, row: Row, visiting: frozenset[tuple[str, Any]]) -> list[Row]:
        row_id = row.get("id")
        children = [
            child for child in self.store.get_table(relation.table)
            if row_id is not None and strict_equals(child.get(relation.foreign_key), row_id)
        ]
        if relation.order_by is not None:
            # order_by names a timestamp column; unparseable values go last
            stamps = [(parse_timestamp(child.get(relation.order_by)), child) for child in children]
            present = [pair for pair in stamps if pair[0] is not None]
            present.sort(key=lambda pair: pair[0], reverse=relation.descending)
            children = [child for _, child in present] + [child for stamp, child in stamps if stamp is None]
        if relation.fields is not None:
            return [_pick(child, relation.fields) for child in children]
        return [self._attach(relation.table, child, visiting) for child in children]
