"""Tests for the query builder."""

import asyncio
from datetime import datetime

import pytest

from collabdb.errors import BackendError
from collabdb.query import Filter, QueryBuilder, QueryResult
from collabdb.relations import Computed, RelationAttacher
from collabdb.tables import TableStore

from conftest import FIXED_NOW

STAMP = "2025-06-01T12:00:00.000Z"


class TestScenarios:
    """End-to-end behaviour of the builder."""

    @pytest.mark.asyncio
    async def test_insert_into_empty_table(self, empty_client):
        """Test that the first insert gets id 1 and a timestamp."""
        result = await empty_client.from_("research_projects").insert({"title": "X"}).select().single()
        assert result.error is None
        row = result.data
        assert row["id"] == 1
        assert row["title"] == "X"
        assert row["created_at"] == STAMP
        assert datetime.fromisoformat(row["created_at"].replace("Z", "+00:00")) == FIXED_NOW

    @pytest.mark.asyncio
    async def test_read_attaches_college(self, make_client):
        """Test that reads embed the related college."""
        client = make_client(
            colleges=[{"id": 1, "name": "IIT Madras", "location": "Chennai, India"}],
            research_projects=[{"id": 1, "college_id": 1, "title": "P"}],
        )
        result = await client.from_("research_projects").select("*")
        assert result.data[0]["colleges"]["name"] == "IIT Madras"

    @pytest.mark.asyncio
    async def test_filter_keeps_relative_order(self, empty_client):
        """Test that eq returns matches in insertion order."""
        await empty_client.from_("activity_logs").insert([
            {"project_id": 1, "action": "first"},
            {"project_id": 2, "action": "second"},
            {"project_id": 1, "action": "third"},
        ])
        result = await empty_client.from_("activity_logs").select("*").eq("project_id", 1)
        assert [row["action"] for row in result.data] == ["first", "third"]

    @pytest.mark.asyncio
    async def test_update_missing_row(self, make_client):
        """Test update of an absent id with and without single()."""
        client = make_client(agreements=[{"id": 1, "status": "draft"}])

        result = await client.from_("agreements").update({"status": "signed"}).eq("id", 5).select().single()
        assert result.data is None
        assert result.error.message == "No row updated"

        result = await client.from_("agreements").update({"status": "signed"}).eq("id", 5).select()
        assert result == QueryResult(data=[], error=None)

    @pytest.mark.asyncio
    async def test_blob_round_trip(self, empty_client):
        """Test upload then download of a blob."""
        docs = empty_client.storage.from_("docs")
        upload = await docs.upload("a/b.pdf", b"%PDF-1.7 data", content_type="application/pdf")
        assert upload.data == {"path": "a/b.pdf"}

        download = await docs.download("a/b.pdf")
        assert download.data.size == len(b"%PDF-1.7 data")

        missing = await docs.download("never/uploaded.pdf")
        assert missing.error is None
        assert missing.data.size == 0

    @pytest.mark.asyncio
    async def test_id_after_deleting_max(self, make_client):
        """Test that ids follow the current maximum after deletes."""
        client = make_client(colleges=[{"id": 1}, {"id": 2}, {"id": 3}])
        await client.from_("colleges").delete().eq("id", 3)
        result = await client.from_("colleges").insert({"name": "next"}).select().single()
        assert result.data["id"] == 3

        await client.from_("colleges").delete().in_("id", [1, 2, 3])
        result = await client.from_("colleges").insert({"name": "again"}).select().single()
        assert result.data["id"] == 1


class TestFilters:
    """Tests for filter semantics."""

    @pytest.fixture
    def client(self, make_client):
        return make_client(colleges=[
            {"id": 1, "name": "IIT Bombay", "success_rate": 90, "flag": True},
            {"id": 2, "name": "IIT Delhi", "success_rate": "85", "flag": 1},
            {"id": 3, "name": "MIT", "success_rate": None, "flag": False},
            {"id": 4, "name": None, "success_rate": "n/a", "flag": None},
        ])

    async def _ids(self, builder):
        result = await builder
        assert result.error is None
        return [row["id"] for row in result.data]

    @pytest.mark.asyncio
    async def test_eq_is_strict(self, client):
        """Test that eq never equates bools with numbers."""
        assert await self._ids(client.from_("colleges").select("id").eq("flag", True)) == [1]
        assert await self._ids(client.from_("colleges").select("id").eq("flag", 1)) == [2]
        assert await self._ids(client.from_("colleges").select("id").eq("id", "1")) == []
        assert await self._ids(client.from_("colleges").select("id").eq("name", None)) == [4]

    @pytest.mark.asyncio
    async def test_in(self, client):
        """Test membership filtering."""
        assert await self._ids(client.from_("colleges").select("id").in_("id", [1, 3, 99])) == [1, 3]
        assert await self._ids(client.from_("colleges").select("id").in_("id", [])) == []

    @pytest.mark.asyncio
    async def test_ilike_is_substring(self, client):
        """Test that ilike ignores case and wildcard placement."""
        assert await self._ids(client.from_("colleges").select("id").ilike("name", "%iit%")) == [1, 2]
        assert await self._ids(client.from_("colleges").select("id").ilike("name", "bom%")) == [1]
        assert await self._ids(client.from_("colleges").select("id").ilike("name", "%")) == [1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_gte_coerces(self, client):
        """Test that gte compares numerically with non-numbers as 0."""
        assert await self._ids(client.from_("colleges").select("id").gte("success_rate", 85)) == [1, 2]
        assert await self._ids(client.from_("colleges").select("id").gte("success_rate", 0)) == [1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_filters_are_anded(self, client):
        """Test that multiple filters must all hold."""
        builder = client.from_("colleges").select("id").ilike("name", "iit").gte("success_rate", 88)
        assert await self._ids(builder) == [1]

    def test_filter_matches(self):
        """Test a single filter against a row."""
        assert Filter("eq", "status", "active").matches({"status": "active"})
        assert not Filter("eq", "status", "active").matches({})
        assert Filter("gte", "score", 0).matches({})


class TestOrderAndLimit:
    """Tests for ordering, limits and counts."""

    @pytest.fixture
    def client(self, make_client):
        return make_client(matchmaking_scores=[
            {"id": 1, "compatibility_score": 70, "label": "b"},
            {"id": 2, "compatibility_score": None, "label": "a"},
            {"id": 3, "compatibility_score": 95, "label": "c"},
            {"id": 4, "compatibility_score": 70, "label": "B"},
            {"id": 5, "compatibility_score": 8, "label": None},
        ])

    @pytest.mark.asyncio
    async def test_ascending_numbers_nulls_last(self, client):
        """Test numeric ascending order with ties kept in place."""
        result = await client.from_("matchmaking_scores").select("id").order("compatibility_score")
        assert [row["id"] for row in result.data] == [5, 1, 4, 3, 2]

    @pytest.mark.asyncio
    async def test_descending_nulls_first(self, client):
        """Test descending order puts missing values first and keeps ties stable."""
        result = await client.from_("matchmaking_scores").select("id").order("compatibility_score", ascending=False)
        assert [row["id"] for row in result.data] == [2, 3, 1, 4, 5]

    @pytest.mark.asyncio
    async def test_text_order(self, client):
        """Test that text ignores case first and puts lowercase before uppercase on ties."""
        result = await client.from_("matchmaking_scores").select("id").order("label")
        assert [row["id"] for row in result.data] == [2, 1, 4, 3, 5]

    @pytest.mark.asyncio
    async def test_title_order_ignores_case(self, make_client):
        """Test that mixed-case titles sort alphabetically."""
        client = make_client(
            research_projects=[
                {"id": 1, "title": "banana"},
                {"id": 2, "title": "Apple"},
                {"id": 3, "title": "apple pie"},
                {"id": 4, "title": "Cherry"},
            ]
        )
        result = await client.from_("research_projects").select("title").order("title")
        assert [row["title"] for row in result.data] == ["Apple", "apple pie", "banana", "Cherry"]

    @pytest.mark.asyncio
    async def test_limit_after_order(self, client):
        """Test that limit applies to the ordered set."""
        result = await (
            client.from_("matchmaking_scores")
            .select("id")
            .order("compatibility_score", ascending=False)
            .gte("compatibility_score", 1)
            .limit(2)
        )
        assert [row["id"] for row in result.data] == [3, 1]

    @pytest.mark.asyncio
    async def test_exact_count_ignores_limit(self, client):
        """Test that count reports every filtered row."""
        result = await client.from_("matchmaking_scores").select("id", count="exact").gte("compatibility_score", 50).limit(1)
        assert len(result.data) == 1
        assert result.count == 3

    @pytest.mark.asyncio
    async def test_count_not_requested(self, client):
        """Test that count stays None unless requested."""
        result = await client.from_("matchmaking_scores").select("id")
        assert result.count is None


class TestCardinality:
    """Tests for single() and maybe_single()."""

    @pytest.fixture
    def client(self, make_client):
        return make_client(colleges=[{"id": 1, "name": "A"}, {"id": 2, "name": "A"}])

    @pytest.mark.asyncio
    async def test_single(self, client):
        """Test exactly-one resolution."""
        result = await client.from_("colleges").select("id").eq("id", 1).single()
        assert result.data == {"id": 1}

        for builder in (
            client.from_("colleges").select("id").eq("name", "A").single(),
            client.from_("colleges").select("id").eq("id", 9).single(),
        ):
            result = await builder
            assert result.data is None
            assert result.error.message == "Expected single row"

    @pytest.mark.asyncio
    async def test_maybe_single(self, client):
        """Test at-most-one resolution."""
        result = await client.from_("colleges").select("id").eq("id", 9).maybe_single()
        assert result == QueryResult(data=None, error=None)

        result = await client.from_("colleges").select("id").eq("name", "A").maybe_single()
        assert result.error.message == "Expected at most one row"

    @pytest.mark.asyncio
    async def test_raise_for_error(self, client):
        """Test converting an error envelope into an exception."""
        result = await client.from_("colleges").select("id").single()
        with pytest.raises(BackendError, match="Expected single row"):
            result.raise_for_error()

        ok = await client.from_("colleges").select("id").eq("id", 1).single()
        assert ok.raise_for_error() is ok


class TestMutations:
    """Tests for insert, update, upsert and delete."""

    @pytest.mark.asyncio
    async def test_insert_many_assigns_distinct_ids(self, make_client):
        """Test that a batch insert allocates consecutive ids."""
        client = make_client(colleges=[{"id": 4}])
        result = await client.from_("colleges").insert([{"name": "a"}, {"name": "b"}, {"id": 10, "name": "c"}])
        assert [row["id"] for row in result.data] == [5, 6, 10]
        assert client.store.count("colleges") == 4

    @pytest.mark.asyncio
    async def test_insert_keeps_supplied_fields(self, empty_client):
        """Test that reading an inserted row back returns it unchanged."""
        row = {"name": "Edge AI", "description": "On-device ML", "created_at": "2020-01-01T00:00:00.000Z"}
        inserted = await empty_client.from_("expertise_areas").insert(row).select().single()
        fetched = await empty_client.from_("expertise_areas").select("*").eq("id", inserted.data["id"]).single()
        assert fetched.data == {**row, "id": 1}

    @pytest.mark.asyncio
    async def test_insert_does_not_alias_input(self, empty_client):
        """Test that the caller's dict is not stored or modified."""
        row = {"name": "x"}
        await empty_client.from_("colleges").insert(row)
        assert row == {"name": "x"}
        assert empty_client.store.get_table("colleges")[0] is not row

    @pytest.mark.asyncio
    async def test_insert_lifecycle_sets_updated_at(self, empty_client):
        """Test that lifecycle tables get updated_at on insert."""
        result = await empty_client.from_("agreements").insert({"status": "draft"}).select().single()
        assert result.data["updated_at"] == STAMP

        result = await empty_client.from_("colleges").insert({"name": "x"}).select().single()
        assert "updated_at" not in result.data

    @pytest.mark.asyncio
    async def test_insert_returns_decorated_rows(self, make_client):
        """Test that inserted rows come back with relations and projection."""
        client = make_client(colleges=[{"id": 1, "name": "Caltech", "location": "Pasadena, CA, USA"}])
        result = await client.from_("research_projects").insert({"college_id": 1, "title": "T"}).select("id, colleges(name)").single()
        assert result.data == {"id": 1, "colleges": {"name": "Caltech"}}

    @pytest.mark.asyncio
    async def test_update_isolation(self, make_client):
        """Test that unmatched rows are untouched."""
        client = make_client(project_milestones=[
            {"id": 1, "active_project_id": 1, "status": "pending"},
            {"id": 2, "active_project_id": 2, "status": "pending"},
        ])
        before = client.store.get_table("project_milestones")[1]
        result = await client.from_("project_milestones").update({"status": "completed"}).eq("id", 1).select()
        assert result.data == [{"id": 1, "active_project_id": 1, "status": "completed"}]
        assert client.store.get_table("project_milestones")[1] == before

    @pytest.mark.asyncio
    async def test_update_returns_rows_no_longer_matching(self, make_client):
        """Test that updated rows are returned even when the patch changes the filtered column."""
        client = make_client(interview_requests=[{"id": 1, "status": "pending"}, {"id": 2, "status": "pending"}])
        result = await client.from_("interview_requests").update({"status": "approved"}).eq("status", "pending")
        assert [row["status"] for row in result.data] == ["approved", "approved"]

    @pytest.mark.asyncio
    async def test_update_stamps_updated_at(self, make_client):
        """Test updated_at stamping rules."""
        client = make_client(
            agreements=[{"id": 1, "status": "draft"}],
            colleges=[{"id": 1, "name": "a"}],
            project_milestones=[{"id": 1, "status": "pending", "updated_at": "2020-01-01T00:00:00.000Z"}],
        )
        agreement = await client.from_("agreements").update({"status": "signed"}).eq("id", 1).single()
        assert agreement.data["updated_at"] == STAMP

        college = await client.from_("colleges").update({"name": "b"}).eq("id", 1).single()
        assert "updated_at" not in college.data

        milestone = await client.from_("project_milestones").update({"status": "completed"}).eq("id", 1).single()
        assert milestone.data["updated_at"] == STAMP

        explicit = await client.from_("agreements").update({"updated_at": "2030-01-01T00:00:00.000Z"}).eq("id", 1).single()
        assert explicit.data["updated_at"] == "2030-01-01T00:00:00.000Z"

    @pytest.mark.asyncio
    async def test_upsert_idempotent(self, empty_client):
        """Test that upserting the same conflict key twice leaves one row."""
        table = empty_client.from_
        await table("saved_candidates").upsert(
            {"corporate_partner_id": 1, "student_profile_id": 2, "notes": "first"},
            on_conflict="corporate_partner_id,student_profile_id",
        )
        result = await table("saved_candidates").upsert(
            {"corporate_partner_id": 1, "student_profile_id": 2, "notes": "second"},
            on_conflict=["corporate_partner_id", "student_profile_id"],
        ).select().single()

        rows = empty_client.store.get_table("saved_candidates")
        assert len(rows) == 1
        assert rows[0]["notes"] == "second"
        assert rows[0]["id"] == 1
        assert result.data["updated_at"] == STAMP

    @pytest.mark.asyncio
    async def test_upsert_by_id(self, make_client):
        """Test that without conflict keys upsert matches on id."""
        client = make_client(colleges=[{"id": 1, "name": "old", "location": "here"}])
        await client.from_("colleges").upsert({"id": 1, "name": "new"})
        await client.from_("colleges").upsert({"id": 7, "name": "fresh"})
        await client.from_("colleges").upsert({"name": "no id"})
        rows = client.store.get_table("colleges")
        assert rows[0] == {"id": 1, "name": "new", "location": "here", "updated_at": STAMP}
        assert [row["id"] for row in rows] == [1, 7, 8]

    @pytest.mark.asyncio
    async def test_delete_completeness(self, seeded_client):
        """Test that deleted rows no longer match their filter."""
        table = seeded_client.from_
        result = await table("activity_logs").delete().eq("project_id", 1)
        assert result == QueryResult(data=[], error=None)
        remaining = await table("activity_logs").select("*").eq("project_id", 1)
        assert remaining.data == []
        assert seeded_client.store.count("activity_logs") > 0

    @pytest.mark.asyncio
    async def test_delete_without_filters_clears_table(self, make_client):
        """Test that an unfiltered delete removes every row."""
        client = make_client(colleges=[{"id": 1}, {"id": 2}])
        await client.from_("colleges").delete()
        assert client.store.count("colleges") == 0


class TestErrorEnvelope:
    """Tests that failures come back as envelopes."""

    @pytest.mark.asyncio
    async def test_unknown_table(self, empty_client):
        """Test that an unknown table is an error, not an exception."""
        result = await empty_client.from_("widgets").select("*")
        assert result.data is None
        assert result.error.message == "Unknown table: widgets"

    @pytest.mark.asyncio
    async def test_bad_column_list(self, empty_client):
        """Test that a malformed column list is an error envelope."""
        result = await empty_client.from_("colleges").select("id,, name")
        assert result.error is not None
        assert "Syntax error" in result.error.message

    @pytest.mark.asyncio
    async def test_failing_relation(self, make_client, caplog):
        """Test that exceptions raised by relation rules are captured and logged."""
        client = make_client(colleges=[{"id": 1}])

        def explode(row, store):
            raise RuntimeError("boom")

        attacher = RelationAttacher(client.store, {"colleges": (Computed("x", explode),)})
        builder = QueryBuilder("colleges", client.store, attacher, latency=0.001)
        with caplog.at_level("WARNING", logger="collabdb.query"):
            result = await builder.select("*")
        assert result.error.message == "boom"
        assert "boom" in caplog.text

    @pytest.mark.asyncio
    async def test_projection_error_after_insert(self, make_client):
        """Test that a bad column list fails the result but not the insert."""
        client = make_client(colleges=[{"id": 1}])
        result = await client.from_("colleges").insert({"name": "x"}).select("id,,")
        assert result.error is not None
        assert client.store.count("colleges") == 2


class TestExecution:
    """Tests for deferred, awaitable execution."""

    @pytest.mark.asyncio
    async def test_builder_is_lazy(self, empty_client):
        """Test that nothing happens until the builder is executed."""
        builder = empty_client.from_("colleges").insert({"name": "x"})
        assert empty_client.store.count("colleges") == 0
        await builder.execute()
        assert empty_client.store.count("colleges") == 1

    @pytest.mark.asyncio
    async def test_execute_and_await_agree(self, seeded_client):
        """Test that execute() and await give the same result."""
        builder = seeded_client.from_("colleges").select("id, name").eq("id", 3).single()
        assert await builder.execute() == await builder

    @pytest.mark.asyncio
    async def test_concurrent_inserts_get_unique_ids(self, empty_client):
        """Test that interleaved executions never share an id."""
        results = await asyncio.gather(*(
            empty_client.from_("activity_logs").insert({"n": n}).select().single().execute()
            for n in range(10)
        ))
        assert sorted(result.data["id"] for result in results) == list(range(1, 11))

    @pytest.mark.asyncio
    async def test_latency_is_applied(self, make_client):
        """Test that execution yields to the event loop before resolving."""
        client = make_client()
        order = []

        async def query():
            await client.from_("colleges").select("*")
            order.append("query")

        async def other():
            order.append("other")

        await asyncio.gather(query(), other())
        assert order == ["other", "query"]

    def test_direct_construction(self):
        """Test building a builder without a client."""
        store = TableStore({"colleges": [{"id": 1}]})
        builder = QueryBuilder("colleges", store, RelationAttacher(store), latency=0.001)
        result = asyncio.run(builder.select("*").execute())
        assert result.data == [{"id": 1}]
