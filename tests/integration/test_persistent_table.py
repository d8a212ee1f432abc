"""Integration tests for PersistentTable."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

import pytest

from condense.adapters.outbound import MemoryBlobStore
from condense.application import PersistentTable
from condense.domain.exceptions import (
    CorruptDataError,
    DecryptionError,
    IndexOutOfRangeError,
    InvalidMatchSpecificationError,
    NotFoundError,
)
from condense.infrastructure.config import Config
from condense.infrastructure.metrics import MetricsRegistry

TableFactory = Callable[..., PersistentTable]


def fixture_rows() -> list[dict]:
    return [
        {"field1": "object1_data1", "field2": "object1_data2"},
        {"field1": "object2_data1", "field2": "object2_data2"},
    ]


@pytest.mark.integration
class TestLifecycle:
    """Construction, load, rewrite and delete."""

    @pytest.mark.parametrize("trailing", ["", "/"])
    def test_construct_creates_file(self, temp_dir: Path, test_config: Config, trailing: str) -> None:
        """Construction creates an empty table file, slash or not."""
        table = PersistentTable("ct", f"{temp_dir}{trailing}", config=test_config)

        assert Path(table.location) == temp_dir / "ct.dat"
        assert (temp_dir / "ct.dat").read_bytes() == b""
        assert table.load() == []

    def test_default_directory(self, test_config: Config) -> None:
        """Without a directory the configured data_dir is used."""
        table = PersistentTable("defaults", config=test_config)
        assert Path(table.location) == test_config.storage.data_dir / "defaults.dat"
        assert Path(table.location).exists()

    def test_existing_file_untouched(self, temp_dir: Path, make_table: TableFactory) -> None:
        """Opening a table over an existing file loads its rows."""
        data = json.dumps(fixture_rows())
        (temp_dir / "existing.dat").write_text(data)

        table = make_table("existing")

        assert table.load() == fixture_rows()
        assert (temp_dir / "existing.dat").read_text() == data

    def test_delete(self, make_table: TableFactory) -> None:
        """After delete the file is gone and load returns an empty table."""
        table = make_table("doomed")
        table.insert({"a": 1})

        assert table.delete() is True
        assert not Path(table.location).exists()
        assert table.load() == []
        assert table.delete() is False

    def test_mutation_after_delete_recreates(self, make_table: TableFactory) -> None:
        """The next mutation writes a new blob."""
        table = make_table("phoenix")
        table.delete()
        table.insert({"a": 1})
        assert table.load() == [{"a": 1}]

    @pytest.mark.property
    def test_rewrite_of_load_is_idempotent(self, make_table: TableFactory) -> None:
        """rewrite(load()) twice leaves an unkeyed blob unchanged."""
        table = make_table("stable")
        for row in fixture_rows():
            table.insert(row)
        path = Path(table.location)

        table.rewrite(table.load())
        first = path.read_bytes()
        table.rewrite(table.load())

        assert path.read_bytes() == first

    def test_no_caching_between_instances(self, make_table: TableFactory) -> None:
        """Writes through one instance are visible to another."""
        writer = make_table("shared")
        reader = make_table("shared")

        writer.insert({"a": 1})

        assert reader.load() == [{"a": 1}]

    def test_lost_update_between_instances(self, make_table: TableFactory) -> None:
        """The last rewrite wins; a stale table overwrites newer rows."""
        one = make_table("race")
        two = make_table("race")

        stale = one.load()
        two.insert({"who": "two"})
        one.rewrite(stale + [{"who": "one"}])

        assert two.load() == [{"who": "one"}]

    def test_corrupt_file(self, temp_dir: Path, make_table: TableFactory) -> None:
        """Undecodable contents raise CorruptDataError naming the file."""
        (temp_dir / "bad.dat").write_text("{not json")
        table = make_table("bad")

        with pytest.raises(CorruptDataError) as exc_info:
            table.load()
        assert exc_info.value.location == table.location

    def test_non_table_document(self, temp_dir: Path, make_table: TableFactory) -> None:
        """Valid JSON that is not a list of rows is corrupt too."""
        (temp_dir / "obj.dat").write_text('{"a": 1}')
        with pytest.raises(CorruptDataError):
            make_table("obj").select()


@pytest.mark.integration
class TestMutations:
    """insert, remove, update, set_field and index_of against disk."""

    def test_insert(self, make_table: TableFactory) -> None:
        """Inserted rows can be read back in order."""
        table = make_table("insert")
        for row in fixture_rows():
            result = table.insert(row)

        assert result == fixture_rows()
        assert table.load() == fixture_rows()

    def test_remove(self, make_table: TableFactory) -> None:
        """Removing row 0 drops it and shifts the rest."""
        table = make_table("remove")
        for row in fixture_rows():
            table.insert(row)

        table.remove(0)

        assert table.load() == fixture_rows()[1:]

    def test_insert_then_remove_only_row(self, make_table: TableFactory) -> None:
        """An insert followed by remove(0) leaves an empty table."""
        table = make_table("single")
        table.insert({"f": "v"})
        assert table.remove(0) == []
        assert table.load() == []

    def test_remove_out_of_range(self, make_table: TableFactory) -> None:
        """Invalid indices raise and leave the file unchanged."""
        table = make_table("oor")
        table.insert({"a": 1})
        before = Path(table.location).read_bytes()

        with pytest.raises(IndexOutOfRangeError):
            table.remove(1)
        with pytest.raises(IndexOutOfRangeError):
            table.update(-1, {"a": 2})

        assert Path(table.location).read_bytes() == before

    def test_update(self, make_table: TableFactory) -> None:
        """update merges fields into the addressed row."""
        table = make_table("update")
        for row in fixture_rows():
            table.insert(row)

        table.update(1, {"field2": "changed", "field3": 3})

        assert table.load()[1] == {"field1": "object2_data1", "field2": "changed", "field3": 3}

    def test_set_field(self, make_table: TableFactory) -> None:
        """set_field changes every matching row."""
        table = make_table("set_field")
        table.insert({"team": "a", "score": 1})
        table.insert({"team": "b", "score": 2})
        table.insert({"team": "a", "score": 3})

        table.set_field("score", 0, "team", "a")

        assert table.select(["team", "score"]) == [
            {"team": "a"},
            {"team": "b", "score": 2},
            {"team": "a"},
        ]
        assert table.load()[0] == {"team": "a", "score": 0}

    def test_index_of(self, make_table: TableFactory) -> None:
        """index_of finds positions and must be re-resolved after removal."""
        table = make_table("index")
        for name in ("a", "b", "c"):
            table.insert({"name": name})

        assert table.index_of("name", "c") == 2
        table.remove(table.index_of("name", "a"))
        assert table.index_of("name", "c") == 1
        assert table.index_of("name", "a") == -1


@pytest.mark.integration
class TestQueries:
    """Query operations delegated to the algebra."""

    @pytest.fixture
    def staff(self, make_table: TableFactory) -> PersistentTable:
        table = make_table("staff")
        table.rewrite(
            [
                {"name": "A", "dept": "X", "level": 2},
                {"name": "B", "dept": "Y", "level": 0},
                {"name": "C", "dept": "X"},
            ]
        )
        return table

    def test_select_where_in_like(self, staff: PersistentTable) -> None:
        """Filters load from disk and project."""
        assert staff.select("level") == [{"level": 2}]
        assert staff.where(["name"], "dept", "X") == [{"name": "A"}, {"name": "C"}]
        assert staff.where_in(["name"], "dept", ["Y"]) == [{"name": "B"}]
        assert staff.like(["name"], "name", "/^[ab]$/i") == [{"name": "A"}, {"name": "B"}]

    def test_where_in_default_mode_from_config(
        self,
        temp_dir: Path,
        test_config: Config,
        metrics_registry: MetricsRegistry,
    ) -> None:
        """The configured membership mode applies when none is passed."""
        loose_config = test_config.model_copy(
            update={"query": test_config.query.model_copy(update={"in_equality": "loose"})}
        )
        table = PersistentTable("loose", temp_dir, config=loose_config, metrics=metrics_registry)
        table.rewrite([{"v": 1}, {"v": 1.0}])

        assert table.where_in([], "v", [1]) == [{"v": 1}, {"v": 1.0}]
        assert table.where_in([], "v", [1], mode="strict") == [{"v": 1}]

    def test_scalars(self, staff: PersistentTable) -> None:
        """exists, count, first, last and get."""
        assert staff.exists("dept", "Y")
        assert not staff.exists("dept", "Q")
        assert staff.count() == 3
        assert staff.count("level") == 1
        assert staff.first("name") == "A"
        assert staff.last("name") == "C"
        assert staff.get("name", "dept", "X") == "A"

        with pytest.raises(NotFoundError):
            staff.first("salary")

    def test_union_with_table_and_rows(self, staff: PersistentTable, make_table: TableFactory) -> None:
        """union accepts another persistent table or plain rows."""
        other = make_table("other")
        other.insert({"name": "A", "dept": "Q"})
        other.insert({"name": "D"})

        assert staff.union(["name"], other) == [
            {"name": "A"},
            {"name": "B"},
            {"name": "C"},
            {"name": "D"},
        ]
        assert staff.union(["dept"], [{"dept": "Z"}]) == [
            {"dept": "X"},
            {"dept": "Y"},
            {"dept": "Z"},
        ]

    def test_join_persisted_tables(self, make_table: TableFactory) -> None:
        """Left join of two persisted tables."""
        people = make_table("people")
        people.rewrite([{"name": "A", "dept": "X"}, {"name": "B", "dept": "Y"}])
        places = make_table("places")
        places.rewrite([{"dept": "X", "loc": "1F"}])

        assert people.join("left", [], places, {"dept": "dept"}) == [
            {"name": "A", "dept": "X", "loc": "1F"},
            {"name": "B", "dept": "Y"},
        ]
        assert people.join("inner", ["name", "loc"], places, ("dept", "dept")) == [
            {"name": "A", "loc": "1F"},
        ]

    def test_join_invalid_match(self, staff: PersistentTable) -> None:
        """A malformed match key is rejected."""
        with pytest.raises(InvalidMatchSpecificationError):
            staff.join("inner", [], staff, {"dept": "dept", "name": "name"})

    def test_empty_table_queries(self, make_table: TableFactory) -> None:
        """Queries on an empty table return empty results, not errors."""
        table = make_table("empty")
        assert table.where([], "k", "x") == []
        assert table.exists("k", "x") is False
        assert table.count() == 0


@pytest.mark.integration
@pytest.mark.security
class TestEncryption:
    """Keyed tables."""

    def test_is_encrypted_is_configuration(self, make_table: TableFactory) -> None:
        """A keyed table reports encrypted even while its blob is empty."""
        keyed = make_table("keyed", key="pw")
        plain = make_table("plain")

        assert keyed.is_encrypted
        assert keyed.key == "pw"
        assert Path(keyed.location).read_bytes() == b""
        assert not plain.is_encrypted

    def test_round_trip(self, make_table: TableFactory) -> None:
        """Rows written under a key read back under the same key."""
        table = make_table("vault", key="pw")
        for row in fixture_rows():
            table.insert(row)

        raw = Path(table.location).read_bytes()
        assert b"object1_data1" not in raw
        assert table.load() == fixture_rows()
        assert make_table("vault", key="pw").load() == fixture_rows()

    def test_wrong_key(self, make_table: TableFactory, metrics_registry: MetricsRegistry) -> None:
        """Opening with another key raises DecryptionError."""
        make_table("vault", key="right").insert({"a": 1})

        with pytest.raises(DecryptionError):
            make_table("vault", key="wrong").load()
        assert metrics_registry.decryption_failures_total._value.get() == 1

    def test_plain_reader_of_encrypted_blob(self, make_table: TableFactory) -> None:
        """An unkeyed table cannot decode an encrypted blob."""
        make_table("vault", key="pw").insert({"a": 1})
        with pytest.raises(CorruptDataError):
            make_table("vault").load()

    def test_tampered_blob(self, make_table: TableFactory) -> None:
        """Modifying the file is detected."""
        table = make_table("vault", key="pw")
        table.insert({"a": 1})
        path = Path(table.location)
        data = bytearray(path.read_bytes())
        data[-1] ^= 0xFF
        path.write_bytes(bytes(data))

        with pytest.raises(DecryptionError):
            table.load()


@pytest.mark.integration
class TestCollaborators:
    """Injected blob stores and instrumentation."""

    def test_memory_blob_store(self, test_config: Config, metrics_registry: MetricsRegistry) -> None:
        """Any BlobStore can back a table."""
        blobs: dict[str, bytes] = {}
        table = PersistentTable(
            "mem",
            blob_store=MemoryBlobStore("mem", blobs),
            config=test_config,
            metrics=metrics_registry,
        )

        assert blobs == {"mem": b""}
        table.insert({"a": 1})
        assert blobs["mem"] == b'[{"a":1}]'
        assert table.location == "memory://mem"

    def test_operation_metrics(self, make_table: TableFactory, metrics_registry: MetricsRegistry) -> None:
        """Operations are counted by outcome."""
        table = make_table("metered")
        table.insert({"a": 1})
        with pytest.raises(IndexOutOfRangeError):
            table.remove(7)

        counter = metrics_registry.operations_total
        assert counter.labels(operation="insert", status="success")._value.get() == 1
        assert counter.labels(operation="remove", status="error")._value.get() == 1
        assert metrics_registry.blob_bytes_written_total._value.get() == len(b'[{"a":1}]')

    def test_repr(self, make_table: TableFactory) -> None:
        """repr names the table and its location."""
        table = make_table("shown", key="pw")
        assert "shown" in repr(table)
        assert "encrypted=True" in repr(table)
