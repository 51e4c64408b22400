"""Tests for batched retrieval through the metadata connection."""

from unittest.mock import AsyncMock

import pytest

from sf_profile_full.core.types import Failure, Success
from sf_profile_full.exceptions import MetadataCallError, ProfileBuildError
from sf_profile_full.pipeline.retriever import (
    ProfileMetadataService,
    as_record_list,
    chunked,
)

pytestmark = pytest.mark.unit


def _connection(*responses):
    connection = AsyncMock()
    connection.read.side_effect = list(responses)
    return connection


def _values(results):
    assert all(isinstance(r, Success) for r in results)
    return [r.value for r in results]


class TestChunked:
    def test_splits_into_contiguous_chunks(self):
        names = [f"P{i}" for i in range(23)]

        chunks = chunked(names)

        assert [len(c) for c in chunks] == [10, 10, 3]
        assert [n for c in chunks for n in c] == names

    def test_empty_input_has_no_chunks(self):
        assert chunked([]) == []

    @pytest.mark.parametrize("size", [0, 11, -1])
    def test_rejects_sizes_outside_limit(self, size):
        with pytest.raises(ValueError, match="Batch size"):
            chunked(["A"], size)


class TestAsRecordList:
    def test_none_is_empty(self):
        assert as_record_list(None) == []

    def test_single_record_is_wrapped(self):
        assert as_record_list({"fullName": "Admin"}) == [{"fullName": "Admin"}]

    def test_list_is_copied(self):
        records = [{"fullName": "A"}, None]

        result = as_record_list(records)

        assert result == records
        assert result is not records


class TestBatching:
    @pytest.mark.asyncio
    async def test_fifteen_names_make_two_calls(self):
        connection = _connection([], [])
        names = [f"Profile{i}" for i in range(15)]

        await ProfileMetadataService(connection).retrieve(names)

        assert connection.read.await_count == 2
        first, second = connection.read.await_args_list
        assert first.args == ("Profile", names[:10])
        assert second.args == ("Profile", names[10:])

    @pytest.mark.asyncio
    async def test_exactly_ten_names_make_one_call(self):
        connection = _connection([])

        await ProfileMetadataService(connection).retrieve([f"P{i}" for i in range(10)])

        assert connection.read.await_count == 1
        assert len(connection.read.await_args.args[1]) == 10

    @pytest.mark.asyncio
    async def test_no_names_make_no_calls(self):
        connection = _connection()

        results = await ProfileMetadataService(connection).retrieve([])

        assert results == []
        connection.read.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_smaller_batch_size(self):
        connection = _connection([], [], [])

        await ProfileMetadataService(connection, batch_size=2).retrieve(["A", "B", "C", "D", "E"])

        assert [c.args[1] for c in connection.read.await_args_list] == [
            ["A", "B"],
            ["C", "D"],
            ["E"],
        ]

    def test_rejects_batch_size_above_limit(self):
        with pytest.raises(ValueError):
            ProfileMetadataService(AsyncMock(), batch_size=11)

    @pytest.mark.asyncio
    async def test_results_keep_batch_order_across_calls(self):
        connection = _connection(
            [{"fullName": f"P{i}", "custom": True} for i in range(10)],
            [{"fullName": f"P{i}", "custom": False} for i in range(10, 13)],
        )

        results = await ProfileMetadataService(connection).retrieve(
            [f"P{i}" for i in range(13)]
        )

        assert [p.full_name for p in _values(results)] == [f"P{i}" for i in range(13)]


class TestRecords:
    @pytest.mark.asyncio
    async def test_single_record_response_is_normalized(self):
        connection = _connection(
            {
                "fullName": "Admin",
                "custom": False,
                "userPermissions": [{"enabled": True, "name": "ViewSetup"}],
            }
        )

        results = await ProfileMetadataService(connection).retrieve(["Admin"])

        (profile,) = _values(results)
        assert profile.full_name == "Admin"
        assert "<Profile" in profile.xml
        assert "ViewSetup" in profile.xml

    @pytest.mark.asyncio
    async def test_null_entries_are_skipped(self):
        connection = _connection([None, {"fullName": "Admin"}])

        results = await ProfileMetadataService(connection).retrieve(["Admin", "Bad"])

        assert [p.full_name for p in _values(results)] == ["Admin"]

    @pytest.mark.asyncio
    async def test_entries_without_full_name_are_skipped(self):
        connection = _connection([{"fullName": "Admin"}, {"noName": True}])

        results = await ProfileMetadataService(connection).retrieve(["Admin", "Bad"])

        assert [p.full_name for p in _values(results)] == ["Admin"]

    @pytest.mark.asyncio
    async def test_xml_has_declaration_namespace_and_no_full_name(self):
        connection = _connection({"fullName": "Admin", "custom": False})

        (profile,) = _values(await ProfileMetadataService(connection).retrieve(["Admin"]))

        assert profile.xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert "http://soap.sforce.com/2006/04/metadata" in profile.xml
        assert "<fullName>" not in profile.xml

    @pytest.mark.asyncio
    async def test_transport_keys_are_stripped(self):
        connection = _connection(
            {
                "fullName": "Admin",
                "$": {"xsi:type": "Profile"},
                "type": "Profile",
                "custom": False,
                "fieldPermissions": {
                    "$": {"xsi:type": "ProfileFieldLevelSecurity"},
                    "type": "ProfileFieldLevelSecurity",
                    "field": "Account.Name",
                    "editable": True,
                },
            }
        )

        (profile,) = _values(await ProfileMetadataService(connection).retrieve(["Admin"]))

        assert "xsi:type" not in profile.xml
        assert "<type>" not in profile.xml
        assert "Account.Name" in profile.xml
        assert "<editable>true</editable>" in profile.xml

    @pytest.mark.asyncio
    async def test_transport_keys_are_stripped_from_list_items(self):
        connection = _connection(
            {
                "fullName": "Admin",
                "userPermissions": [
                    {"enabled": True, "name": "ViewSetup", "$": {"foo": "bar"}},
                    {"enabled": False, "name": "ModifyAllData", "type": "PermThing"},
                ],
            }
        )

        (profile,) = _values(await ProfileMetadataService(connection).retrieve(["Admin"]))

        assert "ViewSetup" in profile.xml
        assert "ModifyAllData" in profile.xml
        assert "foo" not in profile.xml
        assert "PermThing" not in profile.xml

    @pytest.mark.asyncio
    async def test_primitive_values_render(self):
        connection = _connection(
            {"fullName": "Admin", "custom": False, "description": "A profile", "loginCount": 42}
        )

        (profile,) = _values(await ProfileMetadataService(connection).retrieve(["Admin"]))

        assert "<custom>false</custom>" in profile.xml
        assert "A profile" in profile.xml
        assert "<loginCount>42</loginCount>" in profile.xml

    @pytest.mark.asyncio
    async def test_unrenderable_record_fails_alone(self):
        connection = _connection([{"fullName": "Broken", "": "x"}, {"fullName": "Admin"}])

        results = await ProfileMetadataService(connection).retrieve(["Broken", "Admin"])

        broken, admin = results
        assert isinstance(broken, Failure)
        assert isinstance(broken.error, ProfileBuildError)
        assert broken.error.full_name == "Broken"
        assert isinstance(admin, Success)


class TestCallFailures:
    @pytest.mark.asyncio
    async def test_read_failure_is_wrapped(self):
        connection = AsyncMock()
        connection.read.side_effect = ConnectionError("socket closed")

        with pytest.raises(MetadataCallError, match="readMetadata failed") as ei:
            await ProfileMetadataService(connection).retrieve(["Admin"])

        assert ei.value.operation == "readMetadata"
        assert isinstance(ei.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_failure_in_later_batch_aborts(self):
        connection = AsyncMock()
        connection.read.side_effect = [[{"fullName": "P0"}], MetadataCallError("boom", "readMetadata")]

        with pytest.raises(MetadataCallError, match="boom"):
            await ProfileMetadataService(connection, batch_size=1).retrieve(["P0", "P1"])

    @pytest.mark.asyncio
    async def test_list_names(self):
        connection = AsyncMock()
        connection.list.return_value = [
            {"fullName": "Admin", "type": "Profile"},
            {"type": "Profile"},
            {"fullName": "Standard User", "type": "Profile"},
        ]

        names = await ProfileMetadataService(connection).list_names()

        assert names == ["Admin", "Standard User"]
        connection.list.assert_awaited_once_with("Profile")

    @pytest.mark.asyncio
    async def test_list_single_and_empty_responses(self):
        connection = AsyncMock()
        connection.list.side_effect = [{"fullName": "Admin"}, None]
        service = ProfileMetadataService(connection)

        assert await service.list_names() == ["Admin"]
        assert await service.list_names() == []
