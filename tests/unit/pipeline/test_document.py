import pytest

from sf_profile_full.constants import METADATA_NAMESPACE
from sf_profile_full.core.types import Failure, ProfileDocument, Success
from sf_profile_full.exceptions import ProfileBuildError
from sf_profile_full.pipeline.document import build_profile_document, get_full_name

pytestmark = pytest.mark.unit


class TestGetFullName:
    def test_returns_name(self):
        assert get_full_name({"fullName": "Admin"}) == "Admin"

    @pytest.mark.parametrize(
        "record",
        [None, "Admin", [], {}, {"noName": True}, {"fullName": ""}, {"fullName": "  "}, {"fullName": 7}],
    )
    def test_missing_or_unusable_name_is_none(self, record):
        assert get_full_name(record) is None


class TestBuildProfileDocument:
    def test_builds_namespaced_single_root_tree(self):
        result = build_profile_document(
            {"$": {"xsi:type": "Profile"}, "fullName": "Admin", "custom": False}
        )

        assert isinstance(result, Success)
        doc = result.value
        assert doc.full_name == "Admin"
        assert doc.record_type == "Profile"
        assert list(doc.tree) == ["Profile"]
        assert doc.body == {"@xmlns": METADATA_NAMESPACE, "custom": False}

    def test_namespace_attribute_comes_first(self):
        result = build_profile_document({"custom": True, "fullName": "Admin", "x": "1"})

        assert isinstance(result, Success)
        assert list(result.value.body) == ["@xmlns", "custom", "x"]

    def test_full_name_is_excluded_from_body(self):
        result = build_profile_document({"fullName": "Admin", "description": "d"})

        assert isinstance(result, Success)
        assert "fullName" not in result.value.body

    def test_only_name_gives_empty_body(self):
        result = build_profile_document({"fullName": "Admin"})

        assert isinstance(result, Success)
        assert result.value.body == {"@xmlns": METADATA_NAMESPACE}

    def test_record_without_name_fails(self):
        result = build_profile_document({"custom": False})

        assert isinstance(result, Failure)
        assert isinstance(result.error, ProfileBuildError)

    def test_custom_record_type_and_namespace(self):
        result = build_profile_document(
            {"fullName": "Ops"}, record_type="PermissionSet", namespace="urn:test"
        )

        assert isinstance(result, Success)
        assert result.value.tree == {"PermissionSet": {"@xmlns": "urn:test"}}


def test_document_rejects_mismatched_root():
    with pytest.raises(ValueError, match="single root"):
        ProfileDocument(full_name="Admin", record_type="Profile", tree={"Other": {}})
