"""
Tests for schema, document and collection validators.
"""

import pytest


class TestValidateSchema:
    """Tests for validate_schema."""

    def test_valid_object_schema(self, post_schema):
        from tupplur.core.validation import validate_schema

        assert validate_schema(post_schema) == (True, post_schema)

    @pytest.mark.parametrize("candidate", [None, "schema", ["type", "object"], 3])
    def test_non_object_is_rejected(self, candidate):
        from tupplur.core.validation import validate_schema

        assert validate_schema(candidate) == (False, "schema must be an object")

    @pytest.mark.parametrize("candidate", [
        {"type": "array", "properties": {}},
        {"type": "object"},
        {"properties": {}},
    ])
    def test_top_level_must_be_object_with_properties(self, candidate):
        from tupplur.core.validation import validate_schema

        is_valid, message = validate_schema(candidate)
        assert is_valid is False
        assert "properties" in message

    def test_invalid_json_schema_is_rejected(self):
        from tupplur.core.validation import validate_schema

        is_valid, message = validate_schema(
            {"type": "object", "properties": {"a": {"type": "nonsense"}}}
        )
        assert is_valid is False
        assert isinstance(message, str) and message


class TestValidateBySchema:
    """Tests for validate_by_schema."""

    def test_valid_document(self, post_schema):
        from tupplur.core.validation import validate_by_schema

        data = {"title": "t", "views": 2}
        assert validate_by_schema(post_schema, data) == (True, data)

    def test_missing_required_field(self, post_schema):
        from tupplur.core.validation import validate_by_schema

        is_valid, message = validate_by_schema(post_schema, {"views": 2})
        assert is_valid is False
        assert "'title' is a required property" in message

    def test_partial_ignores_required(self, post_schema):
        from tupplur.core.validation import validate_by_schema

        assert validate_by_schema(post_schema, {"views": 2}, partial=True) == (
            True,
            {"views": 2},
        )
        assert post_schema["required"] == ["title"]

    def test_partial_still_checks_types(self, post_schema):
        from tupplur.core.validation import validate_by_schema

        is_valid, _ = validate_by_schema(post_schema, {"views": "many"}, partial=True)
        assert is_valid is False

    def test_no_coercion(self, post_schema):
        from tupplur.core.validation import validate_by_schema

        is_valid, message = validate_by_schema(post_schema, {"title": "t", "views": "2"})
        assert is_valid is False
        assert message.startswith("data.views ")

    def test_errors_are_aggregated_with_paths(self, post_schema):
        from tupplur.core.validation import validate_by_schema

        is_valid, message = validate_by_schema(
            post_schema, {"title": 1, "comments": [{"text": "ok"}, {"text": 2}]}
        )
        assert is_valid is False
        assert "data.title " in message
        assert "data.comments[1].text " in message
        assert ", " in message


class TestValidateCollectionName:
    """Tests for validate_collection_name."""

    @pytest.mark.parametrize("name", ["posts", "blog-posts", "a_b.c", "x1"])
    def test_valid_names(self, name):
        from tupplur.core.validation import validate_collection_name

        assert validate_collection_name(name) == (True, name)

    @pytest.mark.parametrize("name", ["", "Posts", "my posts", "a/b", "é", None, 3])
    def test_invalid_names(self, name):
        from tupplur.core.validation import validate_collection_name

        is_valid, message = validate_collection_name(name)
        assert is_valid is False
        assert message == "collection name must be a lowercase uri component"


class TestValidateCollection:
    """Tests for validate_collection and the access validators."""

    def test_access_defaults_to_empty_list(self, post_schema):
        from tupplur.core.validation import validate_collection

        assert validate_collection({"name": "posts", "schema": post_schema}) == (
            True,
            {"name": "posts", "schema": post_schema, "access": []},
        )

    def test_extra_keys_are_dropped(self, post_schema):
        from tupplur.core.validation import validate_collection

        is_valid, collection = validate_collection(
            {"name": "posts", "schema": post_schema, "owner": "me"}
        )
        assert is_valid is True
        assert set(collection) == {"name", "schema", "access"}

    def test_bad_name_is_reported_first(self):
        from tupplur.core.validation import validate_collection

        assert validate_collection({"name": "Bad", "schema": None})[0] is False

    def test_bad_schema(self):
        from tupplur.core.validation import validate_collection

        assert validate_collection({"name": "posts", "schema": {"type": "string"}})[0] is False

    def test_bad_access(self, post_schema):
        from tupplur.core.validation import validate_collection

        is_valid, message = validate_collection(
            {"name": "posts", "schema": post_schema, "access": [{"get": True}]}
        )
        assert is_valid is False
        assert "'key' is a required property" in message

    def test_not_an_object(self):
        from tupplur.core.validation import validate_collection

        assert validate_collection([])[0] is False

    def test_access_rule_flags_must_be_booleans(self):
        from tupplur.core.validation import validate_collection_access

        assert validate_collection_access({"key": "abc", "get": True})[0] is True
        assert validate_collection_access({"key": "abc", "get": "yes"})[0] is False

    def test_access_list(self):
        from tupplur.core.validation import validate_collection_accesses

        assert validate_collection_accesses([{"key": "a"}, {"key": "b"}])[0] is True
        assert validate_collection_accesses({"key": "a"})[0] is False
