"""Tests for file and variable naming rules."""

import pytest
from hypothesis import given, strategies as st

from dotpkg.errors import InvalidGeneratedNameError, NamingCollisionError
from dotpkg.generation.naming import (
    camel_case,
    check_unique_names,
    check_valid_identifiers,
    document_variable_name,
    get_data_variable_name,
    id_to_file_name,
    is_valid_identifier,
    lowercase_first_char,
    uppercase_first_char,
)
from dotpkg.schema import DocumentTypeDef


ID_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789/_-."


class TestIdToFileName:
    """Tests for id_to_file_name."""

    def test_plain_identifier_is_unchanged(self):
        assert id_to_file_name("hello-world") == "hello-world"

    def test_leading_digit_gets_underscore(self):
        assert id_to_file_name("2024") == "_2024"

    def test_path_separators_become_double_underscores(self):
        assert id_to_file_name("posts/nested/hello.md") == "posts__nested__hello.md"

    def test_digit_prefix_applied_before_flattening(self):
        assert id_to_file_name("2024/b") == "_2024__b"

    def test_digit_after_separator_is_not_prefixed(self):
        assert id_to_file_name("a/2024") == "a__2024"

    @given(st.text(alphabet=ID_ALPHABET, min_size=1, max_size=30))
    def test_result_is_single_path_segment(self, document_id):
        """Escaped names never contain a path separator or start with a digit."""
        result = id_to_file_name(document_id)

        assert "/" not in result
        assert not result[0].isdigit()


class TestCamelCase:
    """Tests for camel_case and document_variable_name."""

    def test_single_word_is_lowercased(self):
        assert camel_case("Hello") == "hello"

    def test_punctuation_splits_words(self):
        assert camel_case("hello-world.md") == "helloWorldMd"

    def test_underscores_are_kept(self):
        assert camel_case("_2024__b") == "_2024__b"

    def test_case_changes_split_words(self):
        assert camel_case("myHTTPServer") == "myHttpServer"

    def test_word_starting_with_digit_gets_underscore(self):
        assert camel_case("post-2nd") == "post_2nd"

    def test_document_variable_name_escapes_first(self):
        assert document_variable_name("2024/b") == "_2024__b"
        assert document_variable_name("posts/hello-world.md") == "posts__helloWorldMd"
        assert document_variable_name("a") == "a"


class TestDataVariableName:
    """Tests for get_data_variable_name."""

    def test_collection_is_all_plus_plural(self):
        assert get_data_variable_name(DocumentTypeDef(name="Post")) == "allPosts"

    def test_collection_irregular_plural(self):
        assert get_data_variable_name(DocumentTypeDef(name="Category")) == "allCategories"

    def test_singleton_is_lowercased_singular(self):
        doc_def = DocumentTypeDef(name="Author", is_singleton=True)

        assert get_data_variable_name(doc_def) == "author"

    def test_singleton_settings_keeps_its_name(self):
        doc_def = DocumentTypeDef(name="Settings", is_singleton=True)

        assert get_data_variable_name(doc_def) == "settings"

    def test_singleton_plural_name_is_singularized(self):
        doc_def = DocumentTypeDef(name="Pages", is_singleton=True)

        assert get_data_variable_name(doc_def) == "page"

    def test_first_char_helpers(self):
        assert lowercase_first_char("SiteConfig") == "siteConfig"
        assert uppercase_first_char("siteConfig") == "SiteConfig"
        assert lowercase_first_char("") == ""


class TestCheckUniqueNames:
    """Tests for check_unique_names."""

    def test_distinct_names_pass(self):
        check_unique_names([("a", "a"), ("b", "b")])

    def test_same_source_twice_is_allowed(self):
        check_unique_names([("a", "x"), ("a", "x")])

    def test_collision_raises_with_both_sources(self):
        with pytest.raises(NamingCollisionError) as exc_info:
            check_unique_names([("a/b", "a__b"), ("a__b", "a__b")])

        assert exc_info.value.generated_name == "a__b"
        assert exc_info.value.sources == ["a/b", "a__b"]
        assert exc_info.value.kind == "invariant"

    @given(st.lists(st.text(alphabet=ID_ALPHABET, min_size=1, max_size=12), max_size=20))
    def test_file_names_are_injective_or_flagged(self, ids):
        """Either every id gets its own file name or the collision is reported."""
        pairs = [(document_id, id_to_file_name(document_id)) for document_id in ids]
        file_names = {name for _, name in pairs}

        if len(file_names) == len(set(ids)):
            check_unique_names(pairs)
        else:
            with pytest.raises(NamingCollisionError):
                check_unique_names(pairs)


class TestIdentifiers:
    """Tests for identifier validation of generated names."""

    @pytest.mark.parametrize("name", ["allPosts", "_2024__b", "$ref", "settings"])
    def test_valid_identifiers(self, name):
        assert is_valid_identifier(name)

    @pytest.mark.parametrize("name", ["", "allMy-types", "2024", "default", "class"])
    def test_invalid_identifiers(self, name):
        assert not is_valid_identifier(name)

    def test_non_ascii_id_has_no_usable_variable_name(self):
        """Ids without ASCII letters or digits camel-case to nothing."""
        assert document_variable_name("ü") == ""
        assert not is_valid_identifier(document_variable_name("---"))

    def test_check_reports_first_invalid_name(self):
        with pytest.raises(InvalidGeneratedNameError) as exc_info:
            check_valid_identifiers([("z", "class"), ("a", "")])

        assert exc_info.value.source == "a"
        assert exc_info.value.generated_name == ""
        assert exc_info.value.kind == "invariant"
