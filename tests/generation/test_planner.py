"""Tests for artifact planning."""

import pytest
from hypothesis import given, settings as hypothesis_settings, strategies as st

from dotpkg.errors import (
    DocumentIdError,
    InvalidGeneratedNameError,
    MissingSingletonDocumentError,
    NamingCollisionError,
    UnknownDocumentTypeError,
)
from dotpkg.generation.planner import PlanOptions, plan_artifacts
from dotpkg.schema import CacheItem, DataCache

from conftest import build_cache, build_schema


def _contents(plan) -> dict[str, str]:
    return {artifact.file_path: artifact.content for artifact in plan.artifacts}


class TestPlanCollection:
    """Tests for a schema with a single collection type."""

    def test_document_files_and_barrel(self, make_schema, make_cache):
        schema = make_schema(Post=False)
        cache = make_cache(("a", "Post", "h1"), ("2024/b", "Post", "h2"))

        plan = plan_artifacts(schema, cache)
        contents = _contents(plan)

        assert "data/Post/a.json" in contents
        assert "data/Post/_2024__b.json" in contents
        barrel = contents["data/allPosts.mjs"]
        assert "import _2024__b from './Post/_2024__b.json'\n" in barrel
        assert "import a from './Post/a.json'\n" in barrel
        assert "export const allPosts = [_2024__b, a]\n" in barrel
        assert "export const allDocuments = [...allPosts]\n" in contents["data/index.mjs"]

    def test_artifact_order_is_fixed(self, make_schema, make_cache):
        plan = plan_artifacts(make_schema(Post=False), make_cache(("a", "Post", "h1")))

        assert plan.file_paths == [
            "package.json",
            "types/index.d.ts",
            "types/index.mjs",
            "data/index.d.ts",
            "data/index.mjs",
            "data/allPosts.mjs",
            "data/Post/a.json",
        ]

    def test_only_document_files_carry_hashes(self, make_schema, make_cache):
        plan = plan_artifacts(
            make_schema(Post=False), make_cache(("a", "Post", "h1"), ("b", "Post", "h2"))
        )

        assert [(a.file_path, a.document_hash) for a in plan.document_artifacts] == [
            ("data/Post/a.json", "h1"),
            ("data/Post/b.json", "h2"),
        ]

    def test_directories(self, make_schema, make_cache):
        plan = plan_artifacts(make_schema(Post=False, Author=True), make_cache(("me", "Author", "h")))

        assert plan.directories == ("types", "data", "data/Author", "data/Post")

    def test_empty_collection_is_valid(self, make_schema):
        plan = plan_artifacts(make_schema(Post=False), DataCache())

        assert "export const allPosts = []\n" in _contents(plan)["data/allPosts.mjs"]
        assert plan.document_count == 0

    def test_document_json_is_stored_verbatim(self, make_schema, make_cache):
        plan = plan_artifacts(make_schema(Post=False), make_cache(("a", "Post", "h1")))

        assert _contents(plan)["data/Post/a.json"] == (
            '{\n  "_id": "a",\n  "type": "Post",\n  "title": "a"\n}'
        )

    def test_custom_type_field(self, make_schema, make_cache):
        cache = make_cache(("a", "Post", "h1"), type_field="kind")

        plan = plan_artifacts(make_schema(Post=False), cache, PlanOptions(type_field_name="kind"))

        assert '  kind: "Post"\n' in _contents(plan)["types/index.d.ts"]

    def test_package_options_reach_manifest(self, make_schema):
        options = PlanOptions(package_name="dot-site", package_version="1.2.3")

        manifest = _contents(plan_artifacts(make_schema(Post=False), DataCache(), options))[
            "package.json"
        ]

        assert '"name": "dot-site"' in manifest
        assert '"version": "1.2.3"' in manifest


class TestPlanSingleton:
    """Tests for singleton document types."""

    def test_singleton_reexports_its_document(self, make_schema, make_cache):
        plan = plan_artifacts(make_schema(Settings=True), make_cache(("settings", "Settings", "h")))
        contents = _contents(plan)

        assert "data/Settings/settings.json" in contents
        assert (
            "export { default as settings } from './Settings/settings.json'\n"
            in contents["data/settings.mjs"]
        )
        assert "export const allDocuments = [settings]\n" in contents["data/index.mjs"]

    def test_missing_singleton_document_fails(self, make_schema):
        with pytest.raises(MissingSingletonDocumentError) as exc_info:
            plan_artifacts(make_schema(Settings=True), DataCache())

        assert exc_info.value.type_name == "Settings"
        assert exc_info.value.kind == "invariant"

    def test_first_singleton_document_wins(self, make_schema, make_cache):
        cache = make_cache(("b", "Settings", "h2"), ("a", "Settings", "h1"))

        plan = plan_artifacts(make_schema(Settings=True), cache)

        assert "from './Settings/a.json'" in _contents(plan)["data/settings.mjs"]


class TestPlanInvariants:
    """Tests for snapshots that cannot produce a consistent package."""

    def test_unknown_document_type(self, make_schema, make_cache):
        with pytest.raises(UnknownDocumentTypeError) as exc_info:
            plan_artifacts(make_schema(Post=False), make_cache(("a", "Page", "h")))

        assert exc_info.value.document_id == "a"
        assert exc_info.value.type_name == "Page"

    def test_colliding_file_names(self, make_schema, make_cache):
        cache = make_cache(("a/b", "Post", "h1"), ("a__b", "Post", "h2"))

        with pytest.raises(NamingCollisionError) as exc_info:
            plan_artifacts(make_schema(Post=False), cache)

        assert exc_info.value.generated_name == "a__b"

    def test_colliding_document_variable_names(self, make_schema, make_cache):
        cache = make_cache(("hello-world", "Post", "h1"), ("helloWorld", "Post", "h2"))

        with pytest.raises(NamingCollisionError) as exc_info:
            plan_artifacts(make_schema(Post=False), cache)

        assert exc_info.value.generated_name == "helloWorld"

    def test_colliding_type_variable_names(self, make_schema):
        with pytest.raises(NamingCollisionError) as exc_info:
            plan_artifacts(make_schema(Post=False, Posts=False), DataCache())

        assert exc_info.value.generated_name == "allPosts"

    @pytest.mark.parametrize("document_id", ["ü", "日本語", "---"])
    def test_document_without_usable_import_name(self, make_schema, make_cache, document_id):
        """A collection document must never drop out of its barrel."""
        with pytest.raises(InvalidGeneratedNameError) as exc_info:
            plan_artifacts(make_schema(Post=False), make_cache((document_id, "Post", "h")))

        assert exc_info.value.source == document_id
        assert exc_info.value.generated_name == ""

    def test_reserved_word_import_name(self, make_schema, make_cache):
        with pytest.raises(InvalidGeneratedNameError) as exc_info:
            plan_artifacts(make_schema(Post=False), make_cache(("default", "Post", "h")))

        assert exc_info.value.generated_name == "default"

    def test_singleton_document_id_is_not_an_import_name(self, make_schema, make_cache):
        """Singletons re-export their document, so any file name works."""
        plan = plan_artifacts(make_schema(Settings=True), make_cache(("ü", "Settings", "h")))

        assert "from './Settings/ü.json'" in _contents(plan)["data/settings.mjs"]

    def test_type_name_must_be_identifier(self, make_schema):
        with pytest.raises(InvalidGeneratedNameError) as exc_info:
            plan_artifacts(make_schema(**{"my-type": False}), DataCache())

        assert exc_info.value.source == "my-type"

    def test_type_variable_name_must_not_be_reserved(self, make_schema, make_cache):
        with pytest.raises(InvalidGeneratedNameError) as exc_info:
            plan_artifacts(make_schema(Default=True), make_cache(("d", "Default", "h")))

        assert exc_info.value.generated_name == "default"

    def test_duplicate_document_id(self, make_schema):
        """Two snapshot entries for one id would race for the same data file."""
        cache = DataCache(
            cache_items_map={
                "first": CacheItem(document={"_id": "a", "type": "Post"}, document_hash="h1"),
                "second": CacheItem(document={"_id": "a", "type": "Post"}, document_hash="h2"),
            }
        )

        with pytest.raises(DocumentIdError) as exc_info:
            plan_artifacts(make_schema(Post=False), cache)

        assert exc_info.value.keys == ["first", "second"]
        assert exc_info.value.kind == "invariant"

    @pytest.mark.parametrize(
        "document",
        [{"type": "Post"}, {"_id": "", "type": "Post"}, {"_id": 7, "type": "Post"}],
    )
    def test_document_without_string_id(self, make_schema, document):
        cache = DataCache(cache_items_map={"x": CacheItem(document=document, document_hash="h")})

        with pytest.raises(DocumentIdError) as exc_info:
            plan_artifacts(make_schema(Post=False), cache)

        assert exc_info.value.keys == ["x"]


class TestPlanDeterminism:
    """Plans depend only on the content of their inputs."""

    DOCUMENTS = [
        ("a", "Post", "h1"),
        ("2024/b", "Post", "h2"),
        ("c", "Post", "h3"),
        ("me", "Author", "h4"),
        ("site", "Settings", "h5"),
    ]

    @hypothesis_settings(max_examples=25)
    @given(st.permutations(DOCUMENTS), st.permutations(["Post", "Author", "Settings"]))
    def test_insertion_order_does_not_matter(self, documents, type_order):
        singletons = {"Post": False, "Author": True, "Settings": True}
        expected = plan_artifacts(
            build_schema(**singletons), build_cache(*self.DOCUMENTS)
        )

        shuffled_schema = build_schema(**{name: singletons[name] for name in type_order})
        plan = plan_artifacts(shuffled_schema, build_cache(*documents))

        assert plan == expected
