import pytest
from datetime import datetime, timedelta, timezone

from indexer.doc_store import DocumentStore, DocumentNotFound
from indexer.models import Document


def make_doc(doc_id="guide", **overrides):
    fields = dict(
        id=doc_id,
        title="Onboarding Guide",
        description="First steps for new engineers",
        content="# Onboarding\n\nRequest VPN access on day one.",
        category="Process",
        tags=["onboarding", "vpn"],
        version="1.0",
    )
    fields.update(overrides)
    return Document(**fields)


class TestDocumentStore:
    """Test suite for the in-memory document store"""

    @pytest.fixture
    def store(self):
        return DocumentStore([
            make_doc("guide"),
            make_doc("schema", title="Schema", category="Database", tags=["schema"]),
            make_doc("deploy", title="Deploy", category="DevOps", tags=["docker"]),
        ])

    def test_upsert_then_get_round_trip(self):
        """Fields survive a round trip and last_updated is refreshed"""
        store = DocumentStore()
        before = datetime.now(timezone.utc)
        store.upsert(make_doc())

        doc = store.get_by_id("guide")
        assert doc is not None
        assert doc.title == "Onboarding Guide"
        assert doc.description == "First steps for new engineers"
        assert doc.content.startswith("# Onboarding")
        assert doc.category == "Process"
        assert doc.tags == ["onboarding", "vpn"]
        assert doc.version == "1.0"
        assert doc.last_updated >= before

    def test_upsert_ignores_caller_timestamp(self):
        stale = datetime(2001, 1, 1, tzinfo=timezone.utc)
        store = DocumentStore()
        store.upsert(make_doc(last_updated=stale))
        assert store.get_by_id("guide").last_updated > stale + timedelta(days=365)

    def test_upsert_replaces_all_fields(self, store):
        store.upsert(make_doc("guide", title="New Title", tags=["other"], version=None))

        doc = store.get_by_id("guide")
        assert doc.title == "New Title"
        assert doc.tags == ["other"]
        assert doc.version is None
        assert len(store) == 3

    def test_upsert_accepts_malformed_documents(self):
        """The store does no validation of required fields"""
        store = DocumentStore()
        store.upsert(make_doc("", title=""))
        assert "" in store
        assert store.get_by_id("").title == ""

    def test_get_by_id_missing(self, store):
        assert store.get_by_id("nope") is None
        assert store.get_by_id("GUIDE") is None

    def test_returned_documents_are_copies(self, store):
        doc = store.get_by_id("guide")
        doc.title = "mutated"
        doc.tags.append("mutated")

        fresh = store.get_by_id("guide")
        assert fresh.title == "Onboarding Guide"
        assert "mutated" not in fresh.tags

    def test_stored_document_not_aliased_to_input(self):
        store = DocumentStore()
        original = make_doc()
        store.upsert(original)
        original.tags.append("leaked")
        assert "leaked" not in store.get_by_id("guide").tags

    def test_delete(self, store):
        assert store.delete("guide") is True
        assert store.get_by_id("guide") is None
        assert store.delete("guide") is False
        assert store.delete("never-existed") is False

    def test_get_all(self, store):
        assert sorted(doc.id for doc in store.get_all()) == ["deploy", "guide", "schema"]

    def test_get_categories(self, store):
        store.upsert(make_doc("second-process"))
        assert store.get_categories() == {"Process", "Database", "DevOps"}

    def test_get_summaries_omit_content(self, store):
        summaries = store.get_summaries()
        assert len(summaries) == 3
        for summary in summaries:
            assert not hasattr(summary, "content")
            assert not hasattr(summary, "last_updated")
        by_id = {s.id: s for s in summaries}
        assert by_id["schema"].title == "Schema"
        assert by_id["guide"].version == "1.0"

    def test_document_not_found_message(self):
        error = DocumentNotFound("abc")
        assert error.doc_id == "abc"
        assert str(error) == "Document not found: abc"


class TestSeedDocuments:
    """Test loading the store from YAML seed files"""

    def test_packaged_seed_documents(self):
        from config.settings import DEFAULT_CONFIG
        store = DocumentStore.from_seed_file(DEFAULT_CONFIG["seed"]["documents"])

        assert len(store) == 3
        assert store.get_categories() == {"API", "Database", "DevOps"}
        auth = store.get_by_id("api-auth")
        assert auth.title == "Authentication API"
        assert auth.version == "2.0"
        assert "jwt" in auth.tags
        assert "Authorization: Bearer <your-token>" in auth.content

    def test_missing_seed_file_gives_empty_store(self, tmp_path):
        store = DocumentStore.from_seed_file(tmp_path / "absent.yaml")
        assert len(store) == 0

    def test_invalid_entries_are_skipped(self, tmp_path):
        seed = tmp_path / "seed.yaml"
        seed.write_text(
            "documents:\n"
            "  - id: ok\n"
            "    title: Fine\n"
            "    tags: [a]\n"
            "  - title: no id here\n"
            "  - just a string\n",
            encoding="utf-8",
        )
        store = DocumentStore.from_seed_file(seed)
        assert len(store) == 1
        assert store.get_by_id("ok").title == "Fine"

    def test_unparseable_seed_file(self, tmp_path):
        seed = tmp_path / "broken.yaml"
        seed.write_text("documents: [unclosed", encoding="utf-8")
        assert len(DocumentStore.from_seed_file(seed)) == 0

    @pytest.mark.parametrize("body", [
        "- id: a\n  title: A\n",
        "documents: not-a-list\n",
        "just a string\n",
    ])
    def test_wrong_shape_seed_file(self, tmp_path, body):
        seed = tmp_path / "shape.yaml"
        seed.write_text(body, encoding="utf-8")
        assert len(DocumentStore.from_seed_file(seed)) == 0

    def test_seed_path_is_directory(self, tmp_path):
        assert len(DocumentStore.from_seed_file(tmp_path)) == 0
