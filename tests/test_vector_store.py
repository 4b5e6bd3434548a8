import pytest

from vita.src.core.errors import ConfigurationError
from vita.src.database.vector_store import VitaVectorStore, build_where


@pytest.fixture
def local_store(tmp_path):
    return VitaVectorStore(uri=str(tmp_path / "lancedb"), table_name="vita_docs")


def test_build_where_escapes_quotes():
    assert build_where({"source": "./client's.txt"}) == "source = './client''s.txt'"


def test_build_where_rejects_bad_column():
    with pytest.raises(ValueError):
        build_where({"source; DROP": "x"})


def test_search_before_ingestion_is_a_configuration_error(local_store):
    with pytest.raises(ConfigurationError, match="vita_docs"):
        local_store.search([1.0, 0.0, 0.0], k=1)


def test_add_then_search_respects_source_filter(local_store):
    added = local_store.add_documents(
        texts=["Oats before training.", "Sleep eight hours.", "Unrelated note."],
        vectors=[[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.99, 0.01, 0.0]],
        metadatas=[{"source": "./client.txt", "chunk_index": 0}, {"source": "./client.txt", "chunk_index": 1}, {"source": "./other.txt", "chunk_index": 0}],
    )
    assert added == 3
    assert local_store.count() == 3

    hits = local_store.search([1.0, 0.0, 0.0], k=1, filter_dict={"source": "./client.txt"})

    assert len(hits) == 1
    assert hits[0].text == "Oats before training."
    assert hits[0].metadata["source"] == "./client.txt"
    assert hits[0].score == pytest.approx(1.0, abs=1e-4)


def test_results_are_ordered_by_descending_score(local_store):
    local_store.add_documents(
        texts=["near", "far"],
        vectors=[[1.0, 0.1, 0.0], [0.0, 1.0, 0.2]],
        metadatas=[{"source": "./client.txt"}, {"source": "./client.txt"}],
    )

    hits = local_store.search([1.0, 0.0, 0.0], k=2, filter_dict={"source": "./client.txt"})

    assert [h.text for h in hits] == ["near", "far"]
    assert hits[0].score > hits[1].score


def test_no_matching_source_returns_empty_list(local_store):
    local_store.add_documents(texts=["Oats."], vectors=[[1.0, 0.0, 0.0]], metadatas=[{"source": "./other.txt"}])

    assert local_store.search([1.0, 0.0, 0.0], k=1, filter_dict={"source": "./client.txt"}) == []


def test_mismatched_lengths_are_rejected(local_store):
    with pytest.raises(ValueError):
        local_store.add_documents(texts=["a", "b"], vectors=[[1.0, 0.0]], metadatas=[{}, {}])


def test_drop_table(local_store):
    local_store.add_documents(texts=["a"], vectors=[[1.0, 0.0]], metadatas=[{"source": "./client.txt"}])

    local_store.drop_table()

    assert local_store.count() == 0
    with pytest.raises(ConfigurationError):
        local_store.search([1.0, 0.0])


def test_missing_table_is_reported_by_require_table(local_store):
    assert local_store.table is None

    with pytest.raises(ConfigurationError, match="vita_docs"):
        local_store.require_table()


def test_existing_table_is_opened_on_connect(tmp_path, local_store):
    local_store.add_documents(texts=["a"], vectors=[[1.0, 0.0]], metadatas=[{"source": "./client.txt"}])

    reopened = VitaVectorStore(uri=str(tmp_path / "lancedb"), table_name="vita_docs")

    reopened.require_table()
    assert reopened.count() == 1


def test_delete_documents_removes_only_the_matching_source(local_store):
    local_store.add_documents(
        texts=["Oats.", "Sleep.", "Other."],
        vectors=[[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]],
        metadatas=[{"source": "./client.txt"}, {"source": "./client.txt", "chunk_index": 1}, {"source": "./other.txt"}],
    )

    assert local_store.delete_documents({"source": "./client.txt"}) == 2
    assert local_store.count() == 1
    assert local_store.search([1.0, 0.0], k=3, filter_dict={"source": "./client.txt"}) == []


def test_delete_documents_before_any_table_is_a_no_op(local_store):
    assert local_store.delete_documents({"source": "./client.txt"}) == 0
