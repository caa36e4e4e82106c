"""Unit tests for retrieval.indexer module."""

import numpy as np
import pytest

from debaterag.retrieval.chunker import Chunk
from debaterag.retrieval.indexer import FAISSIndex


def _chunks(n: int) -> list[Chunk]:
    return [Chunk(content=f"chunk {i}", metadata={"chunk_index": i}) for i in range(n)]


def _axis(i: int, dimension: int = 8) -> np.ndarray:
    vector = np.zeros(dimension, dtype=np.float32)
    vector[i] = 1.0
    return vector


@pytest.mark.unit
@pytest.mark.parametrize("index_type", ["hnsw", "flat"])
class TestFAISSIndex:
    """Tests for FAISSIndex class."""

    def test_init_custom_dimension(self, index_type):
        index = FAISSIndex(dimension=512, index_type=index_type)

        assert index.dimension == 512
        assert index.index_type == index_type
        assert not index.is_built
        assert index.size == 0

    def test_build_with_valid_inputs(self, index_type, sample_chunks, sample_embeddings):
        index = FAISSIndex(dimension=384, index_type=index_type)
        index.build(sample_chunks, sample_embeddings)

        assert index.is_built
        assert index.size == len(sample_chunks)

    def test_build_normalizes_embeddings(self, index_type):
        """Unnormalised vectors still score as cosine similarity."""
        chunks = [Chunk(content="test")]
        embeddings = np.array([[3.0, 4.0] + [0.0] * 6], dtype=np.float32)

        index = FAISSIndex(dimension=8, index_type=index_type)
        index.build(chunks, embeddings)
        results = index.search(embeddings[0], k=1)

        assert len(results) == 1
        assert results[0][0].content == "test"
        assert results[0][1] == pytest.approx(1.0, abs=1e-5)

    def test_build_with_mismatched_lengths(self, index_type):
        index = FAISSIndex(dimension=8, index_type=index_type)

        with pytest.raises(ValueError):
            index.build(_chunks(2), np.random.rand(3, 8).astype(np.float32))

    def test_build_with_wrong_dimension(self, index_type):
        index = FAISSIndex(dimension=384, index_type=index_type)

        with pytest.raises(ValueError):
            index.build(_chunks(1), np.random.rand(1, 512).astype(np.float32))

    def test_build_empty_inputs(self, index_type):
        index = FAISSIndex(dimension=8, index_type=index_type)
        index.build([], np.empty((0, 8), dtype=np.float32))

        assert index.is_built
        assert index.size == 0
        assert index.search(_axis(0), k=5) == []

    def test_search_orders_by_similarity(self, index_type):
        chunks = [
            Chunk(content="nuclear carbon"),
            Chunk(content="nuclear waste"),
            Chunk(content="homework"),
        ]
        embeddings = np.array(
            [
                [1.0, 0.0] + [0.0] * 6,
                [0.9, 0.1] + [0.0] * 6,
                [0.0, 1.0] + [0.0] * 6,
            ],
            dtype=np.float32,
        )

        index = FAISSIndex(dimension=8, index_type=index_type)
        index.build(chunks, embeddings)
        results = index.search(_axis(0), k=2)

        assert [chunk.content for chunk, _ in results] == ["nuclear carbon", "nuclear waste"]
        assert results[0][1] >= results[1][1]

    def test_k_larger_than_size_returns_everything(self, index_type):
        embeddings = np.eye(8, dtype=np.float32)[:3]

        index = FAISSIndex(dimension=8, index_type=index_type)
        index.build(_chunks(3), embeddings)
        results = index.search(_axis(1), k=10)

        assert len(results) == 3
        assert results[0][0].content == "chunk 1"

    def test_non_positive_k(self, index_type):
        index = FAISSIndex(dimension=8, index_type=index_type)
        index.build(_chunks(3), np.eye(8, dtype=np.float32)[:3])

        assert index.search(_axis(0), k=0) == []
        assert index.search(_axis(0), k=-1) == []

    def test_ties_keep_insertion_order(self, index_type):
        """Identical vectors come back in the order they were added."""
        embeddings = np.tile(_axis(2), (6, 1))

        index = FAISSIndex(dimension=8, index_type=index_type)
        index.build(_chunks(6), embeddings)
        results = index.search(_axis(2), k=4)

        assert [chunk.content for chunk, _ in results] == ["chunk 0", "chunk 1", "chunk 2", "chunk 3"]

    def test_search_before_build(self, index_type):
        index = FAISSIndex(dimension=8, index_type=index_type)

        with pytest.raises(RuntimeError):
            index.search(_axis(0), k=1)

    def test_save_and_load(self, index_type, tmp_index_dir, sample_chunks, sample_embeddings):
        index = FAISSIndex(dimension=384, index_type=index_type)
        index.build(sample_chunks, sample_embeddings)
        path = tmp_index_dir / "debates"
        index.save(path)

        assert path.with_suffix(".index").exists()
        assert path.with_suffix(".json").exists()

        loaded = FAISSIndex.from_disk(path)

        assert loaded.size == index.size
        assert loaded.dimension == 384
        assert loaded.index_type == index_type
        before = index.search(sample_embeddings[3], k=3)
        restored = loaded.search(sample_embeddings[3], k=3)
        assert [c.content for c, _ in restored] == [c.content for c, _ in before]
        assert restored[0][0].metadata == sample_chunks[3].metadata

    def test_save_before_build(self, index_type, tmp_index_dir):
        with pytest.raises(RuntimeError):
            FAISSIndex(dimension=8, index_type=index_type).save(tmp_index_dir / "x")


@pytest.mark.unit
class TestFAISSIndexLoad:
    def test_load_missing_files(self, tmp_index_dir):
        with pytest.raises(FileNotFoundError):
            FAISSIndex(dimension=8).load(tmp_index_dir / "missing")

    def test_hnsw_is_default(self):
        assert FAISSIndex(dimension=8).index_type == "hnsw"
