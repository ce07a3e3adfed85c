"""
Vector Storage using FAISS.

Loads a prebuilt flat L2 index plus a parallel metadata file and answers
top-k similarity queries. Building the index is handled elsewhere; this
module only reads it.

On-disk layout (store_dir):
    index.faiss     FAISS index over L2-normalized embeddings
    metadata.json   list of {"text": ..., "metadata": {...}} in index order
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Protocol

import faiss
import numpy as np

logger = logging.getLogger(__name__)


SearchOutput = tuple[list[str], list[dict], list[float]]


class VectorStore(Protocol):
    """Top-k similarity search over an indexed corpus.

    Returns parallel lists (documents, metadatas, distances) ordered by
    ascending distance.
    """

    def search(self, query: str, k: int) -> SearchOutput:
        ...


class Encoder(Protocol):
    def encode(self, sentences: list[str], convert_to_numpy: bool = True) -> Any:
        ...


class FaissVectorStore:
    """VectorStore over a FAISS index and a sentence-transformers encoder."""

    def __init__(self, index: faiss.Index, chunks: list[dict], encoder: Encoder):
        """Wrap an already loaded index.

        Args:
            index: FAISS index whose row i corresponds to chunks[i]
            chunks: Stored documents, each {"text": str, "metadata": dict}
            encoder: Embedding model with an encode() method
        """
        if index.ntotal != len(chunks):
            raise ValueError(
                f"Index has {index.ntotal} vectors but metadata has {len(chunks)} entries"
            )
        self.index = index
        self.chunks = chunks
        self.encoder = encoder

    @classmethod
    def load(cls, store_dir: Path, model_name: str) -> "FaissVectorStore":
        """Load the index, metadata and embedding model from disk."""
        from sentence_transformers import SentenceTransformer

        store_dir = Path(store_dir)

        index_path = store_dir / "index.faiss"
        logger.info(f"Loading FAISS index from {index_path}...")
        index = faiss.read_index(str(index_path))

        with open(store_dir / "metadata.json", "r", encoding="utf-8") as f:
            chunks = json.load(f)
        logger.info(f"Metadata loaded! {len(chunks)} chunks.")

        logger.info(f"Loading SentenceTransformer model: {model_name}...")
        encoder = SentenceTransformer(model_name)

        return cls(index, chunks, encoder)

    def __len__(self) -> int:
        return len(self.chunks)

    def search(self, query: str, k: int) -> SearchOutput:
        if k <= 0 or not self.chunks:
            return [], [], []

        query_vector = np.asarray(self.encoder.encode([query], convert_to_numpy=True), dtype=np.float32)
        faiss.normalize_L2(query_vector)

        distances, indices = self.index.search(query_vector, min(k, len(self.chunks)))

        documents: list[str] = []
        metadatas: list[dict] = []
        scores: list[float] = []
        for dist, idx in zip(distances[0], indices[0]):
            if idx == -1:
                continue
            chunk = self.chunks[idx]
            documents.append(chunk.get("text", ""))
            metadatas.append(dict(chunk.get("metadata", {})))
            scores.append(float(dist))

        return documents, metadatas, scores


def load_vector_store(store_dir: Path, model_name: str) -> Optional[FaissVectorStore]:
    """Load the store, or return None if it is missing or unreadable."""
    store_dir = Path(store_dir)
    if not (store_dir / "index.faiss").exists():
        logger.warning(f"No vector index found at {store_dir} - retrieval disabled")
        return None

    try:
        return FaissVectorStore.load(store_dir, model_name)
    except Exception as e:
        logger.error(f"Vector DB load error: {e}", exc_info=True)
        return None
