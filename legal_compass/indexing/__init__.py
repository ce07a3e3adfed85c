"""
Vector storage components for the Legal Compass engine.

This package contains:
- vector_store: FAISS-backed similarity search over prebuilt indices
"""

from .vector_store import (
    VectorStore,
    FaissVectorStore,
    load_vector_store,
)

__all__ = [
    "VectorStore",
    "FaissVectorStore",
    "load_vector_store",
]
