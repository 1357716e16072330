"""
salesdesk: document ingestion and retrieval for the Sales AI and Support AI assistants.

Uploaded documents flow through text extraction, product identification,
per-product analysis and embedding (catalog documents) or chunking and
embedding (support documents). Search and chat requests retrieve the
persisted entities and chunks by cosine similarity.
"""

__version__ = "0.1.0"
