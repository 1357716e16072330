"""
Document processing pipeline.

Extraction, chunking, product identification, per-product analysis,
embedding, and the orchestrator that drives them per document.
"""
