"""Manuscript AI: retrieval-augmented chat over a single ingested manuscript."""
