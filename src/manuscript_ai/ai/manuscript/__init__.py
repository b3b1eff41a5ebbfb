"""
Manuscript chat module.

Ingests one PDF manuscript per session, extracts axioms and snippets, and
answers questions about it with keyword-retrieved context and streaming
responses.
"""
