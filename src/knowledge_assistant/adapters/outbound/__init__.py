"""Outbound adapters: embedding, completion and vector store backends."""
