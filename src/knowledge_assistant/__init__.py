"""Knowledge Assistant - retrieval-augmented question answering over a knowledge base."""

__version__ = "1.0.0"
