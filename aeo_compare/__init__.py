"""Compare two text snippets with an LLM-backed SEO/AEO analysis."""

__version__ = "1.0.0"
