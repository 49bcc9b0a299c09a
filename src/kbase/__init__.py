"""kbase — knowledge base CLI for Markdown vaults."""

__version__ = "0.1.0"
