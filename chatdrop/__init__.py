"""Chat attachment ingestion for conversational agents."""

__version__ = "0.3.0"
