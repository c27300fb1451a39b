"""releval — relevance alignment and cumulative-gain evaluation for ranked runs."""

__version__ = "0.1.0"
