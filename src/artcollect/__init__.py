"""Article bookmarking with confirmation-gated deletes."""

__version__ = "0.1.0"
