"""Rule-based smart-contract risk scanner."""

__version__ = "0.1.0"
