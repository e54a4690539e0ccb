"""Back-office dashboard backend: monthly financial metrics engine."""

__version__ = "0.1.0"
