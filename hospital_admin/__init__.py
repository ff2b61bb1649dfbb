"""Admin client for the hospital appointment and queue backend."""

__version__ = "0.1.0"
