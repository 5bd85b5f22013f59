"""Mount a network share and keep it mounted."""

__version__ = "0.1.0"
