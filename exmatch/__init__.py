"""Exercise name resolution and tutorial video selection."""

__version__ = "0.1.0"
