"""LinkedIn people search and profile extraction."""

__version__ = "1.0.0"
