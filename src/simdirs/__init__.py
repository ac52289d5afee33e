"""Find and remove subdirectories whose names are near-duplicates."""

__version__ = "0.1.0"
