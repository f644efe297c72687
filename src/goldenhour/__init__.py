"""Golden hour and blue hour countdown."""

__version__ = "0.1.0"
