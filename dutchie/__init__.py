"""dutchie: receipt line extraction and shared expense settlement."""

__version__ = "0.1.0"
