"""String Analyzer Service - analyze, store and query strings by their properties."""

__version__ = "1.0.0"
