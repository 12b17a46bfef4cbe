"""Health plan comparison and supplemental coverage recommendations."""

__version__ = "0.1.0"
