"""
Koku Travel - Location Data-Quality Pipeline

Batch jobs over the locations table: duplicate detection and cleanup, and
the city-region corruption audit.
"""

__version__ = "0.1.0"
