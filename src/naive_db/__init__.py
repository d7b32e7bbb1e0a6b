"""
naive_db - Embeddable Flat-File Table Engine

A single-process record store that keeps each table in one flat file of
fixed-width slots, with binary-search lookup by identifier, ordered
append/compaction mutation, and a small SQL-like statement surface.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"
