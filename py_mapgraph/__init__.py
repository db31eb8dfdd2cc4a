"""
Closed polygonal map graphs built from clipped Voronoi diagrams.
"""

__version__ = "0.1.0"
