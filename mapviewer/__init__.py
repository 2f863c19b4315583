"""Map viewer import and elevation profile core.

Reads KML and GPX documents into styled, editable features for the map
viewer, and derives elevation profile statistics (ascent, descent,
slope distance, hiking time) from the altimetry profile service.
"""

__version__ = "0.1.0"
