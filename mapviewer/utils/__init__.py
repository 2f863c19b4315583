"""Shared helpers: colours, projections, geodesic lines, renderer styles."""
