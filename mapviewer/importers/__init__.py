"""File importers.

Each importer turns document content into features or layers:
- parse_kml: KML documents into features with an EditableFeature
- parse_gpx: GPX waypoints, routes and tracks into styled features
- file_import: format sniffing and layer creation for imported files
"""
