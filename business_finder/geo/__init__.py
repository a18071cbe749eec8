"""
Geospatial layer.

Responsibilities:
- Great-circle (haversine) distance between coordinate pairs.
- Attach distances to businesses, filter by radius, sort nearest first.
- Resolve the client's current position once, or report why it is unavailable.
"""
