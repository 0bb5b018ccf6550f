"""Vehicle search errors."""


class InvalidRadiusQuery(ValueError):
    """Radius search parameters rejected before touching the store."""
