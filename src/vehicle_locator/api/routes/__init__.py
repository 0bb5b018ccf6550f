"""Route group exports."""

from . import geocoding, health, vehicles

__all__ = ["geocoding", "health", "vehicles"]
