"""TripShare destination suggestion service."""
