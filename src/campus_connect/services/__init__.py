"""Business logic services for Campus Connect."""
