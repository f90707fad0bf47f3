"""Helpers shared by the route modules."""
