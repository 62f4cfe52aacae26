"""Configuration constants for the emoji gallery application."""
