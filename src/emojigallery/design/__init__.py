"""Colour roles and stylesheet generation."""
