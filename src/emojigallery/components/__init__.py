"""Reusable PyQt6 widgets."""
