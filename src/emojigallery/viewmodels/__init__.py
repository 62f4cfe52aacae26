"""View models exposing observable UI state."""
