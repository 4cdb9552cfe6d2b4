"""Core controller infrastructure."""
