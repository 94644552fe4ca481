"""Mangia pantry tooling."""
