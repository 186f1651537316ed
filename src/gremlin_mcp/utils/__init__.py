"""Helpers: driver result normalization."""
