"""Packaged case tables."""
