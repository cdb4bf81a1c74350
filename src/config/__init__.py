"""Cacher settings."""
