"""Structured logging for the cacher."""
