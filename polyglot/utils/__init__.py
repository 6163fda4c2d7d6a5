"""Shared helpers for the Polyglot server."""
