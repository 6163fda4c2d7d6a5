"""Async persistence layer for the Polyglot server."""
