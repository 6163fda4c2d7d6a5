"""
Polyglot Social server package.

Async backend for a language-learning social app: accounts, friend counts,
session-based login with lockout, and a realtime chat channel.
"""

__version__ = "0.1.0"
