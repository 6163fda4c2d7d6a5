"""Authentication: password hashing, login lockout and the auth endpoints."""
