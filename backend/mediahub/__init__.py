"""MediaHub backend: authentication, sessions and admin user management."""

__version__ = "0.1.0"
