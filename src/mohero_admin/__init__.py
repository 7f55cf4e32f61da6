"""mohero-admin: administration dashboard backend for MoHero coaching programs."""

__version__ = "0.1.0"
