"""ReviewHub: publish and browse company reviews."""

__version__ = "0.3.0"
