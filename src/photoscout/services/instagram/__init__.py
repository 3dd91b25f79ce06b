"""Photo network API access."""

from .client import InstagramClient

__all__ = ["InstagramClient"]
