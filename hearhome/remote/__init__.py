"""Remote backend client."""

from hearhome.remote.client import HearHomeClient

__all__ = ["HearHomeClient"]
