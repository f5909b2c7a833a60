"""HearHome sync core: space membership reconciliation and pet attribute simulation."""

__version__ = "0.1.0"
