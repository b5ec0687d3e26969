"""pinned: date-pinned API version negotiation and payload migration."""

__version__ = "0.1.0"
