"""Invoice analytics service: reporting endpoints and chat-with-data over invoice records."""

__version__ = "1.0.0"
