"""EventHub: event discovery and ticket booking service."""
__version__ = "1.0.0"
