"""civic-compass: quiz scoring and data access for the civic alignment app."""

__version__ = "0.1.0"
