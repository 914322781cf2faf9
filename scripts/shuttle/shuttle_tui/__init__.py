"""Terminal dashboard for Shuttle projects and deployments."""

__version__ = "0.1.0"
