"""Error taxonomy for the dashboard core."""

from __future__ import annotations


class TuiError(Exception):
    """Base class for dashboard errors."""


class IoError(TuiError):
    """The terminal could not be configured, restored or drawn to."""


class RenderError(TuiError):
    """A single component failed to draw itself."""


class ChannelError(TuiError):
    """An action was sent on a closed action bus."""


class ConfigError(TuiError, ValueError):
    """Configuration or keybindings are malformed."""
