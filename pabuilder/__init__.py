"""Build-time resolver that provides a linkable static PortAudio."""

__version__ = "0.3.0"
