"""Atlas Compliance Engine: GIF-compliant CMS backend."""

__version__ = "0.1.0"
