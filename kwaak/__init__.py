"""Messages, backend commands, file-editing tools and summarizers for coding agents."""

__version__ = "0.10.0"