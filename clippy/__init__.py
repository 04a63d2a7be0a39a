"""Visual polygon clip-path builder."""

__version__ = "0.1.0"
