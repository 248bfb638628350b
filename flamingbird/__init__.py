"""FlamingBird: a transparent rewriting web proxy."""

__version__ = "1.0.0"
