"""ESS Tax: Australian Employee Share Scheme tax engine."""

__version__ = "0.1.0"
