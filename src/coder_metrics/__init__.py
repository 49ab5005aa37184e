"""coder-metrics: weighted GitHub contribution scores rendered as HTML."""

__version__ = "0.1.0"
