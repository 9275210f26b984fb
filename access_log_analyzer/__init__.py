"""Parse, filter, sort and summarize combined-format web access logs."""

__version__ = "1.0.0"
