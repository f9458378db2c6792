"""conversion-graph - order in-repo packages for conversion, leaves first."""

__version__ = "1.0.0"
