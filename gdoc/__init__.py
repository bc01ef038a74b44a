"""gdoc: cross-referenced AsciiDoc documentation for Go-style source trees."""

__version__ = "0.3.0"
