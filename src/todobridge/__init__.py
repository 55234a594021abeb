"""todobridge: typed todo records over a schema-less document store."""

__version__ = "0.1.0"
