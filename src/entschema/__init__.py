"""entschema - infer entity property schemas from map corpora and engine source."""

__version__ = "0.1.0"
