"""seedgraph: dependency-ordered synthetic rows for relational schemas."""

__version__ = "0.1.0"
