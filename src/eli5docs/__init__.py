"""eli5docs: explain-like-I'm-5 documentation for marked Java code."""

__version__ = "0.1.0"
