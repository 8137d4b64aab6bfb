"""Project Showcase: a vote-ranked gallery of community side projects."""

__version__ = "0.1.0"
