"""crazy-notes -- voice memos transcribed and titled automatically."""

__version__ = '0.1.0'
