"""bpm - Basic Package Manager for source-controlled Go projects."""

__version__ = "0.1.0"
