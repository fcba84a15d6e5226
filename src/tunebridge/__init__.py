"""tunebridge - adapter between a media host and a local music catalog backend."""

__version__ = "1.1.0"
