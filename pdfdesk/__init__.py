"""PDF Desk: merge, split, images-to-PDF and Word-to-PDF behind a cookie login."""

__version__ = "1.0.0"
