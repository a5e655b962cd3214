"""Read-only virtual filesystem over in-memory files and ZIP archives, with WebDAV, HTTP and mount adapters."""

__version__ = "0.1.0"