"""ListSmith: AI-assisted eBay listing writer."""

__version__ = "0.1.0"
