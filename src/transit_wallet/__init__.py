"""Google Wallet transit pass demo."""

__version__ = "0.1.0"
