"""Detect X.509 certificates whose EC keys use explicit curve parameters."""

__version__ = "0.1.0"
__all__ = ["__version__"]