"""Concrete metadata connections."""

from .soap import SoapMetadataConnection

__all__ = ["SoapMetadataConnection"]
