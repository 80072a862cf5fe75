"""Git helpers for refreshing vendored documentation."""

from .vendor import DocsVendor, VendorResult

__all__ = ["DocsVendor", "VendorResult"]
