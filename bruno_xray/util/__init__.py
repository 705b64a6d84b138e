"""Shared helpers."""

from bruno_xray.util.security import MaskStrategy, mask_sensitive_values

__all__ = ["MaskStrategy", "mask_sensitive_values"]
