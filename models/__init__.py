"""Model management and provider integrations."""

from .manager import ModelManager

__all__ = ["ModelManager"]
