"""Agent implementations for the intersection simulation."""

from .vehicle import Vehicle

__all__ = ["Vehicle"]
