"""Utility modules for the automation service."""

from utils.wait_utils import WaitUtils

__all__ = [
    "WaitUtils",
]
