"""Shared helpers for resource-browser."""

from rb_common.api import BrowserSettings, RBError, configure_logging

__all__ = ["BrowserSettings", "RBError", "configure_logging"]
