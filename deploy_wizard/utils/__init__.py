"""Utility functions for Deploy Wizard."""

from deploy_wizard.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
