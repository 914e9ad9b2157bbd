#
# src/tapstream/telemetry/__init__.py
#
"""
Logging setup for tapstream.
"""
from .logger import StructLogger, enable_autoflush, setup_logging

__all__ = ["StructLogger", "enable_autoflush", "setup_logging"]
