#
# src/tapstream/telemetry/logger/__init__.py
#
from .base import StructLogger, enable_autoflush, setup_logging

__all__ = ["StructLogger", "enable_autoflush", "setup_logging"]
