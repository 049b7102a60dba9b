"""Utility helpers.

Logging Utilities:
    - ConsoleLogger: Consistent console logger for user-facing summaries
"""

from volspace.utils.logging import ConsoleLogger, MessageType

__all__ = ["ConsoleLogger", "MessageType"]
