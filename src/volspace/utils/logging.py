"""
Consistent console output for user-facing summaries.

Library code reports diagnostics through the standard ``logging`` module;
this module only formats the summaries a user explicitly asks for
(e.g. ``VolumeDescriptor.describe``).
"""

from enum import Enum


class MessageType(Enum):
    """Types of messages that can be displayed."""

    INFO = "·"  # General information
    WARNING = "⚡"  # Warning message
    SECTION = "="  # Section header


class ConsoleLogger:
    """
    Console logger for user-facing messages.

    Parameters
    ----------
    log_level : int, default=1
        Logging verbosity level:
        - 0: Silent (no output)
        - 1: Standard (summaries)
        - 2: Verbose (adds details such as full matrices)
    width : int, default=70
        Width for section headers
    indent : str, default="  "
        Indentation string for nested messages

    Examples
    --------
    >>> logger = ConsoleLogger(log_level=1, width=20)
    >>> logger.section("VOLUME")
    <BLANKLINE>
    ====================
    VOLUME
    ====================
    >>> logger.info("Backend: numpy")
    ·  Backend: numpy
    """

    def __init__(self, log_level: int = 1, width: int = 70, indent: str = "  "):
        self.log_level = log_level
        self.width = width
        self.indent = indent

    def _print(self, message: str, min_level: int = 1) -> None:
        """Print message if log level is sufficient."""
        if self.log_level >= min_level:
            print(message, flush=True)

    def section(self, title: str) -> None:
        """Print a major section header."""
        if self.log_level >= 1:
            separator = MessageType.SECTION.value * self.width
            self._print(f"\n{separator}")
            self._print(title)
            self._print(separator)

    def info(self, message: str, indent_level: int = 0, verbose: bool = False) -> None:
        """
        Print an informational message.

        Parameters
        ----------
        message : str
            Information message
        indent_level : int, default=0
            Indentation level (0, 1, 2, ...)
        verbose : bool, default=False
            If True, only show at log_level=2.
        """
        min_level = 2 if verbose else 1
        indent = self.indent * indent_level
        self._print(f"{indent}{MessageType.INFO.value}  {message}", min_level=min_level)

    def warning(self, message: str, indent_level: int = 0) -> None:
        """Print a warning message."""
        indent = self.indent * indent_level
        self._print(f"{indent}{MessageType.WARNING.value}  {message}", min_level=1)

    def result_summary(self, title: str, metrics: dict, indent_level: int = 0) -> None:
        """
        Print a formatted summary of key/value pairs.

        Examples
        --------
        >>> ConsoleLogger().result_summary("Bounds", {"dimensionality": 3, "spacing": 2.0})
        Bounds:
          - dimensionality: 3
          - spacing: 2.0000
        """
        indent = self.indent * indent_level
        self._print(f"{indent}{title}:", min_level=1)

        detail_indent = self.indent * (indent_level + 1)
        for key, value in metrics.items():
            if isinstance(value, float):
                formatted_value = f"{value:.4f}"
            elif isinstance(value, int) and value >= 1000:
                formatted_value = f"{value:,}"
            else:
                formatted_value = str(value)

            self._print(f"{detail_indent}- {key}: {formatted_value}", min_level=1)
