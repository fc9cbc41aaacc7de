"""
Frame Parsing Capability
========================

Pluggable function mapping decoded frame text to an ordered field list.

The decoder treats implementations as pure: no shared state, no side
effects. An empty list means zero fields, not an error.
"""

from typing import List, Protocol


class FrameParser(Protocol):
    """
    Protocol for frame parsers used in ProjectFile mode.

    Implementations may be scripted, compiled or table-driven; the
    decoder only relies on ``parse``.
    """

    def parse(self, text: str) -> List[str]:
        """
        Split decoded frame text into fields.

        Args:
            text: Frame text after representation decoding

        Returns:
            Ordered list of field strings
        """
        ...


class SeparatorFrameParser:
    """
    Default parser: split on a fixed separator and trim whitespace.

    Example:
        parser = SeparatorFrameParser(",")
        parser.parse("1.0, 2.5 ,3\\n")  # ["1.0", "2.5", "3"]
    """

    def __init__(self, separator: str = ",") -> None:
        if not separator:
            raise ValueError("separator must not be empty")
        self.separator = separator

    def parse(self, text: str) -> List[str]:
        text = text.strip()
        if not text:
            return []
        return [field.strip() for field in text.split(self.separator)]
