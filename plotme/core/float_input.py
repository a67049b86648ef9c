#!/usr/bin/env python3
"""
Text-backed numeric input for PlotMe.

The text typed by the user is the single source of truth. The numeric value is
parsed on demand and never cached, so partially typed or invalid text is kept
exactly as entered.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class FloatInput:
    """Editable numeric value stored as text."""
    input: str

    def parse(self) -> Optional[float]:
        """
        Parse the current text as a float.

        Returns:
            The parsed value, or None if the text is not a number
        """
        try:
            return float(self.input)
        except ValueError:
            return None

    def parse_or(self, default: float) -> float:
        value = self.parse()
        return default if value is None else value

    def set_value(self, value: float) -> None:
        """Store a number using the shortest round-tripping representation."""
        self.input = repr(float(value))

    def to_dict(self) -> Dict[str, Any]:
        return {'input': self.input}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FloatInput':
        return cls(input=str(data['input']))
