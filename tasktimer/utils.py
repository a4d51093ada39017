"""
Utility functions for callback data and command argument parsing.
"""
from __future__ import annotations

from typing import Optional


def parse_callback_data(data: str, expected_parts: int = 3) -> Optional[tuple[str, ...]]:
    """Parse callback data into parts. Returns None if invalid."""
    parts = data.split(":", expected_parts - 1)
    return tuple(parts) if len(parts) >= expected_parts else None


def command_args(text: Optional[str]) -> str:
    """Return everything after the command word, stripped ("" when absent)."""
    text = (text or "").strip()
    if not text:
        return ""
    parts = text.split(maxsplit=1)
    if len(parts) < 2:
        return ""
    return parts[1].strip()
