"""Cell-width helpers for fixed-pitch bar text."""

from __future__ import annotations

from rich.cells import cell_len


def char_width(char: str) -> int:
    """Return the number of terminal columns a single character occupies."""
    return cell_len(char)


def width(text: str) -> int:
    """Return the visual width of text in columns."""
    return sum(char_width(char) for char in text)


def clamp(text: str, target_width: int) -> str:
    """Cut or pad text so that it is exactly target_width columns wide.

    Characters are taken from the start until the next one would not fit.
    When a double-width character would overshoot the target by one column,
    the last accepted character becomes a space so the cut stays aligned.
    Shorter text is padded on the right with spaces.
    """
    target_width = max(0, target_width)
    accepted: list[str] = []
    used = 0
    skipped_wide = False
    for char in text:
        size = char_width(char)
        if used + size > target_width:
            skipped_wide = size == 2
            break
        accepted.append(char)
        used += size
    if skipped_wide and used == target_width - 1 and accepted:
        used -= char_width(accepted.pop())
        accepted.append(" ")
        used += 1
    if used < target_width:
        accepted.append(" " * (target_width - used))
    return "".join(accepted)
