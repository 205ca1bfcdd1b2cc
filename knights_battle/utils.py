"""Utility functions for formatting and display."""


def format_gold(gold: int) -> str:
    """Format a gold amount with K/M/B suffix."""
    if gold >= 1_000_000_000:
        return f"{gold / 1_000_000_000:.1f}B"
    if gold >= 1_000_000:
        return f"{gold / 1_000_000:.1f}M"
    if gold >= 10_000:
        return f"{gold / 1_000:.1f}K"
    return f"{gold:,}"


def format_time(seconds: int) -> str:
    """Format seconds into human-readable time (hours/minutes/seconds)."""
    if seconds >= 3600:
        hours = seconds // 3600
        minutes = (seconds % 3600) // 60
        return f"{hours}h {minutes}m"
    if seconds >= 60:
        minutes = seconds // 60
        secs = seconds % 60
        return f"{minutes}m {secs}s"
    return f"{seconds}s"


def format_percent(chance: float) -> str:
    return f"{chance * 100:.1f}%"
