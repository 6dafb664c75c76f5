"""Parsing and display helpers for race times and paces."""

from __future__ import annotations

import math
import re

_NON_DIGITS = re.compile(r"[^0-9]")


def parse_time(text: str | None) -> float:
    """Parse a time string into seconds.

    Accepts 'M:SS', 'H:MM:SS' and bare digits, where the last two digits are
    seconds ('1920' -> 19:20). Fractional seconds are kept in the colon
    forms ('4:59.7' -> 299.7). Anything unparseable returns 0.
    """
    if not text:
        return 0
    text = text.strip()

    if ":" not in text:
        digits = _NON_DIGITS.sub("", text)
        if not digits:
            return 0
        if len(digits) <= 2:
            return int(digits)
        return int(digits[:-2]) * 60 + int(digits[-2:])

    parts = text.split(":")
    try:
        numbers = [float(p) if p.strip() else 0.0 for p in parts]
    except ValueError:
        return 0
    if not all(math.isfinite(n) for n in numbers):
        return 0
    if len(numbers) == 2:
        return numbers[0] * 60 + numbers[1]
    if len(numbers) == 3:
        return numbers[0] * 3600 + numbers[1] * 60 + numbers[2]
    return 0


def format_time(seconds: float | None) -> str:
    """Format seconds as 'M:SS', or '--:--' for missing/invalid values."""
    if not seconds or math.isnan(seconds) or math.isinf(seconds):
        return "--:--"
    m = int(seconds // 60)
    s = int(math.floor(seconds % 60 + 0.5))
    if s == 60:
        m += 1
        s = 0
    return f"{m}:{s:02d}"


def format_duration(seconds: float | None) -> str:
    """Format seconds as H:MM:SS when at least an hour, else M:SS."""
    if not seconds or math.isnan(seconds) or math.isinf(seconds):
        return "--:--"
    total = int(round(seconds))
    h, rem = divmod(total, 3600)
    m, s = divmod(rem, 60)
    if h > 0:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m}:{s:02d}"


def pace_display(sec_per_km: float | None) -> str:
    """Format seconds-per-km as 'M:SS/km' for display."""
    if not sec_per_km or sec_per_km <= 0 or math.isnan(sec_per_km):
        return "n/a"
    return f"{format_time(sec_per_km)}/km"
