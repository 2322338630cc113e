from __future__ import annotations

_BYTE_UNITS = ("KB", "MB", "GB", "TB", "PB", "EB")


def format_bytes(n: int) -> str:
    """1536 -> '1.50 KB'. Binary multiples; values under 1 KiB are printed as-is."""
    n = int(n)
    if abs(n) < 1024:
        return f"{n} B"
    value = float(n)
    unit = _BYTE_UNITS[0]
    for unit in _BYTE_UNITS:
        value /= 1024.0
        if abs(value) < 1024.0:
            break
    return f"{value:.2f} {unit}"


def format_number(n: int) -> str:
    n = int(n)
    if abs(n) >= 1_000_000_000:
        return f"{n / 1_000_000_000:.2f}B"
    if abs(n) >= 1_000_000:
        return f"{n / 1_000_000:.2f}M"
    if abs(n) >= 1_000:
        return f"{n / 1_000:.2f}K"
    return str(n)
