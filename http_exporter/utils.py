"""Small helpers shared by config and exporters."""
import re
from typing import Any, Dict, Union

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(value: Union[str, int, float]) -> float:
    """
    Parse a duration into seconds.

    Accepts plain numbers (seconds) and Go-style strings such as "10s",
    "1m30s", "250ms" or "1h". Raises ValueError for anything else.
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        raise ValueError(f"invalid duration: {value!r}")

    text = value.strip()
    if text in ("0", ""):
        return 0.0
    try:
        return float(text)
    except ValueError:
        pass

    sign = 1.0
    if text[0] in "+-":
        sign = -1.0 if text[0] == "-" else 1.0
        text = text[1:]

    total = 0.0
    pos = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            raise ValueError(f"invalid duration: {value!r}")
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        pos = match.end()
    if pos != len(text) or pos == 0:
        raise ValueError(f"invalid duration: {value!r}")
    return sign * total


def format_duration(seconds: float) -> str:
    """Render seconds as a short Go-style duration ("1m30s", "250ms")."""
    if seconds == 0:
        return "0s"
    if seconds < 1:
        return f"{seconds * 1000:g}ms"
    minutes, secs = divmod(seconds, 60)
    hours, minutes = divmod(int(minutes), 60)
    out = ""
    if hours:
        out += f"{hours}h"
    if minutes:
        out += f"{minutes}m"
    if secs or not out:
        out += f"{secs:g}s"
    return out


def mask(secret: str) -> str:
    return "*" * len(secret)


def mask_secrets(options: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of an options mapping with every "password" value masked, nested mappings included."""
    masked = {}
    for key, value in options.items():
        if isinstance(value, dict):
            masked[key] = mask_secrets(value)
        elif key == "password":
            masked[key] = mask(str(value))
        else:
            masked[key] = value
    return masked
