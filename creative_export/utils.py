import re
from datetime import date
from typing import Any

PLACEHOLDER_RE = re.compile(r"\{\{\s*([A-Za-z0-9_.]+)\s*\}\}")


def to_slug(text: str) -> str:
    """Convert text to slug format: lowercase, no spaces.

    Example: "Summer Sale" -> "summersale"
    """
    return text.lower().replace(" ", "")


def today_date() -> str:
    """Return today's date (YYYY-MM-DD)."""
    return date.today().isoformat()


def find_placeholders(value: Any) -> set[str]:
    """Names of all {{placeholder}} tokens in a string, list or dict value."""
    if isinstance(value, str):
        return set(PLACEHOLDER_RE.findall(value))
    if isinstance(value, dict):
        return set().union(*(find_placeholders(v) for v in value.values()))
    if isinstance(value, (list, tuple)):
        return set().union(*(find_placeholders(v) for v in value))
    return set()


def fill_placeholders(value: Any, values: dict[str, Any]) -> Any:
    """Substitute {{name}} tokens with entries from `values`.

    Unknown names are left in place so callers can detect them.
    """
    if isinstance(value, str):
        def substitute(match: re.Match) -> str:
            name = match.group(1)
            replacement = values.get(name)
            if replacement is None or not isinstance(replacement, (str, int, float)):
                return match.group(0)
            return str(replacement)

        return PLACEHOLDER_RE.sub(substitute, value)
    if isinstance(value, dict):
        return {k: fill_placeholders(v, values) for k, v in value.items()}
    if isinstance(value, list):
        return [fill_placeholders(v, values) for v in value]
    return value
