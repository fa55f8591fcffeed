"""Language negotiation for localized labels."""

from collections.abc import Sequence


def parse_accept_language(
    accept_language: str | None,
    supported: Sequence[str] = ("fr", "en"),
    default: str = "fr",
) -> str:
    """
    Parse Accept-Language header to extract the preferred supported language.

    Handles formats like:
    - "fr" -> "fr"
    - "fr-CA" -> "fr"
    - "de-DE,en;q=0.8" -> "en"
    - "en-US,en;q=0.9" -> "en"

    Languages are tried in header order; quality weights only serve to drop
    entries with q=0. Returns `default` when nothing matches.
    """
    if not accept_language:
        return default

    for entry in accept_language.split(","):
        parts = entry.strip().split(";")
        lang = parts[0].split("-")[0].strip().lower()
        if any(p.strip().replace(" ", "") in ("q=0", "q=0.0") for p in parts[1:]):
            continue
        if lang in supported:
            return lang

    return default
