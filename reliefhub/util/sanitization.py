"""Sanitisation helpers.

Free-text listing fields (title, description, location) are shown to
every visitor, so markup is removed before they are stored.
"""
import re

TAG_RE = re.compile(r"<[^>]+>")


def strip_tags(text: str) -> str:
    """Remove HTML tags from a free-text listing field.

    Parameters
    ----------
    text: str
        Submitted title, description or location. May be empty.

    Returns
    -------
    str
        The text without tags and surrounding whitespace. Empty input
        yields an empty string.
    """
    if not text:
        return ""
    return TAG_RE.sub("", text).strip()
