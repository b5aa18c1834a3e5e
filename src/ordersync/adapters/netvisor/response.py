"""Targeted lookups in Netvisor XML responses."""

from __future__ import annotations

import xml.etree.ElementTree as ET  # noqa: N817

DESTINATION_KEY_TAGS = ("NetvisorKey", "InsertedDataIdentifier")


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def find_element_text(body: str, tag: str) -> str | None:
    """Return the text of the first element named ``tag`` (case-insensitive).

    ``None`` means the element is absent or the body is not XML at all; callers
    treat both the same way.
    """

    try:
        root = ET.fromstring(body)  # noqa: S314
    except ET.ParseError:
        return None
    wanted = tag.lower()
    for element in root.iter():
        if isinstance(element.tag, str) and _local_name(element.tag).lower() == wanted:
            return (element.text or "").strip()
    return None


def extract_destination_key(body: str) -> str:
    for tag in DESTINATION_KEY_TAGS:
        value = find_element_text(body, tag)
        if value:
            return value
    return ""


def response_status(body: str) -> str | None:
    """Return Netvisor's ``ResponseStatus/Status`` value, e.g. ``OK`` or ``FAILED``."""

    status = find_element_text(body, "Status")
    return status.upper() if status else None
