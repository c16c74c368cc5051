"""Turn raw Claude model ids into short display names."""

from __future__ import annotations

import re

RE_PRODUCT_PREFIX = re.compile(r"^claude-")
RE_DATE_SUFFIX = re.compile(r"-\d{8}$")
RE_SEPARATOR = re.compile(r"[-_]")
RE_SPLIT_VERSION = re.compile(r"(?<=\d)\s+(?=\d)")
MARKETING_DELIMITER = "·"


def normalize_model_name(raw_id: str) -> str:
    """Normalize a model id, e.g. ``claude-sonnet-4-5-20250929`` -> ``Sonnet 4.5``.

    New model ids need no table update: the prefix and release date are
    dropped, separators become spaces and split version numbers are joined.
    Picker labels such as ``"Sonnet 4.5 · Best for everyday tasks"`` lose
    everything after the dot.
    """
    name = RE_PRODUCT_PREFIX.sub("", raw_id)
    name = RE_DATE_SUFFIX.sub("", name)
    name = RE_SEPARATOR.sub(" ", name)
    name = RE_SPLIT_VERSION.sub(".", name)

    if MARKETING_DELIMITER in name:
        name = name.split(MARKETING_DELIMITER)[0].strip()

    return " ".join(word[:1].upper() + word[1:] for word in name.split(" "))
