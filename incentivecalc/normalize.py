"""Shared normalization utilities for incentivecalc.

The portal stores the same value under several spellings (enum names,
display labels, legacy aliases). These helpers map them onto one
canonical form before models or policy tables are compared.
"""

import re

_ROLE_ALIASES: dict[str, str] = {
    "first": "first",
    "first_author": "first",
    "corresponding": "corresponding",
    "corresponding_author": "corresponding",
    "first_and_corresponding": "first_and_corresponding",
    "first_and_corresponding_author": "first_and_corresponding",
    "first_corresponding": "first_and_corresponding",
    "co": "co_author",
    "co_author": "co_author",
    "coauthor": "co_author",
}

_QUARTILE_ALIASES: dict[str, str] = {
    "top1": "Top 1%",
    "top 1": "Top 1%",
    "top 1%": "Top 1%",
    "top1%": "Top 1%",
    "top_1_": "Top 1%",
    "top5": "Top 5%",
    "top 5": "Top 5%",
    "top 5%": "Top 5%",
    "top5%": "Top 5%",
    "top_5_": "Top 5%",
    "q1": "Q1",
    "q2": "Q2",
    "q3": "Q3",
    "q4": "Q4",
}

_DISTRIBUTION_ALIASES: dict[str, str] = {
    "role_based": "role_based",
    "author_role_based": "role_based",
    "position_based": "position_based",
    "author_position_based": "position_based",
}


def _slug(value: str) -> str:
    text = value.lower().strip()
    text = re.sub(r"[\s&-]+", "_", text)
    return text


def normalize_role(role: str) -> str:
    """Map a role label onto its canonical value.

    Args:
        role: Raw role string, e.g. ``"first_author"`` or ``"Co-Author"``.

    Returns:
        One of ``first``, ``corresponding``, ``first_and_corresponding``
        or ``co_author``. Unknown labels are returned slugified so that
        model validation can reject them.
    """
    slug = _slug(role)
    return _ROLE_ALIASES.get(slug, slug)


def normalize_quartile(quartile: str | None) -> str | None:
    """Normalize a quartile label to its display form.

    Args:
        quartile: Raw quartile such as ``"q1"``, ``"Top_1_"`` or
            ``"Top 5%"``.

    Returns:
        ``Q1``..``Q4``, ``Top 1%``, ``Top 5%``, the stripped input when
        it is not a known alias, or None for empty input.
    """
    if quartile is None:
        return None
    text = quartile.strip()
    if not text:
        return None
    return _QUARTILE_ALIASES.get(text.lower(), text)


def normalize_distribution_method(method: str | None) -> str | None:
    """Normalize a policy distribution method label.

    Args:
        method: Raw method, e.g. ``"author_position_based"``.

    Returns:
        ``role_based``, ``position_based`` or None when unrecognised.
    """
    if not method:
        return None
    return _DISTRIBUTION_ALIASES.get(_slug(method))
