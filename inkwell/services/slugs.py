#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Slug helpers shared by article and workspace id allocation."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
import unicodedata
from datetime import datetime

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


# -----------------------------------------------------------------------------

def slugify(value: str, max_length: int = 60) -> str:
    """'Héllo, World!' → 'hello-world'."""
    value = unicodedata.normalize("NFKD", value.lower())
    value = "".join(ch for ch in value if not unicodedata.combining(ch))
    value = _NON_ALNUM.sub("-", value).strip("-")
    return value[:max_length].strip("-")


def article_id_for(title: str, stamp: datetime) -> str:
    """Base article id: title slug plus the creation time to the minute."""
    return f"{slugify(title) or 'article'}-{stamp.strftime('%Y%m%d%H%M')}"


def with_suffix(base: str, n: int, max_length: int) -> str:
    """Candidate ``n`` for a base id: n=1 is the base itself, then base-2, base-3, ..."""
    if n <= 1:
        return base[:max_length]
    suffix = f"-{n}"
    return f"{base[:max_length - len(suffix)]}{suffix}"


# -----------------------------------------------------------------------------
