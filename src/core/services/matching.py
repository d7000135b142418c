"""Match engine: local comparison of a digest against a range response."""

from __future__ import annotations

from core.domain.models import RangeResponse
from core.services.digest import range_suffix


def match(digest: str, response: RangeResponse) -> tuple[bool, int | None]:
    """Return `(True, count)` if the digest's suffix is in `response`.

    Comparison is case-insensitive and the first matching record wins.

    A matching record with count 0 returns `(False, None)`, not
    `(True, 0)`. With `Add-Padding` the service appends such zero-count
    decoys, so a zero count means "not in the corpus".
    """

    suffix = range_suffix(digest)
    for record in response.records:
        if record.suffix.upper() != suffix:
            continue
        if record.count == 0:
            return False, None
        return True, record.count
    return False, None
