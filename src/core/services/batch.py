"""Batch processing of credentials.

This module drives digest -> range query -> match for a sequence of
secrets. It is a generator so results stream out as they are produced and
the caller stays in control of presentation (printing, progress, export).

Failure policy:
- A secret that cannot be digested is skipped and reported.
- A failed range query aborts the rest of the batch (`BatchAbortedError`).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator

from core.domain.errors import BatchAbortedError, EncodingError, QueryError
from core.domain.models import BatchOutcome, ExposureResult, SkippedCredential
from core.interfaces.range_source import RangeSource
from core.services.digest import digest, range_prefix
from core.services.matching import match

logger = logging.getLogger(__name__)

Secret = bytes | str


@dataclass
class BatchHooks:
    """Optional callbacks for UI layers (progress, warnings)."""

    item_start: Callable[[int], None] | None = None
    skipped: Callable[[SkippedCredential], None] | None = None


def _as_iterable(secrets: Secret | Iterable[Secret]) -> Iterable[Secret]:
    if isinstance(secrets, (str, bytes)):
        return [secrets]
    return secrets


def process(
    secrets: Secret | Iterable[Secret],
    source: RangeSource,
    *,
    hooks: BatchHooks | None = None,
) -> Iterator[BatchOutcome]:
    """Yield one outcome per secret, in input order.

    `secrets` may be a single value, a list or any (possibly unbounded)
    iterable. Items are pulled lazily; once a query fails nothing more is
    read from the input.
    """

    hooks = hooks or BatchHooks()
    completed = 0

    for position, secret in enumerate(_as_iterable(secrets), start=1):
        if hooks.item_start:
            hooks.item_start(position)

        try:
            value = digest(secret)
        except EncodingError as exc:
            skipped = SkippedCredential(position=position, reason=str(exc))
            logger.warning("item %d skipped: %s", position, exc)
            if hooks.skipped:
                hooks.skipped(skipped)
            yield skipped
            continue

        prefix = range_prefix(value)
        try:
            response = source.query(prefix)
        except QueryError as exc:
            logger.error("range query for item %d failed, aborting batch: %s", position, exc)
            raise BatchAbortedError(
                f"batch aborted at item {position}: {exc}",
                position=position,
                completed=completed,
                prefix=prefix,
            ) from exc

        exposed, count = match(value, response)
        logger.debug("item %d: prefix %s, %d records, exposed=%s", position, prefix, len(response), exposed)
        completed += 1
        yield ExposureResult(position=position, exposed=exposed, count=count)


def check_secret(secret: Secret, source: RangeSource) -> ExposureResult:
    """Check a single secret.

    Raises `EncodingError` for a malformed secret and `QueryError` if the
    range query fails.
    """

    value = digest(secret)
    exposed, count = match(value, source.query(range_prefix(value)))
    return ExposureResult(position=1, exposed=exposed, count=count)
