"""Range response parser.

Each line is parsed into a tagged result: a `RangeRecord` or a
`FormatError` value. `parse_range_body` treats the first bad line as a
failure of the whole response, since the corpus format is well formed by
contract.
"""

from __future__ import annotations

from core.domain.errors import FormatError, ResponseFormatError
from core.domain.models import SUFFIX_LENGTH, RangeRecord, RangeResponse, is_hex


def parse_range_line(line: str, *, line_number: int | None = None) -> RangeRecord | FormatError:
    """Parse one `SUFFIX:COUNT` line."""

    fields = line.strip().split(":")
    if len(fields) != 2:
        return FormatError(f"expected exactly one ':' ({len(fields) - 1} found)", line_number=line_number)

    suffix, raw_count = (f.strip() for f in fields)
    if len(suffix) != SUFFIX_LENGTH or not is_hex(suffix):
        return FormatError(f"suffix must be {SUFFIX_LENGTH} hex characters", line_number=line_number)
    # isdecimal() also rejects signs, so negative counts never get this far.
    if not raw_count.isdecimal() or not raw_count.isascii():
        return FormatError("count must be a non-negative integer", line_number=line_number)

    return RangeRecord(suffix=suffix.upper(), count=int(raw_count))


def parse_range_body(prefix: str, body: bytes | str) -> RangeResponse:
    """Parse a raw response body into a `RangeResponse`.

    Raises `ResponseFormatError` when the body is not UTF-8 or any non-empty
    line is malformed.
    """

    if isinstance(body, bytes):
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ResponseFormatError("response body is not valid UTF-8", prefix=prefix) from exc
    else:
        text = body

    records: list[RangeRecord] = []
    for number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        parsed = parse_range_line(line, line_number=number)
        if isinstance(parsed, FormatError):
            raise ResponseFormatError(f"malformed response line {number}: {parsed}", prefix=prefix) from parsed
        records.append(parsed)

    return RangeResponse(prefix=prefix, records=records)
