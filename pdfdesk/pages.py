import re
from typing import List, Optional

from .errors import InvalidRangeFormat

_DIGITS_RE = re.compile(r"[0-9]+")


def _positive_int(text: str) -> Optional[int]:
    # ASCII digits only: int() would also take "1_0" or non-Latin numerals.
    text = text.strip()
    if not _DIGITS_RE.fullmatch(text):
        return None
    value = int(text)
    return value if value >= 1 else None


def parse_page_ranges(expression: str, total_pages: int) -> List[int]:
    """
    Resolve a page range expression such as ``"1-3,5,7-9"`` to 0-based indices.

    Tokens are comma separated and stripped; empty tokens are ignored.
    A token with ``-`` is a range ``A-B`` whose bounds must be positive
    integers with ``B >= A``, otherwise the whole expression is rejected with
    :class:`InvalidRangeFormat`. Any other token is a single page number and
    is silently dropped when it is not a positive integer.

    Pages beyond ``total_pages`` are dropped. The result keeps the order in
    which pages first appear; later duplicates are ignored.
    """
    seen = set()
    indexes: List[int] = []

    def add(page: int) -> None:
        if page > total_pages:
            return
        idx = page - 1
        if idx not in seen:
            seen.add(idx)
            indexes.append(idx)

    for part in (expression or "").split(","):
        part = part.strip()
        if not part:
            continue

        if "-" in part:
            start_str, end_str = part.split("-", 1)
            start, end = _positive_int(start_str), _positive_int(end_str)
            if start is None or end is None or end < start:
                raise InvalidRangeFormat()
            # clamp so "1-999999" on a short document stays cheap
            for page in range(start, min(end, total_pages) + 1):
                add(page)
        else:
            page = _positive_int(part)
            if page is not None:
                add(page)

    return indexes
