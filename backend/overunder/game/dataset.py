"""Dataset loading for place-name counts.

The counts file is plain text, one location per line::

    150 Oslo
    9999 Nordby

The count comes first, then a single space, then the name. Only the first
token after the count is kept, so names containing spaces are truncated. One
bad line rejects the whole file.
"""

from pathlib import Path
from typing import List, Optional, Union

from .errors import DatasetParseError
from .models import Location


def parse_location(line: str, line_no: Optional[int] = None) -> Location:
    """Parse a single ``"<count> <name>"`` line."""
    parts = line.strip().split(' ')
    raw_count = parts[0]
    if not raw_count:
        raise DatasetParseError('missing count', line, line_no)
    if not (raw_count.isascii() and raw_count.isdigit()):
        raise DatasetParseError(f'count {raw_count!r} is not a non-negative integer', line, line_no)
    if len(parts) < 2 or not parts[1]:
        raise DatasetParseError('missing name', line, line_no)
    return Location(name=parts[1], count=int(raw_count))


def parse_counts(text: str) -> List[Location]:
    return [parse_location(line, line_no) for line_no, line in enumerate(text.splitlines(), start=1)]


def load_counts(path: Union[str, Path]) -> List[Location]:
    """Read and parse a counts file; raises DatasetParseError on the first bad line."""
    with open(path, encoding='utf-8') as f:
        return parse_counts(f.read())
