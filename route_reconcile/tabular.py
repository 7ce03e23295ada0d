"""
Comma separated text <-> DataFrame conversion for the OpenFlights feeds.

The feeds quote free-text fields but never escape anything, so the rules here are
deliberately narrow: a line is split on every comma that is followed by an even
number of double quotes, one leading and one trailing quote is removed from each
field and any comma left inside a value is dropped. Output is written without
quoting; values are expected to be comma free already.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Callable, Iterable, List, Sequence, Tuple, TypeVar

import pandas as pd

# Marker written for values that are absent (e.g. unused equipment slots)
MISSING_VALUE = "\\N"

_LINE_BREAK = re.compile(r"\r?\n")
_UNQUOTED_COMMA = re.compile(r',(?=(?:(?:[^"]*"){2})*[^"]*$)')
_OUTER_QUOTES = re.compile(r'(^")|("$)')

T = TypeVar("T")


def partition(items: Iterable[T], predicate: Callable[[T], bool]) -> Tuple[List[T], List[T]]:
    """Split ``items`` into ``(non_matching, matching)`` preserving order."""
    non_matching: List[T] = []
    matching: List[T] = []
    for item in items:
        (matching if predicate(item) else non_matching).append(item)
    return non_matching, matching


def clean_field(value: str) -> str:
    return _OUTER_QUOTES.sub("", value).replace(",", "")


def split_line(line: str) -> List[str]:
    return [clean_field(field) for field in _UNQUOTED_COMMA.split(line)]


def decode(text: str, column_names: Sequence[str], has_header: bool) -> pd.DataFrame:
    """Parse delimited text into a frame whose columns are ``column_names``."""
    lines = _LINE_BREAK.split(text)
    if has_header:
        lines = lines[1:]
    rows = [split_line(line) for line in lines if len(line) > 0]
    return pd.DataFrame(rows, columns=list(column_names), dtype=object)


def encode(frame: pd.DataFrame, has_header: bool) -> str:
    lines: List[str] = []
    if has_header:
        lines.append(",".join(str(column) for column in frame.columns))
    for row in frame.itertuples(index=False, name=None):
        lines.append(",".join(MISSING_VALUE if pd.isna(value) else str(value) for value in row))
    return "\n".join(lines)


def read_table(path: Path, column_names: Sequence[str], has_header: bool) -> pd.DataFrame:
    return decode(Path(path).read_text(encoding="utf-8"), column_names, has_header)


def write_table(frame: pd.DataFrame, path: Path, has_header: bool = True) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(encode(frame, has_header), encoding="utf-8")
