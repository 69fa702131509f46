# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Member list page parser.

Pattern extraction over the XML text, not a full XML parse:

    member       <steamID64>ID</steamID64>        repeatable, body order
    current page <currentPage>N</currentPage>     first occurrence
    total pages  <totalPages>N</totalPages>       first occurrence

A missing or non-integer page value parses to 0 so a damaged footer never
discards the member IDs already found on the page. Only an optionally signed
run of ASCII digits that fits a signed 32-bit int counts as a page number.
"""

import re
from typing import Optional

from roster_sync.models.domain import PageResult

MEMBER_PATTERN = re.compile(r"<steamID64>(.+?)</steamID64>")
CURRENT_PAGE_PATTERN = re.compile(r"<currentPage>(.+?)</currentPage>")
TOTAL_PAGES_PATTERN = re.compile(r"<totalPages>(.+?)</totalPages>")
PAGE_NUMBER_PATTERN = re.compile(r"[+-]?[0-9]+")

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


def _parse_int(match: Optional[re.Match]) -> int:
    if match is None:
        return 0
    value = match.group(1).strip()
    if not PAGE_NUMBER_PATTERN.fullmatch(value):
        return 0
    number = int(value)
    if not INT32_MIN <= number <= INT32_MAX:
        return 0
    return number


def extract_member_ids(body: str) -> list[str]:
    ids = []
    for match in MEMBER_PATTERN.finditer(body):
        member_id = match.group(1).strip()
        if member_id:
            ids.append(member_id)
    return ids


def parse_page(body: str) -> PageResult:
    return PageResult(
        member_ids=extract_member_ids(body),
        current_page=_parse_int(CURRENT_PAGE_PATTERN.search(body)),
        total_pages=_parse_int(TOTAL_PAGES_PATTERN.search(body)),
    )
