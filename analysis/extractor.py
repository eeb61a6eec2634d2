"""Seed Logical Files from SQL ``CREATE TABLE`` statements."""
from __future__ import annotations

import logging
import re
from typing import List

from .schema import DataElement, LogicalFile, LogicalFileType

logger = logging.getLogger(__name__)

TABLE_PATTERN = r'CREATE TABLE IF NOT EXISTS\s+"(\w+)"\s*\(([\s\S]+?)\);'
COLUMN_PATTERN = r'"(\w+)"\s+(\w+)'


def extract_schema(sql: str) -> List[LogicalFile]:
    """Return one ILF per ``CREATE TABLE IF NOT EXISTS "name" (...);``.

    Columns are every quoted identifier followed by a bare word, in order
    of appearance. Constraint lines are not filtered out: a named
    constraint such as ``CONSTRAINT "pk_t" PRIMARY KEY ("id")`` yields a
    spurious ``pk_t PRIMARY`` column.
    """
    table_re = re.compile(TABLE_PATTERN)
    column_re = re.compile(COLUMN_PATTERN)

    logical_files: List[LogicalFile] = []
    for table_match in table_re.finditer(sql):
        table_name, body = table_match.group(1), table_match.group(2)
        data_elements = [
            DataElement(name=column.group(1), dtype=column.group(2))
            for column in column_re.finditer(body)
        ]
        logical_files.append(LogicalFile(
            name=table_name,
            type=LogicalFileType.ILF,
            data_elements=data_elements,
            description="",
        ))
        logger.debug("Extracted table %s with %d columns", table_name, len(data_elements))

    declared = len(re.findall(r"\bCREATE\s+TABLE\b", sql, re.IGNORECASE))
    if declared > len(logical_files):
        logger.error(
            "Malformed input: %d CREATE TABLE statement(s) found but only %d could be parsed",
            declared, len(logical_files),
        )

    return logical_files
