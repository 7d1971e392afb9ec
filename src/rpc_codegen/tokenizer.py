#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Help-Text Tokenizer

Splits a multi-method help dump into one (name, raw_text) block per method.

A trimmed line that is non-empty, is not a `==` heading and starts with a
lowercase letter is a method signature: it closes the previous block and
opens a new one named after its first word. Other non-blank lines are kept
verbatim in the current block. Blank and heading lines are dropped and
never end a block or a section.

Arguments and Result bodies contain value lines such as
`n    (numeric) the count` that would look like signatures. Inside those
bodies a lowercase line whose first token is followed by a type note stays
content. Any other lowercase line, including one right after an
`Examples:` body, starts the next method.

Usage:
    from rpc_codegen.tokenizer import tokenize
    blocks = tokenize(Path("help.txt").read_text())
"""

import logging
import re
from typing import List, NamedTuple, Optional

from .errors import NoMethodsError

log = logging.getLogger("rpc-codegen.tokenizer")

HEADING_MARKER = "="
SECTION_HEADERS = ("Arguments:", "Result", "Returns:", "Examples:")
VALUE_BODY_HEADERS = ("Arguments:", "Result", "Returns:")

VALUE_LINE_RE = re.compile(
    r'^[a-z][\w|.]*,?\s+\((numeric|string|boolean|hex|json [a-z]+)[^)]*\)'
)


class MethodBlock(NamedTuple):
    name: str
    raw_text: str


def is_section_header(stripped: str) -> bool:
    """True for lines such as `Arguments:`, `Result:` or `Result (if verbose=1):`."""
    if not stripped.startswith(SECTION_HEADERS):
        return False
    return stripped.endswith(":")


def is_signature(stripped: str) -> bool:
    if not stripped or stripped.startswith(HEADING_MARKER):
        return False
    return stripped[0].islower()


def is_value_line(stripped: str) -> bool:
    """`n    (numeric) the count`, `true|false  (boolean)`, `null  (json null)`."""
    return bool(VALUE_LINE_RE.match(stripped))


def tokenize(text: str) -> List[MethodBlock]:
    """Split a help dump into method blocks, raising NoMethodsError if there are none."""
    blocks: List[MethodBlock] = []
    name: Optional[str] = None
    lines: List[str] = []
    in_value_body = False

    def flush():
        if name is not None:
            blocks.append(MethodBlock(name, "\n".join(lines)))

    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith(HEADING_MARKER):
            continue

        if is_signature(stripped) and not (in_value_body and is_value_line(stripped)):
            flush()
            name = stripped.split()[0]
            lines = [line.rstrip()]
            in_value_body = False
            continue

        if name is None:
            log.debug(f"Skipping text before first signature: {stripped[:60]}")
            continue

        if is_section_header(stripped):
            in_value_body = stripped.startswith(VALUE_BODY_HEADERS)
        lines.append(line.rstrip())

    flush()

    if not blocks:
        raise NoMethodsError()
    log.debug(f"Tokenized {len(blocks)} method blocks")
    return blocks
