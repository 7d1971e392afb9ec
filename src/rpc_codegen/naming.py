#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Identifier helpers shared by the generators."""

import keyword
import re
from functools import lru_cache
from typing import Iterable, List

# Names that would clash with the generated code itself.
GENERATED_RESERVED = frozenset({
    "self", "cls", "type", "call", "_call", "calls", "execute", "from_json", "version",
})

_CAMEL_BOUNDARY = re.compile(r'(?<=[a-z0-9])(?=[A-Z])')
_NON_IDENT = re.compile(r'[^0-9a-zA-Z_]+')


@lru_cache(maxsize=None)
def to_snake_case(name: str) -> str:
    """`blockHash` -> `block_hash`, `fee-rate` -> `fee_rate`."""
    name = _CAMEL_BOUNDARY.sub("_", name)
    name = _NON_IDENT.sub("_", name)
    name = re.sub(r'_+', "_", name).strip("_")
    return name.lower()


@lru_cache(maxsize=None)
def to_pascal_case(name: str) -> str:
    """`getblockcount` -> `Getblockcount`, `get_block_count` -> `GetBlockCount`."""
    parts = [p for p in _NON_IDENT.sub("_", name).split("_") if p]
    return "".join(p[0].upper() + p[1:] for p in parts)


def is_reserved(name: str, extra: Iterable[str] = ()) -> bool:
    return keyword.iskeyword(name) or name in extra


def escape_identifier(name: str, extra: Iterable[str] = GENERATED_RESERVED) -> str:
    """Escape a reserved name with a trailing underscore, keeping it recognizable."""
    if is_reserved(name, extra):
        return name + "_"
    return name


def python_identifier(name: str, fallback: str = "value", extra: Iterable[str] = GENERATED_RESERVED) -> str:
    """Turn a wire name into a usable snake_case identifier."""
    ident = to_snake_case(name) or fallback
    if ident[0].isdigit():
        ident = f"{fallback}_{ident}"
    return escape_identifier(ident, extra)


def unique_identifiers(names: Iterable[str]) -> List[str]:
    """Suffix repeats with _2, _3 ... in order of appearance."""
    seen = {}
    result = []
    for name in names:
        if name not in seen:
            seen[name] = 1
            result.append(name)
            continue
        n = seen[name] + 1
        while f"{name}_{n}" in seen:
            n += 1
        seen[name] = n
        seen[f"{name}_{n}"] = 1
        result.append(f"{name}_{n}")
    return result
