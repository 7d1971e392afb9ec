#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Docstring rendering for generated code.

Builds Google-style docstrings (summary, Arguments, Returns, Examples) from
a Method and emits them as safe Python string literals.
"""

from typing import List, Optional

from .schema import Method, Result
from .type_table import TypeTable

INDENT = "    "


def escape_docstring(text: str) -> str:
    """Make arbitrary help text safe inside a triple-quoted literal."""
    text = text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if text.endswith('"'):
        text = text[:-1] + '\\"'
    return text


def docstring_literal(lines: List[str], indent: str = INDENT) -> str:
    """Render lines as an indented docstring literal (without leading indent on line 1)."""
    lines = [line.rstrip() for line in lines]
    while lines and not lines[-1]:
        lines.pop()
    if not lines:
        return '""""""'
    if len(lines) == 1:
        return f'"""{escape_docstring(lines[0])}"""'
    body = [escape_docstring(lines[0])]
    for line in lines[1:]:
        body.append(f"{indent}{escape_docstring(line)}" if line else "")
    body.append(f'{indent}"""')
    return '"""' + "\n".join(body)


def _result_lines(result: Result, table: TypeTable, depth: int = 0) -> List[str]:
    target, _ = table.map_result(result)
    label = result.key_name or "(value)"
    line = f"{INDENT * depth}{label} ({target})"
    if result.description:
        line += f": {result.description}"
    lines = [line]
    for child in result.inner:
        lines.extend(_result_lines(child, table, depth + 1))
    return lines


def method_doc_lines(method: Method, table: TypeTable, summary: Optional[str] = None) -> List[str]:
    """Docstring lines for a client method."""
    description = [line.strip() for line in method.description.splitlines() if line.strip()]
    lines = description or [summary or f"Call the ``{method.name}`` RPC."]

    if method.arguments:
        lines += ["", "Arguments:"]
        for arg in method.arguments:
            target, optional = table.map_argument(arg)
            flag = ", optional" if optional else ""
            entry = f"{INDENT}{arg.name} ({target}{flag})"
            if arg.description:
                entry += f": {arg.description}"
            lines.append(entry)

    if not method.is_void:
        lines += ["", "Returns:"]
        for result in method.results:
            lines.extend(INDENT + line for line in _result_lines(result, table))

    if method.examples:
        lines += ["", "Examples:"]
        lines.extend(f"{INDENT}> {example}" for example in method.examples)
    return lines


def method_docstring(method: Method, table: TypeTable, indent: str = INDENT * 2) -> str:
    return docstring_literal(method_doc_lines(method, table), indent)
