#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Schema Normalizer

Turns tokenizer blocks or a structured JSON document into the canonical
Method schema. Both paths produce the same tree shape for equivalent input.

Raw help text layout understood here:

    getblockheader "blockhash" ( verbose )
    Short description, possibly several lines.
    Arguments:
    1. "blockhash"    (string, required) The block hash
    2. verbose        (boolean, optional, default=true) true for a json object
    Result (for verbose = true):
    {                                 (json object)
      "hash" : "hex",                 (string) the block hash
      "confirmations" : n,            (numeric) The number of confirmations
    }
    Examples:
    > bitcoin-cli getblockheader "00000000c937..."

Result nesting is recovered from indentation with an explicit frame stack.

Usage:
    from rpc_codegen.normalizer import load_document
    methods = load_document(Path("help.txt").read_text())
"""

import json
import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .errors import MalformedResultError, SchemaFormatError
from .schema import VOID_RESULT, Argument, Method, Result
from .tokenizer import MethodBlock, is_section_header, tokenize
from .type_table import TypeTable, default_type_table

log = logging.getLogger("rpc-codegen.normalizer")

ARGUMENT_RE = re.compile(r'^\s*\d+\.\s+"?([^"\s]+)"?\s*\(([^)]+)\)\s*(.*)$')
LOOSE_ARGUMENT_RE = re.compile(r'^\s*\d+\.\s+"?([^"\s]+)"?\s*(.*)$')
OPTIONAL_WORD_RE = re.compile(r'\boptional\b')
KEY_COLON_RE = re.compile(r'^"([^"]*)"\s*:\s*(.*)$')
TYPE_NOTE_RE = re.compile(r'\(([^)]*)\)\s*(.*)$')
CLOSER_RE = re.compile(r'^[\]\}\s,.]*$')
OPENERS = {"{": "object", "[": "array"}


# ---- Sections -----------------------------------------------------------------

def section_kind(stripped: str) -> Optional[str]:
    """Classify a section header line, or None for ordinary lines."""
    if not is_section_header(stripped):
        return None
    if stripped.startswith("Arguments:"):
        return "arguments"
    if stripped.startswith("Examples:"):
        return "examples"
    return "results"


def split_sections(raw_text: str) -> Tuple[List[str], Dict[str, List[str]]]:
    """Split a block into description lines and the bodies of each section kind.

    Repeated sections of one kind (e.g. several `Result (...)` variants) are
    concatenated in order.
    """
    lines = raw_text.splitlines()[1:]
    description: List[str] = []
    sections: Dict[str, List[str]] = {"arguments": [], "results": [], "examples": []}
    current: Optional[str] = None
    for line in lines:
        kind = section_kind(line.strip())
        if kind:
            current = kind
            continue
        if current is None:
            description.append(line.strip())
        else:
            sections[current].append(line)
    return description, sections


# ---- Arguments ----------------------------------------------------------------

def canonical_tag(type_text: str) -> str:
    """`Json Object` -> `object`; other tags are lower-cased and trimmed."""
    tag = type_text.strip().lower()
    if tag.startswith("json "):
        tag = tag[len("json "):].strip()
    return tag


def parse_argument_line(line: str) -> Optional[Argument]:
    match = ARGUMENT_RE.match(line)
    if match:
        name, type_text, description = match.groups()
        return Argument(
            names=tuple(n for n in name.split("|") if n),
            type_tag=canonical_tag(type_text.split(",")[0]),
            optional=bool(OPTIONAL_WORD_RE.search(type_text.lower())),
            description=description.strip(),
        )
    loose = LOOSE_ARGUMENT_RE.match(line)
    if loose:
        name, description = loose.groups()
        log.debug(f"Argument line without type note, assuming string: {line.strip()}")
        return Argument(names=tuple(n for n in name.split("|") if n),
                        type_tag="string", description=description.strip())
    return None


def parse_arguments(lines: Iterable[str]) -> Tuple[Argument, ...]:
    arguments = []
    for line in lines:
        argument = parse_argument_line(line)
        if argument is None:
            log.debug(f"Skipping argument detail line: {line.strip()[:60]}")
            continue
        arguments.append(argument)
    return tuple(arguments)


# ---- Results ------------------------------------------------------------------

def _depth(line: str) -> int:
    return len(line) - len(line.lstrip())


def _clean_description(text: str) -> str:
    """Drop the value placeholder and type note: `n, (numeric) the height` -> `the height`."""
    note = TYPE_NOTE_RE.search(text)
    if note:
        return note.group(2).strip()
    return text.strip()


def parse_result_line(stripped: str, table: TypeTable, method: Optional[str] = None) -> Result:
    """Build a childless Result from one stripped Result-section line."""
    if stripped.startswith('"'):
        keyed = KEY_COLON_RE.match(stripped)
        if not keyed:
            raise MalformedResultError(stripped, method)
        key_name, text = keyed.group(1), keyed.group(2)
    else:
        key_name, text = "", stripped
    tag = table.infer_tag(text, key_name)
    if tag == table.default_tag and text[:1] in OPENERS:
        tag = OPENERS[text[:1]]
    return Result(
        key_name=key_name,
        type_tag=tag,
        description=_clean_description(text),
        optional=table.infer_optional(text),
    )


def _attach(stack: List[Tuple[int, List[Result]]]) -> None:
    """Pop the top frame and move its children into the parent's last Result."""
    _, children = stack.pop()
    siblings = stack[-1][1]
    parent = siblings[-1]
    siblings[-1] = Result(
        key_name=parent.key_name,
        type_tag=parent.type_tag,
        description=parent.description,
        inner=parent.inner + tuple(children),
        optional=parent.optional,
    )


def build_result_tree(lines: Iterable[str], table: Optional[TypeTable] = None,
                      method: Optional[str] = None) -> Tuple[Result, ...]:
    """Build the Result forest for a Result section from indentation alone.

    Each frame is (depth, children). A frame is closed by any line at its own
    depth or shallower, so siblings never nest into each other; the seed frame
    at index 0 is never closed.
    """
    table = table or default_type_table()
    stack: List[Tuple[int, List[Result]]] = [(0, [])]

    for line in lines:
        stripped = line.strip()
        if not stripped or CLOSER_RE.match(stripped):
            continue
        depth = _depth(line)
        node = parse_result_line(stripped, table, method)
        while len(stack) > 1 and depth <= stack[-1][0]:
            _attach(stack)
        stack[-1][1].append(node)
        stack.append((depth, []))

    while len(stack) > 1:
        _attach(stack)

    roots = tuple(stack[0][1])
    return roots or (VOID_RESULT,)


# ---- Examples -----------------------------------------------------------------

def parse_examples(lines: Iterable[str]) -> Tuple[str, ...]:
    examples = []
    for line in lines:
        stripped = line.strip()
        if stripped.startswith(">"):
            stripped = stripped[1:].strip()
        if stripped:
            examples.append(stripped)
    return tuple(examples)


# ---- Raw text path ------------------------------------------------------------

def normalize_block(block: MethodBlock, table: Optional[TypeTable] = None) -> Method:
    """Normalize one tokenizer block into a Method."""
    description, sections = split_sections(block.raw_text)
    return Method(
        name=block.name,
        description="\n".join(line for line in description if line),
        arguments=parse_arguments(sections["arguments"]),
        results=build_result_tree(sections["results"], table, block.name),
        examples=parse_examples(sections["examples"]),
    )


def normalize_blocks(blocks: Iterable[MethodBlock], table: Optional[TypeTable] = None) -> List[Method]:
    table = table or default_type_table()
    methods = [normalize_block(block, table) for block in blocks]
    log.info(f"Normalized {len(methods)} methods from help text")
    return methods


# ---- Structured JSON path -----------------------------------------------------

def _record_type(record: Dict[str, Any]) -> Optional[str]:
    value = record.get("type", record.get("type_"))
    if isinstance(value, list):
        # JSON-Schema style ["string", "null"]
        value = next((v for v in value if v != "null"), "null")
    return canonical_tag(str(value)) if value is not None else None


def _is_result_record(value: Any) -> bool:
    return isinstance(value, dict) and any(k in value for k in ("type", "type_", "key_name"))


def result_from_value(key_name: str, value: Any) -> Result:
    """Derive a Result tree from a sample JSON value."""
    if isinstance(value, bool):
        return Result(key_name, "boolean")
    if isinstance(value, (int, float)):
        return Result(key_name, "number")
    if isinstance(value, str):
        return Result(key_name, "string")
    if value is None:
        return Result(key_name, "none")
    if isinstance(value, dict):
        return Result(key_name, "object", inner=tuple(result_from_value(k, v) for k, v in value.items()))
    if isinstance(value, list):
        inner = (result_from_value("", value[0]),) if value else ()
        return Result(key_name, "array", inner=inner)
    raise SchemaFormatError(f"unsupported JSON value for result '{key_name}': {value!r}")


def _results_from_entries(entries: Any, table: TypeTable) -> Tuple[Result, ...]:
    if entries is None:
        return ()
    if _is_result_record(entries):
        entries = [entries]
    if isinstance(entries, dict):
        return (result_from_value("", entries),)
    if not isinstance(entries, list):
        return (result_from_value("", entries),)
    return tuple(
        result_from_record(entry, table) if _is_result_record(entry) else result_from_value("", entry)
        for entry in entries
    )


def result_from_record(record: Dict[str, Any], table: TypeTable) -> Result:
    key_name = str(record.get("key_name", record.get("key", "")) or "")
    description = str(record.get("description", "") or "")
    inner = _results_from_entries(record.get("inner"), table)
    tag = _record_type(record)
    if tag is None:
        tag = "object" if inner else table.infer_tag(description, key_name)
    return Result(
        key_name=key_name,
        type_tag=tag,
        description=description,
        inner=inner,
        optional=bool(record.get("optional", False)),
    )


def _argument_from_record(record: Dict[str, Any]) -> Argument:
    names = record.get("names")
    if names is None:
        names = [record.get("name", "")]
    elif isinstance(names, str):
        names = [names]
    optional = record.get("optional")
    if optional is None:
        optional = not record.get("required", True)
    return Argument(
        names=tuple(str(n) for n in names),
        type_tag=_record_type(record) or "string",
        optional=bool(optional),
        description=str(record.get("description", "") or ""),
    )


def _arguments_from_entries(entries: Any) -> Tuple[Argument, ...]:
    if entries is None:
        return ()
    if isinstance(entries, dict):
        # JSON-Schema object: {"properties": {...}, "required": [...]}
        required = set(entries.get("required") or ())
        return tuple(
            Argument(
                names=(name,),
                type_tag=_record_type(prop) or "string",
                optional=name not in required,
                description=str(prop.get("description", "") or ""),
            )
            for name, prop in (entries.get("properties") or {}).items()
        )
    if not isinstance(entries, list):
        raise SchemaFormatError(f"arguments must be a list or a JSON-Schema object, got {type(entries).__name__}")
    return tuple(_argument_from_record(entry) for entry in entries)


def method_from_record(name: str, record: Dict[str, Any], table: Optional[TypeTable] = None) -> Method:
    table = table or default_type_table()
    if not isinstance(record, dict):
        raise SchemaFormatError(f"method record for '{name}' must be an object")
    examples = record.get("examples") or ()
    if isinstance(examples, str):
        examples = [line for line in examples.splitlines() if line.strip()]
    return Method(
        name=name,
        description=str(record.get("description", "") or ""),
        arguments=_arguments_from_entries(record.get("arguments")),
        results=_results_from_entries(record.get("results"), table) or (VOID_RESULT,),
        examples=tuple(str(e) for e in examples),
        category=str(record.get("category", "") or ""),
    )


def normalize_document(doc: Dict[str, Any], table: Optional[TypeTable] = None) -> List[Method]:
    """Normalize `{"commands": {name: [record]}}` into Methods, in document order."""
    commands = doc.get("commands") if isinstance(doc, dict) else None
    if not isinstance(commands, dict):
        raise SchemaFormatError("expected a document of the form {\"commands\": {...}}")
    table = table or default_type_table()

    methods = []
    for name, records in commands.items():
        if isinstance(records, dict):
            record = records
        elif isinstance(records, list) and records:
            if len(records) > 1:
                log.warning(f"Method '{name}' has {len(records)} records, using the first")
            record = records[0]
        else:
            raise SchemaFormatError(f"method '{name}' has no record")
        methods.append(method_from_record(name, record, table))
    log.info(f"Normalized {len(methods)} methods from JSON document")
    return methods


def load_document(text: str, table: Optional[TypeTable] = None) -> List[Method]:
    """Normalize either a JSON document or a raw help dump."""
    if text.lstrip().startswith("{"):
        try:
            doc = json.loads(text)
        except json.JSONDecodeError as e:
            raise SchemaFormatError(f"invalid JSON document: {e}") from e
        return normalize_document(doc, table)
    return normalize_blocks(tokenize(text), table)
