#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Canonical method schema.

Method, Argument and Result are frozen value types holding tuples, so two
schemas built from the same input compare equal and no pipeline stage can
change what an earlier stage produced.

The to_dict() forms match the `{"commands": {name: [record]}}` document
accepted by the normalizer, which is what export_schema() writes.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional, Tuple

SCHEMA_VERSION = "rpc-method-schema/1.0"


@dataclass(frozen=True)
class Result:
    key_name: str
    type_tag: str
    description: str = ""
    inner: Tuple["Result", ...] = ()
    optional: bool = False

    @property
    def is_void(self) -> bool:
        return self.type_tag in ("none", "null")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key_name": self.key_name,
            "type": self.type_tag,
            "description": self.description,
            "optional": self.optional,
            "inner": [child.to_dict() for child in self.inner],
        }


@dataclass(frozen=True)
class Argument:
    names: Tuple[str, ...]
    type_tag: str
    optional: bool = False
    description: str = ""

    @property
    def name(self) -> str:
        """Canonical (wire) name."""
        return self.names[0] if self.names else ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "names": list(self.names),
            "type": self.type_tag,
            "optional": self.optional,
            "description": self.description,
        }


VOID_RESULT = Result(key_name="", type_tag="none")


@dataclass(frozen=True)
class Method:
    name: str
    description: str = ""
    arguments: Tuple[Argument, ...] = ()
    results: Tuple[Result, ...] = ()
    examples: Tuple[str, ...] = ()
    category: str = ""

    @property
    def is_void(self) -> bool:
        """True when the method returns nothing (no results, or a sole none result)."""
        if not self.results:
            return True
        return len(self.results) == 1 and self.results[0].is_void

    @property
    def required_arguments(self) -> Tuple[Argument, ...]:
        return tuple(a for a in self.arguments if not a.optional)

    @property
    def optional_arguments(self) -> Tuple[Argument, ...]:
        return tuple(a for a in self.arguments if a.optional)

    def to_dict(self) -> Dict[str, Any]:
        record = {
            "name": self.name,
            "description": self.description,
            "arguments": [arg.to_dict() for arg in self.arguments],
            "results": [res.to_dict() for res in self.results],
        }
        if self.examples:
            record["examples"] = list(self.examples)
        if self.category:
            record["category"] = self.category
        return record


# ---- Export -------------------------------------------------------------------

def stamp_document(doc: Dict[str, Any], source: Optional[str] = None,
                   version: Optional[str] = None) -> Dict[str, Any]:
    """Add schema and generation metadata to the document."""
    return {
        "_schema": SCHEMA_VERSION,
        "_generated_at": datetime.now(timezone.utc).isoformat(),
        "_source": {
            "type": "rpc-help",
            "path": source,
            "version": version,
        },
        **doc
    }


def export_schema(methods: Iterable[Method], version: Optional[str] = None,
                  source: Optional[str] = None) -> Dict[str, Any]:
    """Build the `{"commands": ...}` document for a method set, sorted by name."""
    commands = {m.name: [m.to_dict()] for m in sorted(methods, key=lambda m: m.name)}
    return stamp_document({"commands": commands}, source=source, version=version)
