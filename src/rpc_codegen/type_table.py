#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Type Inference Table

Maps an abstract type tag (plus the field name, for patterned rules) to a
Python type expression and an optionality flag. The rules, aliases and the
free-text inference keywords all come from a YAML policy file, by default
the packaged data/type_policy.yaml.

The mapping never fails: an unknown tag maps to the fallback type (`Any`).
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

import yaml

from .errors import SchemaFormatError
from .schema import Argument, Result

log = logging.getLogger("rpc-codegen.types")

DEFAULT_POLICY_PATH = Path(__file__).parent / "data" / "type_policy.yaml"
POLICY_ENV_VAR = "RPC_CODEGEN_TYPE_POLICY"


class TypeMapping(NamedTuple):
    target: str
    optional: bool


@dataclass(frozen=True)
class Rule:
    tag: str
    target: str
    pattern: Optional[str] = None
    optional: bool = False

    def matches(self, tag: str, field: str) -> bool:
        if self.tag != tag:
            return False
        return self.pattern is None or self.pattern in field


def normalize_field_name(name: str) -> str:
    """Lowercase and drop `_`, `-` and spaces, so `conf_target` matches `conftarget`."""
    return name.lower().replace("_", "").replace("-", "").replace(" ", "")


@dataclass(frozen=True)
class TypeTable:
    rules: Tuple[Rule, ...]
    aliases: Tuple[Tuple[str, str], ...] = ()
    fallback: str = "Any"
    converters: Tuple[Tuple[str, str], ...] = ()
    identifiers: Tuple[str, ...] = ()
    keywords: Tuple[Tuple[str, str], ...] = ()
    default_tag: str = "string"
    numeric_hints: Tuple[Tuple[str, str], ...] = ()
    optional_markers: Tuple[str, ...] = ()

    # ---- Tag handling --------------------------------------------------------

    def canonical_tag(self, tag: str) -> str:
        tag = (tag or "").strip().lower()
        return dict(self.aliases).get(tag, tag)

    def map_type(self, type_tag: str, field_name: str = "") -> TypeMapping:
        tag = self.canonical_tag(type_tag)
        field = normalize_field_name(field_name or "")
        for rule in self.rules:
            if rule.matches(tag, field):
                return TypeMapping(rule.target, rule.optional)
        log.debug(f"No type rule for tag '{type_tag}' (field '{field_name}'), using {self.fallback}")
        return TypeMapping(self.fallback, False)

    def map_result(self, result: Result) -> TypeMapping:
        mapping = self.map_type(result.type_tag, result.key_name)
        return TypeMapping(mapping.target, mapping.optional or result.optional)

    def map_argument(self, argument: Argument) -> TypeMapping:
        mapping = self.map_type(argument.type_tag, argument.name)
        return TypeMapping(mapping.target, mapping.optional or argument.optional)

    def converter_for(self, target: str) -> Optional[str]:
        """Name of the runtime helper that converts a raw JSON value to `target`."""
        return dict(self.converters).get(target)

    # ---- Free-text inference -------------------------------------------------

    def infer_tag(self, text: str, key_name: str = "") -> str:
        """Pick a type tag for a result line by keyword scan."""
        lowered = text.lower()
        tag = self.default_tag
        for keyword, keyword_tag in self.keywords:
            if keyword in lowered:
                tag = keyword_tag
                break
        if tag == "number" and key_name:
            field = normalize_field_name(key_name)
            for pattern, hinted in self.numeric_hints:
                if pattern in field:
                    return hinted
        return tag

    def infer_optional(self, text: str) -> bool:
        lowered = text.lower()
        return any(marker in lowered for marker in self.optional_markers)


# ---- Loading ------------------------------------------------------------------

def _pairs(items: List[Dict[str, Any]], key: str, value: str) -> Tuple[Tuple[str, str], ...]:
    return tuple((str(item[key]).lower(), str(item[value])) for item in items)


def table_from_policy(policy: Dict[str, Any]) -> TypeTable:
    """Build a TypeTable from a parsed policy mapping."""
    if not isinstance(policy, dict) or not isinstance(policy.get("rules"), list):
        raise SchemaFormatError("type policy must be a mapping with a 'rules' list")

    rules = []
    for entry in policy["rules"]:
        pattern = entry.get("pattern")
        rules.append(Rule(
            tag=str(entry["tag"]).lower(),
            target=str(entry["target"]),
            pattern=normalize_field_name(str(pattern)) if pattern else None,
            optional=bool(entry.get("optional", False)),
        ))

    inference = policy.get("inference") or {}
    return TypeTable(
        rules=tuple(rules),
        aliases=tuple((str(k).lower(), str(v).lower()) for k, v in (policy.get("aliases") or {}).items()),
        fallback=str(policy.get("fallback", "Any")),
        converters=tuple((str(k), str(v)) for k, v in (policy.get("converters") or {}).items()),
        identifiers=tuple(str(name) for name in policy.get("identifiers") or ()),
        keywords=_pairs(inference.get("keywords") or [], "match", "tag"),
        default_tag=str(inference.get("default", "string")),
        numeric_hints=tuple(
            (normalize_field_name(str(item["pattern"])), str(item["tag"]))
            for item in inference.get("numeric_hints") or []
        ),
        optional_markers=tuple(str(m).lower() for m in inference.get("optional_markers") or ()),
    )


def load_type_table(path: Path) -> TypeTable:
    """Load a type policy from a YAML file."""
    with open(path, 'r', encoding='utf-8') as f:
        policy = yaml.safe_load(f)
    table = table_from_policy(policy)
    log.debug(f"Loaded {len(table.rules)} type rules from {path}")
    return table


@lru_cache(maxsize=None)
def _cached_table(path: str) -> TypeTable:
    return load_type_table(Path(path))


def default_type_table() -> TypeTable:
    """The shared table: RPC_CODEGEN_TYPE_POLICY if set, else the packaged policy."""
    override = os.environ.get(POLICY_ENV_VAR)
    return _cached_table(override or str(DEFAULT_POLICY_PATH))
