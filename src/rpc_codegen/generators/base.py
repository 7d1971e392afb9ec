#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Shared generator plumbing: the Jinja2 environment, the GeneratedFile record
and the view models every template renders from.

View models are computed here so that each template only lays out text;
the naming and typing policy lives in one place.
"""

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..docs import docstring_literal, method_docstring
from ..naming import python_identifier, to_pascal_case, unique_identifiers
from ..schema import Method, Result
from ..type_table import TypeTable, default_type_table
from ..versions import Version

log = logging.getLogger("rpc-codegen.generators")

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
UNTYPED = ("Any", "None")


class GeneratedFile(NamedTuple):
    file_name: str
    source: str


@lru_cache(maxsize=None)
def template_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        auto_reload=False,
        undefined=StrictUndefined,
    )
    env.filters["pystr"] = lambda text: json.dumps(text)
    return env


def render(template_name: str, **context) -> str:
    return template_env().get_template(template_name).render(**context)


def optional_type(target: str, optional: bool) -> str:
    if optional and target not in UNTYPED:
        return f"Optional[{target}]"
    return target


# ---- View models --------------------------------------------------------------

@dataclass(frozen=True)
class FieldView:
    ident: str
    wire_key: str
    annotation: str
    converter: Optional[str]
    whole_value: bool

    @property
    def expression(self) -> str:
        """from_json expression reading this field out of `value`."""
        raw = "value" if self.whole_value else f"field_of(value, {json.dumps(self.wire_key)})"
        return f"{self.converter}({raw})" if self.converter else raw


@dataclass(frozen=True)
class ResponseView:
    method: str
    class_name: str
    fields: Tuple[FieldView, ...]
    docstring: str


@dataclass(frozen=True)
class ParamView:
    ident: str
    wire_name: str
    annotation: str
    optional: bool

    @property
    def signature(self) -> str:
        if self.optional:
            return f"{self.ident}: {self.annotation} = None"
        return f"{self.ident}: {self.annotation}"


@dataclass(frozen=True)
class MethodView:
    name: str
    ident: str
    params: Tuple[ParamView, ...]
    wire_params: Tuple[ParamView, ...]
    response: Optional[ResponseView]
    docstring: str

    @property
    def is_void(self) -> bool:
        return self.response is None

    @property
    def return_type(self) -> str:
        return "None" if self.response is None else self.response.class_name

    @property
    def signature(self) -> str:
        return ", ".join(["self"] + [p.signature for p in self.params])

    @property
    def pairs(self) -> str:
        """Source of the (wire_name, value) list in original argument order."""
        items = ", ".join(f"({json.dumps(p.wire_name)}, {p.ident})" for p in self.wire_params)
        return f"[{items}]"


def response_class_name(method: Method) -> str:
    return f"{to_pascal_case(method.name) or 'Rpc'}Response"


def _field_view(result: Result, ident: str, table: TypeTable, whole_value: bool) -> FieldView:
    target, optional = table.map_result(result)
    return FieldView(
        ident=ident,
        wire_key=result.key_name,
        annotation=optional_type(target, optional),
        converter=table.converter_for(target),
        whole_value=whole_value,
    )


def _is_object_variant(result: Result) -> bool:
    """An anonymous object whose children are all keyed."""
    return (
        not result.key_name
        and result.type_tag == "object"
        and bool(result.inner)
        and all(child.key_name for child in result.inner)
    )


def object_fields(variants: Sequence[Result], table: TypeTable) -> Tuple[FieldView, ...]:
    """One field per child key across all object variants, in first-seen order.

    A key missing from any variant is optional. A key typed differently in
    two variants falls back to the table's fallback type.
    """
    by_key: Dict[str, List[Result]] = {}
    for variant in variants:
        for child in variant.inner:
            by_key.setdefault(child.key_name, []).append(child)

    idents = unique_identifiers([python_identifier(key) for key in by_key])
    fields = []
    for (key, children), ident in zip(by_key.items(), idents):
        mappings = [table.map_result(child) for child in children]
        targets = {m.target for m in mappings}
        target = mappings[0].target if len(targets) == 1 else table.fallback
        optional = len(children) < len(variants) or any(m.optional for m in mappings)
        fields.append(FieldView(
            ident=ident,
            wire_key=key,
            annotation=optional_type(target, optional),
            converter=table.converter_for(target),
            whole_value=False,
        ))
    return tuple(fields)


def response_view(method: Method, table: TypeTable,
                  class_name: Optional[str] = None) -> Optional[ResponseView]:
    """Response shape for a method, or None when it returns nothing."""
    if method.is_void:
        return None
    results = method.results
    if all(_is_object_variant(r) for r in results):
        fields = object_fields(results, table)
    elif len(results) == 1:
        result = results[0]
        fields = (_field_view(result, python_identifier(result.key_name), table, whole_value=True),)
    else:
        idents = unique_identifiers([python_identifier(r.key_name) for r in results])
        fields = tuple(
            _field_view(r, ident, table, whole_value=not r.key_name)
            for r, ident in zip(results, idents)
        )
    summary = f"Response of ``{method.name}``."
    return ResponseView(
        method=method.name,
        class_name=class_name or response_class_name(method),
        fields=fields,
        docstring=docstring_literal([summary]),
    )


def method_view(method: Method, ident: str, table: TypeTable,
                class_name: Optional[str] = None) -> MethodView:
    idents = unique_identifiers([python_identifier(arg.name, fallback="arg") for arg in method.arguments])
    wire_params = []
    for arg, arg_ident in zip(method.arguments, idents):
        target, optional = table.map_argument(arg)
        wire_params.append(ParamView(
            ident=arg_ident,
            wire_name=arg.name,
            annotation=optional_type(target, optional),
            optional=optional,
        ))
    ordered = [p for p in wire_params if not p.optional] + [p for p in wire_params if p.optional]
    return MethodView(
        name=method.name,
        ident=ident,
        params=tuple(ordered),
        wire_params=tuple(wire_params),
        response=response_view(method, table, class_name),
        docstring=method_docstring(method, table),
    )


def sorted_methods(methods: Sequence[Method]) -> List[Method]:
    return sorted(methods, key=lambda m: m.name)


def method_views(methods: Sequence[Method], table: TypeTable) -> List[MethodView]:
    """Views for every method, sorted by name, with unique Python identifiers."""
    ordered = sorted_methods(methods)
    idents = unique_identifiers([python_identifier(m.name, fallback="rpc") for m in ordered])
    class_names = unique_identifiers([response_class_name(m) for m in ordered])
    return [
        method_view(m, ident, table, class_name)
        for m, ident, class_name in zip(ordered, idents, class_names)
    ]


# ---- Generator base -----------------------------------------------------------

class BaseGenerator:
    """A pure renderer from (methods, version) to generated files."""

    name: str = ""
    description: str = ""

    def __init__(self, table: Optional[TypeTable] = None):
        self.table = table or default_type_table()

    def generate(self, methods: Sequence[Method], version: Version) -> List[GeneratedFile]:
        raise NotImplementedError

    def context(self, version: Version, **extra) -> dict:
        """Template variables common to every generated module."""
        return {
            "version": version,
            "identifiers": sorted(self.table.identifiers),
            "client_class": f"RpcClientV{version.as_number()}",
            **extra,
        }

    def file_name(self, version: Version, name: str) -> str:
        return f"{version.as_module_name()}/{name}"
