#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
rpc_codegen

Turns RPC help text (or its JSON rendering) into a canonical, versioned
method schema and renders typed Python client packages from it.
"""

from .errors import (
    CodegenError,
    DuplicateNameError,
    EmptyNameError,
    MalformedResultError,
    NoMethodsError,
    NumericValueError,
    OutputConflictError,
    SchemaFormatError,
    UnsupportedVersionError,
    VersionParseError,
)
from .generators import GeneratedFile, get_generator, list_generators
from .normalizer import load_document, normalize_block, normalize_blocks, normalize_document
from .pipeline import build_schema, generate_version, run_for_versions, run_pipeline
from .schema import Argument, Method, Result, export_schema
from .tokenizer import MethodBlock, tokenize
from .type_table import TypeMapping, TypeTable, default_type_table
from .validator import validate_methods, validate_numeric_value
from .versions import DEFAULT_VERSION, SUPPORTED_VERSIONS, Version, resolve_version
from .writer import write_generated

__version__ = "0.1.0"
