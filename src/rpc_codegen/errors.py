#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Exception hierarchy for the schema and code generation pipeline.

Every stage raises a subclass of CodegenError before producing any output,
so a caller can catch one type, report it and retry after fixing the input.
"""

from typing import Optional


class CodegenError(Exception):
    """Base class for every error raised by rpc_codegen."""


# ---- Tokenizer / Normalizer ---------------------------------------------------

class NoMethodsError(CodegenError):
    """The help dump contained no method blocks."""

    def __init__(self):
        super().__init__("no method blocks found in help text")


class MalformedResultError(CodegenError):
    """A quoted line in a Result section did not have the `"key" : desc` shape."""

    def __init__(self, line: str, method: Optional[str] = None):
        self.line = line
        self.method = method
        where = f" in method '{method}'" if method else ""
        super().__init__(f"malformed result line{where}: {line!r}")


class SchemaFormatError(CodegenError):
    """A structured JSON document does not have the expected shape."""


# ---- Validator ----------------------------------------------------------------

class EmptyNameError(CodegenError):
    def __init__(self):
        super().__init__("method name must not be empty")


class DuplicateNameError(CodegenError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"duplicate method name: {name}")


class NumericValueError(CodegenError):
    """A numeric value does not fit the declared target kind."""

    def __init__(self, value, expected: str, reason: str):
        self.value = value
        self.expected = expected
        super().__init__(f"{value!r} is not a valid {expected}: {reason}")


# ---- Versions -----------------------------------------------------------------

class VersionParseError(CodegenError):
    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(f"invalid version tag: {tag!r}")


class UnsupportedVersionError(CodegenError):
    def __init__(self, version):
        self.version = version
        super().__init__(f"unsupported version: {version}")


# ---- Orchestrator -------------------------------------------------------------

class OutputConflictError(CodegenError):
    """Two generator jobs produced different content for the same file."""

    def __init__(self, file_name: str):
        self.file_name = file_name
        super().__init__(f"conflicting output for {file_name}")
