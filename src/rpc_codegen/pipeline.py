#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Pipeline Orchestrator

    source text -> tokenize -> normalize -> validate -> generate (per version)

Every schema is validated before any generator runs for it. Generation jobs
are independent (version, generator) pairs and may run on a thread pool;
their outputs are merged by file name into one sorted list.

Usage:
    from rpc_codegen.pipeline import run_pipeline
    files = run_pipeline({"v29": help_text}, max_workers=4)
    write_generated(Path("generated"), files)
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .errors import OutputConflictError
from .generators import BaseGenerator, GeneratedFile, get_generator, list_generators
from .normalizer import load_document
from .schema import Method
from .type_table import TypeTable, default_type_table
from .validator import validate_methods
from .versions import Version, resolve_version

log = logging.getLogger("rpc-codegen.pipeline")

Writer = Callable[[List[GeneratedFile]], object]


def build_schema(source: str, table: Optional[TypeTable] = None) -> List[Method]:
    """Normalize and validate one schema snapshot (help text or JSON)."""
    methods = load_document(source, table)
    validate_methods(methods)
    return methods


def generate_version(methods: Sequence[Method], version: Version,
                     generators: Sequence[BaseGenerator]) -> List[GeneratedFile]:
    """Run every generator for one version, sequentially."""
    files: List[GeneratedFile] = []
    for generator in generators:
        files.extend(generator.generate(methods, version))
    return merge_outputs([files])


def merge_outputs(batches: Iterable[Iterable[GeneratedFile]]) -> List[GeneratedFile]:
    """Union of generated files sorted by name; differing duplicates are an error."""
    merged: Dict[str, str] = {}
    for batch in batches:
        for generated in batch:
            existing = merged.get(generated.file_name)
            if existing is not None and existing != generated.source:
                raise OutputConflictError(generated.file_name)
            merged[generated.file_name] = generated.source
    return [GeneratedFile(name, merged[name]) for name in sorted(merged)]


def resolve_generators(names: Optional[Sequence[str]], table: TypeTable) -> List[BaseGenerator]:
    if not names:
        return list_generators(table)
    return [get_generator(name, table) for name in names]


def run_pipeline(
    snapshots: Mapping[str, str],
    generators: Optional[Sequence[str]] = None,
    *,
    max_workers: int = 1,
    table: Optional[TypeTable] = None,
    writer: Optional[Writer] = None,
) -> List[GeneratedFile]:
    """Generate code for each `{version_tag: source_text}` snapshot.

    All snapshots are parsed and validated before any generation starts, so
    a bad schema fails the run without producing files.
    """
    table = table or default_type_table()
    renderers = resolve_generators(generators, table)

    schemas: List[Tuple[Version, List[Method]]] = []
    for tag in sorted(snapshots, key=lambda t: resolve_version(t)):
        version = resolve_version(tag)
        methods = build_schema(snapshots[tag], table)
        log.info(f"[{version}] {len(methods)} methods validated")
        schemas.append((version, methods))

    jobs = [(version, methods, gen) for version, methods in schemas for gen in renderers]
    start = time.perf_counter()
    if max_workers > 1 and len(jobs) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            batches = list(pool.map(lambda job: job[2].generate(job[1], job[0]), jobs))
    else:
        batches = [gen.generate(methods, version) for version, methods, gen in jobs]
    files = merge_outputs(batches)
    log.info(f"Generated {len(files)} files for {len(schemas)} version(s) "
             f"in {time.perf_counter() - start:.2f}s")

    if writer is not None:
        writer(files)
    return files


def run_for_versions(source: str, version_tags: Sequence[str], **kwargs) -> List[GeneratedFile]:
    """Generate the same schema snapshot for several versions."""
    return run_pipeline({tag: source for tag in version_tags}, **kwargs)
