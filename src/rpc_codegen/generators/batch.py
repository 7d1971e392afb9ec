#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Batch-request-builder generator: BatchResults aggregate plus a fluent BatchBuilder."""

from typing import List, Sequence

from ..schema import Method
from ..versions import Version
from . import register_generator
from .base import BaseGenerator, GeneratedFile, log, method_views, render


@register_generator
class BatchBuilderGenerator(BaseGenerator):
    name = "batch"
    description = "Batch builder dispatching queued calls in order"

    def generate(self, methods: Sequence[Method], version: Version) -> List[GeneratedFile]:
        views = method_views(methods, self.table)
        source = render(
            "batch.py.j2",
            **self.context(
                version,
                methods=views,
                response_classes=[v.response.class_name for v in views if v.response is not None],
            ),
        )
        log.debug(f"[{version}] batch builder for {len(views)} methods")
        return [GeneratedFile(self.file_name(version, "batch.py"), source)]
