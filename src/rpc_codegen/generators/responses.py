#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Response-record generator: one frozen dataclass per non-void method."""

from typing import List, Sequence

from ..schema import Method
from ..versions import Version
from . import register_generator
from .base import BaseGenerator, GeneratedFile, log, method_views, render


@register_generator
class ResponseTypesGenerator(BaseGenerator):
    name = "responses"
    description = "Response records with from_json decoders"

    def generate(self, methods: Sequence[Method], version: Version) -> List[GeneratedFile]:
        responses = [v.response for v in method_views(methods, self.table) if v.response is not None]
        source = render("responses.py.j2", **self.context(version, responses=responses))
        log.debug(f"[{version}] {len(responses)} response records")
        return [GeneratedFile(self.file_name(version, "responses.py"), source)]
