#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Client-entry-point generator.

Emits three modules per version:
    <mod>/_base.py     runtime errors, identifier types and param helpers
    <mod>/client.py    RpcClientV<N> with one method per RPC plus helpers
    <mod>/__init__.py  package index
"""

from typing import List, Sequence

from ..schema import Method
from ..versions import Version
from . import register_generator
from .base import BaseGenerator, GeneratedFile, log, method_views, render, sorted_methods
from .helpers import helper_views


@register_generator
class ClientGenerator(BaseGenerator):
    name = "client"
    description = "Typed client class, runtime support and package index"

    def generate(self, methods: Sequence[Method], version: Version) -> List[GeneratedFile]:
        ordered = sorted_methods(methods)
        views = method_views(ordered, self.table)
        helpers = helper_views(version, ordered, views)
        context = self.context(
            version,
            methods=views,
            helpers=helpers,
            response_classes=[v.response.class_name for v in views if v.response is not None],
        )
        log.debug(f"[{version}] client with {len(views)} methods and {len(helpers)} helpers")
        return [
            GeneratedFile(self.file_name(version, "_base.py"), render("base.py.j2", **context)),
            GeneratedFile(self.file_name(version, "client.py"), render("client.py.j2", **context)),
            GeneratedFile(self.file_name(version, "__init__.py"), render("package_init.py.j2", **context)),
        ]
