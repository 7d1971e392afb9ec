#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Generator registry mapping generator names to implementations."""

from typing import Dict, Iterable, List, Optional, Type

from ..type_table import TypeTable
from .base import BaseGenerator, GeneratedFile


GENERATOR_REGISTRY: Dict[str, Type[BaseGenerator]] = {}


def register_generator(cls: Type[BaseGenerator]) -> Type[BaseGenerator]:
    """Decorator used by generator implementations to register themselves."""
    if not cls.name:
        raise ValueError(f"Generator {cls.__name__} must define name.")
    GENERATOR_REGISTRY[cls.name] = cls
    return cls


def get_generator(name: str, table: Optional[TypeTable] = None) -> BaseGenerator:
    """Instantiate a generator by name."""
    try:
        cls = GENERATOR_REGISTRY[name]
    except KeyError as exc:
        raise KeyError(f"No generator registered as {name!r}.") from exc
    return cls(table)


def list_generators(table: Optional[TypeTable] = None) -> List[BaseGenerator]:
    """Every registered generator, in name order."""
    return [GENERATOR_REGISTRY[name](table) for name in sorted(GENERATOR_REGISTRY)]


def generator_names() -> Iterable[str]:
    return sorted(GENERATOR_REGISTRY)


# Import generator implementations so they register with the module-level mapping.
from .batch import BatchBuilderGenerator  # noqa: E402,F401
from .client import ClientGenerator  # noqa: E402,F401
from .responses import ResponseTypesGenerator  # noqa: E402,F401


__all__ = [
    "GENERATOR_REGISTRY",
    "BaseGenerator",
    "GeneratedFile",
    "register_generator",
    "get_generator",
    "list_generators",
    "generator_names",
]
