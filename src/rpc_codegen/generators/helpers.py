#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Versioned client helpers.

Helpers are convenience methods added to the generated client on top of the
one-method-per-RPC surface. Which helpers exist depends on the API major
version: every SupportedMajor maps to exactly one HelperFamily, and the
mapping is checked for completeness at import time.

A helper is only emitted when the schema actually has its target method
and all of the arguments it forwards.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from ..docs import docstring_literal
from ..naming import python_identifier
from ..schema import Method
from ..versions import SupportedMajor, Version
from .base import MethodView

log = logging.getLogger("rpc-codegen.generators.helpers")


@dataclass(frozen=True)
class HelperSpec:
    name: str
    method: str
    # Arguments forwarded from the helper's own signature, by wire name.
    forwards: Tuple[str, ...]
    # Arguments pinned to a literal Python expression.
    fixed: Tuple[Tuple[str, str], ...] = ()
    summary: str = ""


SEND_WITH_CONF_TARGET = HelperSpec(
    name="send_to_address_with_conf_target",
    method="sendtoaddress",
    forwards=("address", "amount", "conf_target", "estimate_mode"),
    summary="Send to an address, targeting confirmation within `conf_target` blocks.",
)
SEND_WITH_FEE_RATE = HelperSpec(
    name="send_to_address_with_fee_rate",
    method="sendtoaddress",
    forwards=("address", "amount", "fee_rate"),
    summary="Send to an address paying an explicit fee rate in sat/vB.",
)
MINE_TO_ADDRESS = HelperSpec(
    name="mine_to_address",
    method="generatetoaddress",
    forwards=("nblocks", "address"),
    summary="Mine `nblocks` blocks paying the coinbase to `address`.",
)
CREATE_DESCRIPTOR_WALLET = HelperSpec(
    name="create_descriptor_wallet",
    method="createwallet",
    forwards=("wallet_name",),
    fixed=(("descriptors", "True"),),
    summary="Create a descriptor wallet named `wallet_name`.",
)


class HelperFamily(Enum):
    LEGACY = "legacy"   # fee_rate arguments do not exist yet
    MODERN = "modern"


FAMILY_HELPERS: Dict[HelperFamily, Tuple[HelperSpec, ...]] = {
    HelperFamily.LEGACY: (SEND_WITH_CONF_TARGET, MINE_TO_ADDRESS),
    HelperFamily.MODERN: (SEND_WITH_CONF_TARGET, SEND_WITH_FEE_RATE, MINE_TO_ADDRESS, CREATE_DESCRIPTOR_WALLET),
}

HELPER_FAMILY_BY_MAJOR: Dict[SupportedMajor, HelperFamily] = {
    SupportedMajor.V17: HelperFamily.LEGACY,
    SupportedMajor.V18: HelperFamily.LEGACY,
    SupportedMajor.V19: HelperFamily.LEGACY,
    SupportedMajor.V20: HelperFamily.LEGACY,
    SupportedMajor.V21: HelperFamily.MODERN,
    SupportedMajor.V22: HelperFamily.MODERN,
    SupportedMajor.V23: HelperFamily.MODERN,
    SupportedMajor.V24: HelperFamily.MODERN,
    SupportedMajor.V25: HelperFamily.MODERN,
    SupportedMajor.V26: HelperFamily.MODERN,
    SupportedMajor.V27: HelperFamily.MODERN,
    SupportedMajor.V28: HelperFamily.MODERN,
    SupportedMajor.V29: HelperFamily.MODERN,
}

_missing = set(SupportedMajor) - set(HELPER_FAMILY_BY_MAJOR)
if _missing:
    raise RuntimeError(f"No helper family for {sorted(m.name for m in _missing)}")


def helper_family(version: Version) -> HelperFamily:
    """Helper family for a version; raises UnsupportedVersionError for unknown majors."""
    return HELPER_FAMILY_BY_MAJOR[version.supported_major]


@dataclass(frozen=True)
class HelperView:
    ident: str
    target: str
    signature: str
    call_args: str
    return_type: str
    docstring: str


def helper_view(spec: HelperSpec, method: Method, view: MethodView) -> Optional[HelperView]:
    """Render data for one helper, or None if the method lacks a needed argument."""
    params_by_wire = {p.wire_name: p for p in view.wire_params}
    wanted = list(spec.forwards) + [name for name, _ in spec.fixed]
    missing = [name for name in wanted if name not in params_by_wire]
    if missing:
        log.debug(f"Skipping helper {spec.name}: {method.name} has no {', '.join(missing)}")
        return None

    forwarded = [params_by_wire[name] for name in spec.forwards]
    ordered = [p for p in forwarded if not p.optional] + [p for p in forwarded if p.optional]
    signature = ", ".join(["self"] + [p.signature for p in ordered])
    call_args = [f"{p.ident}={p.ident}" for p in forwarded]
    call_args += [f"{params_by_wire[name].ident}={literal}" for name, literal in spec.fixed]

    return HelperView(
        ident=python_identifier(spec.name),
        target=view.ident,
        signature=signature,
        call_args=", ".join(call_args),
        return_type=view.return_type,
        docstring=docstring_literal([spec.summary or f"Shortcut for ``{method.name}``."]),
    )


def helper_views(version: Version, methods: Sequence[Method], views: Sequence[MethodView]) -> List[HelperView]:
    by_name = {m.name: (m, v) for m, v in zip(methods, views)}
    result = []
    for spec in FAMILY_HELPERS[helper_family(version)]:
        if spec.method not in by_name:
            continue
        method, view = by_name[spec.method]
        helper = helper_view(spec, method, view)
        if helper is not None:
            result.append(helper)
    return result
