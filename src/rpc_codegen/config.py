#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Configuration from environment variables, optionally seeded from a .env file.

Variables (all optional):
    RPC_CODEGEN_INPUT         help dump or JSON schema to read
    RPC_CODEGEN_OUTPUT_DIR    where generated packages are written (default: generated)
    RPC_CODEGEN_VERSIONS      comma separated version tags (default: v29)
    RPC_CODEGEN_LOG_LEVEL     DEBUG, INFO, WARNING or ERROR (default: INFO)
    RPC_CODEGEN_LOG_FILE      also log to this file, with rotation
    RPC_CODEGEN_TYPE_POLICY   YAML type policy replacing the packaged one
    RPC_CODEGEN_MAX_WORKERS   generator threads (default: 1)

Values already present in the environment win over the .env file.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple

from .versions import DEFAULT_VERSION

log = logging.getLogger("rpc-codegen.config")

ENV_PREFIX = "RPC_CODEGEN_"


def load_env(env_file: Optional[Path] = None) -> bool:
    """Load KEY=VALUE lines from a .env file into os.environ (setdefault).

    Returns True if a file was read.
    """
    env_file = Path(env_file) if env_file else Path.cwd() / ".env"
    if not env_file.exists():
        log.debug(f"No .env file at {env_file}")
        return False
    log.debug(f"Loading configuration from {env_file}")
    with open(env_file, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith('#') and '=' in line:
                key, value = line.split('=', 1)
                os.environ.setdefault(key.strip(), value.strip().strip('"').strip("'"))
    return True


def _parse_workers(raw: Optional[str]) -> int:
    if not raw:
        return 1
    try:
        value = int(raw)
    except ValueError:
        log.warning(f"Ignoring {ENV_PREFIX}MAX_WORKERS={raw!r}: not an integer")
        return 1
    return max(1, value)


@dataclass(frozen=True)
class CodegenConfig:
    input_path: Optional[Path] = None
    output_dir: Path = Path("generated")
    versions: Tuple[str, ...] = field(default_factory=lambda: (DEFAULT_VERSION.as_str(),))
    log_level: str = "INFO"
    log_file: Optional[Path] = None
    type_policy: Optional[Path] = None
    max_workers: int = 1

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CodegenConfig":
        env = os.environ if environ is None else environ

        def get(name: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + name)
            return value.strip() if value and value.strip() else None

        versions = get("VERSIONS")
        input_path = get("INPUT")
        log_file = get("LOG_FILE")
        type_policy = get("TYPE_POLICY")
        return cls(
            input_path=Path(input_path) if input_path else None,
            output_dir=Path(get("OUTPUT_DIR") or "generated"),
            versions=tuple(v.strip() for v in versions.split(",") if v.strip()) if versions
            else (DEFAULT_VERSION.as_str(),),
            log_level=(get("LOG_LEVEL") or "INFO").upper(),
            log_file=Path(log_file) if log_file else None,
            type_policy=Path(type_policy) if type_policy else None,
            max_workers=_parse_workers(get("MAX_WORKERS")),
        )
