#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""File output for generated sources and exported schema documents."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List

from .generators import GeneratedFile

log = logging.getLogger("rpc-codegen.writer")


def write_generated(out_dir: Path, files: Iterable[GeneratedFile]) -> List[Path]:
    """Write each generated file under out_dir, creating directories as needed."""
    out_dir = Path(out_dir)
    written = []
    for generated in files:
        path = out_dir / generated.file_name
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8', newline='\n') as f:
            f.write(generated.source)
        written.append(path)
    log.info(f"Wrote {len(written)} files to {out_dir}")
    return written


def load_json(path: Path) -> Dict:
    """Load a JSON file with UTF-8 encoding."""
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def save_json(data: Dict[str, Any], path: Path) -> Path:
    """Save a JSON file with UTF-8 encoding."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    log.info(f"Saved: {path}")
    return path
