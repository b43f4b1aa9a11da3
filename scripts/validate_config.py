#!/usr/bin/env python3
"""
validate_config.py — check a word counter job config without running the job.

Usage:
  python scripts/validate_config.py path/to/job.(json|yaml|yml)

Uses the schema shipped with the wordcounter package and its semantic rules.
"""
from __future__ import annotations
import sys, pathlib
from typing import Iterable

SRC_PATH = pathlib.Path(__file__).resolve().parent.parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

import yaml
from jsonschema import Draft7Validator

import wordcounter
from wordcounter import ConfigError

def main(argv: Iterable[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print("Usage: python validate_config.py path/to/job.(json|yaml|yml)", file=sys.stderr)
        return 2

    cfg_path = pathlib.Path(args[0])
    if not cfg_path.exists():
        print(f"ERROR: file not found: {cfg_path}", file=sys.stderr)
        return 2

    try:
        cfg = wordcounter.load_config(cfg_path)
    except (OSError, yaml.YAMLError) as e:
        print(f"ERROR: failed to load config: {e}", file=sys.stderr)
        return 2

    try:
        schema = wordcounter.load_json(wordcounter.SCHEMA_PATH)
    except (OSError, ValueError) as e:
        print(f"ERROR: failed to load schema {wordcounter.SCHEMA_PATH}: {e}", file=sys.stderr)
        return 2

    validator = Draft7Validator(schema)
    errors = sorted(validator.iter_errors(cfg), key=lambda e: [str(p) for p in e.path])
    if errors:
        print("CONFIG VALIDATION ERRORS:", file=sys.stderr)
        for err in errors:
            path = "$" + "".join(f"[{repr(p)}]" if isinstance(p, int) else f".{p}" for p in err.path)
            print(f" - {path}: {err.message}", file=sys.stderr)
        return 1

    try:
        wordcounter.validate_config(cfg)
    except ConfigError as e:
        print(f"CONFIG ERROR: {e}", file=sys.stderr)
        return 1

    print("OK: configuration is valid.")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
