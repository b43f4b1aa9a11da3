"""wordcounter

Count the words in every file of an input directory.

The job is meant to run where the data lives: the hosting environment mounts an
input directory and an output directory, collects whatever the job prints and
reads the exit code.  Per-file counts go to a report file (``count.txt`` by
default) in the output directory and the grand total goes to ``stdout``.

Directories can be overridden by a JSON/YAML job config, validated against
``config.schema.json`` (shipped inside the package), or by command-line flags.

Example:
    python -m wordcounter -i ./inputs -o ./outputs
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import pathlib
import sys
from dataclasses import dataclass
from typing import IO, Any, Dict, Iterable, Iterator, List, Mapping

import yaml
from jsonschema import Draft7Validator
from jsonschema.exceptions import ValidationError

logger = logging.getLogger(__name__)

# ---- Defaults -------------------------------------------------------------

SCHEMA_PATH = pathlib.Path(__file__).with_name("config.schema.json")
DEFAULT_INPUT_DIR = pathlib.Path("/inputs")
DEFAULT_OUTPUT_DIR = pathlib.Path("/outputs")
DEFAULT_REPORT_NAME = "count.txt"
DEFAULT_CHUNK_SIZE = 64 * 1024
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


# ---- Errors ---------------------------------------------------------------


class ConfigError(RuntimeError):
    """Raised when the configuration fails validation."""


class WordCountError(RuntimeError):
    """Base class for failures that abort a run."""


class FilesystemError(WordCountError):
    """A directory or file could not be opened, read or created."""


class EmptyInputError(WordCountError):
    """The input directory has no entries."""


# ---- Data -----------------------------------------------------------------


@dataclass(frozen=True)
class WordCountRecord:
    name: str
    count: int

    def line(self) -> str:
        return f"{self.name} has {self.count} words"


@dataclass
class JobConfig:
    input_dir: pathlib.Path = DEFAULT_INPUT_DIR
    output_dir: pathlib.Path = DEFAULT_OUTPUT_DIR
    report_name: str = DEFAULT_REPORT_NAME
    chunk_size: int = DEFAULT_CHUNK_SIZE

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, Any]) -> "JobConfig":
        return cls(
            input_dir=pathlib.Path(cfg.get("inputDir", DEFAULT_INPUT_DIR)),
            output_dir=pathlib.Path(cfg.get("outputDir", DEFAULT_OUTPUT_DIR)),
            report_name=cfg.get("reportName", DEFAULT_REPORT_NAME),
            chunk_size=cfg.get("chunkSize", DEFAULT_CHUNK_SIZE),
        )


def format_total(total: int) -> str:
    return f"Total word count:  {total}"


# ---- Config loading -------------------------------------------------------


def load_json(path: pathlib.Path) -> Dict[str, Any]:
    return json.loads(path.read_text(encoding="utf-8"))


def load_config(path: pathlib.Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return yaml.safe_load(text)


def load_schema() -> Dict[str, Any]:
    try:
        return load_json(SCHEMA_PATH)
    except (OSError, ValueError) as exc:
        raise ConfigError(f"cannot load schema {SCHEMA_PATH}: {exc}") from exc


def validate_config(cfg: Mapping[str, Any]) -> None:
    """Validate ``cfg`` structurally and semantically."""

    schema = load_schema()
    Draft7Validator(schema).validate(cfg)

    report_name = cfg.get("reportName")
    if report_name is not None:
        if report_name in (".", "..") or os.sep in report_name or "/" in report_name:
            raise ConfigError(f"reportName must be a plain file name: {report_name!r}")

    if "inputDir" in cfg and "outputDir" in cfg:
        if os.path.normpath(cfg["inputDir"]) == os.path.normpath(cfg["outputDir"]):
            raise ConfigError("inputDir and outputDir must differ")


# ---- Counting -------------------------------------------------------------


def iter_words(stream: IO[bytes], chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
    """Yield each maximal run of non-whitespace bytes read from ``stream``.

    The stream is consumed ``chunk_size`` bytes at a time; the pieces of a word
    cut by chunk boundaries are collected and joined once it is complete.
    """
    pending: List[bytes] = []
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        words = chunk.split()
        if pending and not chunk[:1].isspace():
            pending.append(words.pop(0))
            if not words and not chunk[-1:].isspace():
                continue
        if pending:
            yield b"".join(pending)
            pending = []
        # a trailing partial word may continue in the next chunk
        if words and not chunk[-1:].isspace():
            pending.append(words.pop())
        yield from words
    if pending:
        yield b"".join(pending)


def count_words(stream: IO[bytes], chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    return sum(1 for _ in iter_words(stream, chunk_size))


def list_entries(input_dir: pathlib.Path) -> List[str]:
    """Return the names of the direct entries of ``input_dir``, unsorted."""
    try:
        with os.scandir(input_dir) as it:
            return [entry.name for entry in it]
    except OSError as exc:
        raise FilesystemError(f"cannot read input directory {input_dir}: {exc.strerror}") from exc


def count_file(path: pathlib.Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    try:
        with open(path, "rb") as f:
            return count_words(f, chunk_size)
    except OSError as exc:
        raise FilesystemError(f"cannot read {path}: {exc.strerror}") from exc


def run(
    input_dir: pathlib.Path,
    output_dir: pathlib.Path,
    report_name: str = DEFAULT_REPORT_NAME,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> int:
    """Write per-file word counts to the report and return the total.

    Any failure aborts the run; lines already written to the report stay there.
    """
    input_dir = pathlib.Path(input_dir)
    output_dir = pathlib.Path(output_dir)

    entries = list_entries(input_dir)
    if not entries:
        raise EmptyInputError(f"no files found in {input_dir}")
    logger.debug("found %d entries in %s", len(entries), input_dir)

    report_path = output_dir / report_name
    try:
        # undecodable file names are written back as their raw bytes
        out = open(report_path, "w", encoding="utf-8", errors="surrogateescape")
    except OSError as exc:
        raise FilesystemError(f"cannot create {report_path}: {exc.strerror}") from exc

    total = 0
    with out:
        for name in entries:
            record = WordCountRecord(name, count_file(input_dir / name, chunk_size))
            logger.debug("%s", record.line())
            total += record.count
            try:
                out.write(record.line() + "\n")
            except OSError as exc:
                raise FilesystemError(f"cannot write {report_path}: {exc.strerror}") from exc

    return total


def run_job(job: JobConfig) -> int:
    logger.debug(
        "counting words in %s, report to %s", job.input_dir, job.output_dir / job.report_name
    )
    return run(job.input_dir, job.output_dir, job.report_name, job.chunk_size)


# ---- CLI ------------------------------------------------------------------


def build_job(args: argparse.Namespace) -> JobConfig:
    cfg: Dict[str, Any] = {}
    if args.config is not None:
        try:
            cfg = load_config(args.config) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"cannot load {args.config}: {exc}") from exc
        if not isinstance(cfg, dict):
            raise ConfigError(f"{args.config} must contain a mapping")
    if args.input_dir is not None:
        cfg["inputDir"] = str(args.input_dir)
    if args.output_dir is not None:
        cfg["outputDir"] = str(args.output_dir)
    if args.report_name is not None:
        cfg["reportName"] = args.report_name
    validate_config(cfg)
    return JobConfig.from_mapping(cfg)


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Count words in every file of a directory")
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        help="Path to job config JSON or YAML",
    )
    parser.add_argument(
        "-i",
        "--input-dir",
        type=pathlib.Path,
        help=f"Directory with the files to count (default {DEFAULT_INPUT_DIR})",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        type=pathlib.Path,
        help=f"Directory for the report (default {DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "--report-name", help=f"Report file name (default {DEFAULT_REPORT_NAME})"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log progress to stderr"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )

    try:
        job = build_job(args)
    except ValidationError as e:
        print(f"CONFIG ERROR: {e.message}", file=sys.stderr)
        return 1
    except ConfigError as e:
        print(f"CONFIG ERROR: {e}", file=sys.stderr)
        return 1

    try:
        total = run_job(job)
    except WordCountError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(format_total(total))
    return 0
