"""Discover `.env` files and report what would be masked in them."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from envshade.lib.dotenv import BlankLine, Comment, ParseError, parse_file
from envshade.lib.formatting import tabular
from envshade.lib.fs.scanner import scan, scan_examples
from envshade.lib.ops._runtime import resolve_runtime_root_and_config
from envshade.lib.ops.registry import OperationSpec, operation
from envshade.lib.safety.detector import is_secret
from envshade.lib.safety.placeholder import generate_placeholder

if TYPE_CHECKING:
    from envshade.lib.formatting import FormatContext


@dataclass(frozen=True, slots=True)
class ScanInput:
    root: str | None = None
    examples: bool = False
    repo_root: str | None = None


@dataclass(frozen=True, slots=True)
class ScanOutput:
    root: str
    files: tuple[str, ...]
    examples: bool = False

    def format_text(self, ctx: FormatContext | None = None) -> str:
        _ = ctx
        kind = ".env.example" if self.examples else ".env"
        if not self.files:
            return f"No {kind} files found"
        lines = [f"Found {len(self.files)} {kind} file(s):"]
        lines.extend(f"  {path}" for path in self.files)
        return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class InspectInput:
    path: str


@dataclass(frozen=True, slots=True)
class InspectedKey:
    key: str
    secret: bool
    placeholder: str | None = None
    exported: bool = False


@dataclass(frozen=True, slots=True)
class InspectOutput:
    path: str
    keys: tuple[InspectedKey, ...]
    comments: int = 0
    blank_lines: int = 0

    def format_text(self, ctx: FormatContext | None = None) -> str:
        verbose = ctx is not None and ctx.verbosity > 0
        if not self.keys:
            return f"{self.path}: no keys"
        rows = [
            [item.key, "secret" if item.secret else "plain", item.placeholder or ""]
            for item in self.keys
        ]
        secrets = sum(1 for item in self.keys if item.secret)
        lines = [tabular(rows), "", f"{len(self.keys)} keys, {secrets} secret"]
        if verbose:
            lines.append(f"{self.comments} comments, {self.blank_lines} blank lines")
        return "\n".join(lines)


def scan_sync(payload: ScanInput) -> ScanOutput:
    repo_root, config = resolve_runtime_root_and_config(payload.repo_root)
    root = Path(payload.root).expanduser() if payload.root else repo_root
    finder = scan_examples if payload.examples else scan
    return ScanOutput(
        root=root.as_posix(),
        files=tuple(finder(root, skip_dirs=config.skip_dirs)),
        examples=payload.examples,
    )


def inspect_sync(payload: InspectInput) -> InspectOutput:
    """Classify every key in a file; values themselves are never reported."""

    path = Path(payload.path).expanduser()
    if not path.is_file():
        raise FileNotFoundError(f"Input file '{path.as_posix()}' does not exist.")
    try:
        document = parse_file(path)
    except ParseError as exc:
        raise ValueError(f"Failed to parse '{path.as_posix()}': {exc}") from exc

    keys: list[InspectedKey] = []
    for entry in document.key_values():
        secret = is_secret(entry.key, entry.value)
        keys.append(
            InspectedKey(
                key=entry.key,
                secret=secret,
                placeholder=generate_placeholder(entry.key, entry.value) if secret else None,
                exported=entry.exported,
            )
        )
    return InspectOutput(
        path=path.as_posix(),
        keys=tuple(keys),
        comments=sum(1 for entry in document if isinstance(entry, Comment)),
        blank_lines=sum(1 for entry in document if isinstance(entry, BlankLine)),
    )


async def scan_op(payload: ScanInput) -> ScanOutput:
    return await asyncio.to_thread(scan_sync, payload)


async def inspect_op(payload: InspectInput) -> InspectOutput:
    return await asyncio.to_thread(inspect_sync, payload)


operation(
    OperationSpec[ScanInput, ScanOutput](
        name="files.scan",
        handler=scan_op,
        sync_handler=scan_sync,
        input_type=ScanInput,
        output_type=ScanOutput,
        cli_group="files",
        cli_name="scan",
        mcp_name="files_scan",
        description="List .env files (or .env.example files) under a directory.",
    )
)

operation(
    OperationSpec[InspectInput, InspectOutput](
        name="files.inspect",
        handler=inspect_op,
        sync_handler=inspect_sync,
        input_type=InspectInput,
        output_type=InspectOutput,
        cli_group="files",
        cli_name="inspect",
        mcp_name="files_inspect",
        description="Report which keys in a .env file are secrets and how they would be masked.",
    )
)
