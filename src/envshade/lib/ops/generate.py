"""Generate `.env.example` files from `.env` files and back."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TypeAlias

import structlog

from envshade.lib.dotenv import Document, ParseError, generate_env, generate_example, parse_file
from envshade.lib.dotenv import masked_keys as document_masked_keys
from envshade.lib.dotenv import render, write_file
from envshade.lib.fs.backup import create_backup
from envshade.lib.fs.scanner import ENV_FILE_NAME, EXAMPLE_SUFFIX, scan_examples
from envshade.lib.ops._runtime import resolve_runtime_root_and_config
from envshade.lib.ops.registry import OperationSpec, operation

if TYPE_CHECKING:
    from envshade.lib.config.settings import EnvshadeConfig
    from envshade.lib.formatting import FormatContext

logger = structlog.get_logger(__name__)

GenerateStatus: TypeAlias = Literal[
    "created",
    "overwritten",
    "skipped",
    "would-create",
    "would-overwrite",
]
ConfirmOverwrite: TypeAlias = Callable[[str], bool]


@dataclass(frozen=True, slots=True)
class GenerateFileInput:
    path: str
    force: bool = False
    backup: bool | None = None
    dry_run: bool = False
    repo_root: str | None = None


@dataclass(frozen=True, slots=True)
class GenerateFileOutput:
    input_path: str
    output_path: str
    status: GenerateStatus
    existed: bool
    backup_path: str | None = None
    masked_keys: tuple[str, ...] = ()
    content: str | None = None

    def format_text(self, ctx: FormatContext | None = None) -> str:
        _ = ctx
        if self.status in ("would-create", "would-overwrite"):
            return _format_preview(self)
        if self.status == "skipped":
            return f"Skipped {self.output_path}"
        lines: list[str] = []
        if self.backup_path is not None:
            lines.append(f"Backup created: {self.backup_path}")
        lines.append(f"Generated {self.output_path}")
        return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class GenerateAllInput:
    root: str | None = None
    force: bool = False
    backup: bool | None = None
    dry_run: bool = False
    repo_root: str | None = None


@dataclass(frozen=True, slots=True)
class GenerateAllOutput:
    root: str
    examples: tuple[str, ...]
    results: tuple[GenerateFileOutput, ...] = ()
    generated: int = 0
    skipped: int = 0
    dry_run: bool = False

    def format_text(self, ctx: FormatContext | None = None) -> str:
        lines = [f"Found {len(self.examples)} .env.example file(s):"]
        lines.extend(f"  {example}" for example in self.examples)
        if self.dry_run:
            lines.append("")
            lines.append("[DRY RUN MODE - No files will be written]")
        for result in self.results:
            lines.append(result.format_text(ctx))
        if not self.dry_run:
            lines.append(f"Done: {self.generated} generated, {self.skipped} skipped")
        return "\n".join(lines)


def _format_preview(result: GenerateFileOutput) -> str:
    status = (
        "Would OVERWRITE existing file"
        if result.status == "would-overwrite"
        else "Would CREATE new file"
    )
    return "\n".join(
        [
            "",
            "=== DRY RUN PREVIEW ===",
            f"File: {result.output_path}",
            f"Status: {status}",
            "",
            "Content preview:",
            "---",
            f"{result.content or ''}---",
        ]
    )


def example_output_path(input_path: Path) -> Path:
    """`.env` -> `.env.example`, `.env.local` -> `.env.local.example`."""

    return input_path.with_name(f"{input_path.name}{EXAMPLE_SUFFIX}")


def env_output_path(input_path: Path) -> Path:
    """`.env.local.example` -> `.env.local`; anything without the suffix -> `.env`."""

    name = input_path.name
    if name.endswith(EXAMPLE_SUFFIX) and len(name) > len(EXAMPLE_SUFFIX):
        return input_path.with_name(name.removesuffix(EXAMPLE_SUFFIX))
    return input_path.with_name(ENV_FILE_NAME)


def _load_document(path: Path) -> Document:
    if not path.is_file():
        raise FileNotFoundError(f"Input file '{path.as_posix()}' does not exist.")
    try:
        return parse_file(path)
    except ParseError as exc:
        raise ValueError(f"Failed to parse '{path.as_posix()}': {exc}") from exc


def _resolve_backup(requested: bool | None, config: EnvshadeConfig) -> bool:
    return config.create_backup if requested is None else requested


def _emit(
    *,
    input_path: Path,
    output_path: Path,
    document: Document,
    masked: tuple[str, ...],
    dry_run: bool,
    backup: bool,
) -> GenerateFileOutput:
    existed = output_path.exists()
    if dry_run:
        return GenerateFileOutput(
            input_path=input_path.as_posix(),
            output_path=output_path.as_posix(),
            status="would-overwrite" if existed else "would-create",
            existed=existed,
            masked_keys=masked,
            content=render(document),
        )

    backup_file = create_backup(output_path) if backup and existed else None
    write_file(document, output_path)
    logger.info(
        "file generated",
        source=input_path.as_posix(),
        output=output_path.as_posix(),
        overwritten=existed,
        masked=len(masked),
    )
    return GenerateFileOutput(
        input_path=input_path.as_posix(),
        output_path=output_path.as_posix(),
        status="overwritten" if existed else "created",
        existed=existed,
        backup_path=backup_file.as_posix() if backup_file is not None else None,
        masked_keys=masked,
    )


def _generate_one(
    payload: GenerateFileInput,
    *,
    transform: Callable[[Document], Document],
    output_for: Callable[[Path], Path],
    mask: bool,
) -> GenerateFileOutput:
    _, config = resolve_runtime_root_and_config(payload.repo_root)
    input_path = Path(payload.path).expanduser()
    source = _load_document(input_path)
    output_path = output_for(input_path)

    if output_path.exists() and not payload.force and not payload.dry_run:
        raise FileExistsError(f"{output_path.as_posix()} already exists. Use --force to overwrite")

    return _emit(
        input_path=input_path,
        output_path=output_path,
        document=transform(source),
        masked=document_masked_keys(source) if mask else (),
        dry_run=payload.dry_run,
        backup=_resolve_backup(payload.backup, config),
    )


def generate_example_sync(payload: GenerateFileInput) -> GenerateFileOutput:
    return _generate_one(
        payload,
        transform=generate_example,
        output_for=example_output_path,
        mask=True,
    )


def generate_env_sync(payload: GenerateFileInput) -> GenerateFileOutput:
    return _generate_one(
        payload,
        transform=generate_env,
        output_for=env_output_path,
        mask=False,
    )


def generate_all_sync(
    payload: GenerateAllInput,
    *,
    confirm: ConfirmOverwrite | None = None,
) -> GenerateAllOutput:
    """Materialise a `.env` next to every example file under `root`.

    Existing targets are replaced when `force` is set; otherwise `confirm`
    is asked per file, and a missing callback means "skip".
    """

    repo_root, config = resolve_runtime_root_and_config(payload.repo_root)
    root = Path(payload.root).expanduser() if payload.root else repo_root
    examples = tuple(scan_examples(root, skip_dirs=config.skip_dirs))
    if not examples:
        raise ValueError("no .env.example files found")

    backup = _resolve_backup(payload.backup, config)
    results: list[GenerateFileOutput] = []
    for relative in examples:
        input_path = root / relative
        output_path = env_output_path(input_path)
        document = generate_env(_load_document(input_path))

        if (
            not payload.dry_run
            and not payload.force
            and output_path.exists()
            and (confirm is None or not confirm(output_path.as_posix()))
        ):
            logger.info("file skipped", output=output_path.as_posix())
            results.append(
                GenerateFileOutput(
                    input_path=input_path.as_posix(),
                    output_path=output_path.as_posix(),
                    status="skipped",
                    existed=True,
                )
            )
            continue

        results.append(
            _emit(
                input_path=input_path,
                output_path=output_path,
                document=document,
                masked=(),
                dry_run=payload.dry_run,
                backup=backup,
            )
        )

    return GenerateAllOutput(
        root=root.as_posix(),
        examples=examples,
        results=tuple(results),
        generated=sum(1 for item in results if item.status in ("created", "overwritten")),
        skipped=sum(1 for item in results if item.status == "skipped"),
        dry_run=payload.dry_run,
    )


async def generate_example_op(payload: GenerateFileInput) -> GenerateFileOutput:
    return await asyncio.to_thread(generate_example_sync, payload)


async def generate_env_op(payload: GenerateFileInput) -> GenerateFileOutput:
    return await asyncio.to_thread(generate_env_sync, payload)


async def generate_all_op(payload: GenerateAllInput) -> GenerateAllOutput:
    return await asyncio.to_thread(generate_all_sync, payload)


operation(
    OperationSpec[GenerateFileInput, GenerateFileOutput](
        name="generate.example",
        handler=generate_example_op,
        sync_handler=generate_example_sync,
        input_type=GenerateFileInput,
        output_type=GenerateFileOutput,
        cli_group="generate",
        cli_name="example",
        mcp_name="generate_example",
        description="Generate a .env.example with secret values masked.",
    )
)

operation(
    OperationSpec[GenerateFileInput, GenerateFileOutput](
        name="generate.env",
        handler=generate_env_op,
        sync_handler=generate_env_sync,
        input_type=GenerateFileInput,
        output_type=GenerateFileOutput,
        cli_group="generate",
        cli_name="env",
        mcp_name="generate_env",
        description="Generate a .env from a .env.example.",
    )
)

operation(
    OperationSpec[GenerateAllInput, GenerateAllOutput](
        name="generate.all",
        handler=generate_all_op,
        sync_handler=generate_all_sync,
        input_type=GenerateAllInput,
        output_type=GenerateAllOutput,
        cli_group="generate",
        cli_name="all",
        mcp_name="generate_all",
        description="Generate .env files from every .env.example under a directory.",
    )
)
