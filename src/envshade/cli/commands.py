"""Mount registry operations as cyclopts commands."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Annotated, Any

from cyclopts import Parameter

from envshade.lib.ops.files import InspectInput, ScanInput
from envshade.lib.ops.generate import GenerateAllInput, GenerateFileInput
from envshade.lib.ops.registry import OperationSpec, get_all_operations

if TYPE_CHECKING:
    from cyclopts import App

Emitter = Callable[[Any], None]
# Called per invocation so the policy reflects the current global flags.
ConfirmFactory = Callable[[], Any]
Command = Callable[..., None]

ForceFlag = Annotated[
    bool,
    Parameter(name="--force", help="Overwrite the output file if it already exists."),
]
BackupFlag = Annotated[
    bool | None,
    Parameter(
        name="--backup",
        help="Back up an existing output file first (default: [generate] backup).",
    ),
]
DryRunFlag = Annotated[
    bool,
    Parameter(name="--dry-run", help="Preview the generated file without writing it."),
]
ExamplesFlag = Annotated[
    bool,
    Parameter(name="--examples", help="List .env.example files instead of .env files."),
]


def _generate_file_command(op: OperationSpec[Any, Any], emit: Emitter) -> Command:
    def command(
        path: str,
        *,
        force: ForceFlag = False,
        backup: BackupFlag = None,
        dry_run: DryRunFlag = False,
    ) -> None:
        payload = GenerateFileInput(path=path, force=force, backup=backup, dry_run=dry_run)
        emit(op.sync_handler(payload))

    return command


def _generate_all_command(
    op: OperationSpec[Any, Any],
    emit: Emitter,
    confirm: ConfirmFactory,
) -> Command:
    def command(
        root: str | None = None,
        *,
        force: ForceFlag = False,
        backup: BackupFlag = None,
        dry_run: DryRunFlag = False,
    ) -> None:
        payload = GenerateAllInput(root=root, force=force, backup=backup, dry_run=dry_run)
        emit(op.sync_handler(payload, confirm=confirm()))

    return command


def _scan_command(op: OperationSpec[Any, Any], emit: Emitter) -> Command:
    def command(root: str | None = None, *, examples: ExamplesFlag = False) -> None:
        emit(op.sync_handler(ScanInput(root=root, examples=examples)))

    return command


def _inspect_command(op: OperationSpec[Any, Any], emit: Emitter) -> Command:
    def command(path: str) -> None:
        emit(op.sync_handler(InspectInput(path=path)))

    return command


def _config_command(op: OperationSpec[Any, Any], emit: Emitter) -> Command:
    def command() -> None:
        emit(op.sync_handler(op.input_type()))

    return command


def register_operation_commands(
    groups: Mapping[str, App],
    emit: Emitter,
    confirm: ConfirmFactory,
) -> dict[str, str]:
    """Mount each operation on the app for its `cli_group`.

    `files` operations belong on the root app, so `groups` maps that group to
    it. Returns the help text of every mounted command keyed by operation name.
    """

    builders: dict[str, Callable[[OperationSpec[Any, Any]], Command]] = {
        "generate.example": lambda op: _generate_file_command(op, emit),
        "generate.env": lambda op: _generate_file_command(op, emit),
        "generate.all": lambda op: _generate_all_command(op, emit, confirm),
        "files.scan": lambda op: _scan_command(op, emit),
        "files.inspect": lambda op: _inspect_command(op, emit),
        "config.init": lambda op: _config_command(op, emit),
        "config.show": lambda op: _config_command(op, emit),
    }

    mounted: dict[str, str] = {}
    for op in get_all_operations():
        build = builders.get(op.name)
        if build is None:
            raise ValueError(f"Operation '{op.name}' has no CLI command")
        command = build(op)
        command.__name__ = op.name.replace(".", "_")
        groups[op.cli_group].command(command, name=op.cli_name, help=op.description)
        mounted[op.name] = op.description
    return mounted
