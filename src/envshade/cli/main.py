"""Cyclopts CLI entry point for envshade."""

from __future__ import annotations

import itertools
import sys
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated

from cyclopts import App, Parameter

from envshade import __version__
from envshade.cli.commands import register_operation_commands
from envshade.cli.output import OutputConfig, normalize_output_format
from envshade.cli.output import emit as emit_output
from envshade.lib.ops.registry import get_all_operations
from envshade.server.main import run_server

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from envshade.lib.ops.generate import ConfirmOverwrite

# Boolean global flags -> GlobalOptions attribute they switch on.
_SWITCHES: dict[str, str] = {
    "--json": "json",
    "--porcelain": "porcelain",
    "--yes": "yes",
    "--no-input": "no_input",
}
# cyclopts also accepts `--no-<flag>` for the switches above; they are no-ops.
_NEGATED_SWITCHES = frozenset(f"--no-{flag.removeprefix('--')}" for flag in _SWITCHES)
_VERBOSE_FLAGS = frozenset({"-v", "--verbose"})
_COMPLETION_SHELLS = ("bash", "zsh", "fish")


@dataclass(frozen=True, slots=True)
class GlobalOptions:
    """Flags accepted before or after any command."""

    output: OutputConfig
    yes: bool = False
    no_input: bool = False


_GLOBAL_OPTIONS: ContextVar[GlobalOptions | None] = ContextVar("_GLOBAL_OPTIONS", default=None)


def get_global_options() -> GlobalOptions:
    return _GLOBAL_OPTIONS.get() or GlobalOptions(output=OutputConfig(format="text"))


def emit(payload: object) -> None:
    emit_output(payload, get_global_options().output)


def _prompt_overwrite(path: str) -> bool:
    # stdout carries command output, so the question goes to stderr.
    print(f"{path} already exists. Overwrite? [y/N] ", end="", file=sys.stderr, flush=True)
    return sys.stdin.readline().strip() in {"y", "Y"}


def _always_overwrite(_: str) -> bool:
    return True


def resolve_confirm() -> ConfirmOverwrite | None:
    """Overwrite policy for `generate all`.

    `--yes` accepts every overwrite, `--no-input` skips every existing file,
    otherwise the user is asked per file.
    """

    options = get_global_options()
    if options.yes:
        return _always_overwrite
    if options.no_input:
        return None
    return _prompt_overwrite


def _extract_global_options(argv: Sequence[str]) -> tuple[list[str], GlobalOptions]:
    switched: set[str] = set()
    requested_format: str | None = None
    verbosity = 0
    remaining: list[str] = []

    tokens = iter(argv)
    for token in tokens:
        if token == "--":
            remaining.append(token)
            remaining.extend(tokens)
            break
        if token in _SWITCHES:
            switched.add(_SWITCHES[token])
        elif token in _NEGATED_SWITCHES:
            continue
        elif token in _VERBOSE_FLAGS:
            verbosity += 1
        elif token == "--format" or token.startswith("--format="):
            _, has_value, value = token.partition("=")
            requested_format = value if has_value else next(tokens, None)
            if requested_format is None:
                raise SystemExit("--format requires a value")
        else:
            remaining.append(token)

    output = OutputConfig(
        format=normalize_output_format(
            requested=requested_format,
            json_mode="json" in switched,
            porcelain_mode="porcelain" in switched,
        ),
        verbosity=verbosity,
    )
    return remaining, GlobalOptions(
        output=output,
        yes="yes" in switched,
        no_input="no_input" in switched,
    )


app = App(
    name="envshade",
    help="Mask secrets in .env files and keep .env.example files in sync.",
    version=__version__,
    help_formatter="plain",
)


@app.default
def root(
    json_mode: Annotated[
        bool,
        Parameter(name="--json", help="Print results as JSON (same as --format json)."),
    ] = False,
    output_format: Annotated[
        str | None,
        Parameter(name="--format", help="Result format: text (default), json or porcelain."),
    ] = None,
    porcelain: Annotated[
        bool,
        Parameter(name="--porcelain", help="Print one tab-separated key=value record per line."),
    ] = False,
    yes: Annotated[
        bool,
        Parameter(name="--yes", help="Overwrite existing files without asking."),
    ] = False,
    no_input: Annotated[
        bool,
        Parameter(
            name="--no-input",
            help="Never prompt; existing files are skipped instead of overwritten.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        Parameter(name=["--verbose", "-v"], help="Log progress to stderr (repeat for debug)."),
    ] = False,
) -> None:
    """Show help. The options listed here are accepted by every command."""

    # Global flags are stripped from argv before cyclopts runs; these
    # parameters only document them in --help.
    _ = (json_mode, output_format, porcelain, yes, no_input, verbose)
    app.help_print()


@app.command(name="serve")
def serve() -> None:
    """Start the MCP server on stdio."""

    run_server()


generate_app = App(
    name="generate",
    help="Generate .env.example and .env files",
    help_formatter="plain",
)
config_app = App(name="config", help="Show or scaffold .envshade.toml", help_formatter="plain")
completion_app = App(
    name="completion",
    help="Print a shell completion script",
    help_formatter="plain",
)

app.command(generate_app, name="generate")
app.command(config_app, name="config")
app.command(completion_app, name="completion")


def _completion_command(shell: str) -> Callable[[], None]:
    def command() -> None:
        print(app.generate_completion(shell=shell))

    command.__name__ = f"completion_{shell}"
    return command


for _shell in _COMPLETION_SHELLS:
    completion_app.command(
        _completion_command(_shell),
        name=_shell,
        help=f"Print the {_shell} completion script.",
    )


_CLI_DESCRIPTIONS: dict[str, str] = register_operation_commands(
    {"generate": generate_app, "files": app, "config": config_app},
    emit,
    resolve_confirm,
)


def get_registered_cli_commands() -> set[str]:
    """`<cli_group>.<cli_name>` for every mounted operation."""

    return {
        f"{op.cli_group}.{op.cli_name}"
        for op in get_all_operations()
        if op.name in _CLI_DESCRIPTIONS
    }


def get_registered_cli_descriptions() -> dict[str, str]:
    return dict(_CLI_DESCRIPTIONS)


def _error_message(exc: Exception) -> str:
    # str(KeyError) wraps the message in quotes.
    if isinstance(exc, KeyError) and exc.args:
        return str(exc.args[0])
    return str(exc).strip() or type(exc).__name__


def _reject_unknown_command(argv: Sequence[str]) -> None:
    before_separator = itertools.takewhile(lambda token: token != "--", argv)
    command = next((token for token in before_separator if not token.startswith("-")), None)
    if command is None or command in app.resolved_commands():
        return
    print(f"error: Unknown command: {command} (see 'envshade --help')", file=sys.stderr)
    raise SystemExit(1)


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for `envshade` and `python -m envshade`."""

    from envshade.lib.logging import configure_logging

    args, options = _extract_global_options(sys.argv[1:] if argv is None else argv)
    configure_logging(
        json_mode=options.output.format == "json",
        verbosity=options.output.verbosity,
    )
    _reject_unknown_command(args)

    token = _GLOBAL_OPTIONS.set(options)
    try:
        app(args)
    except (KeyError, ValueError, OSError) as exc:
        print(f"error: {_error_message(exc)}", file=sys.stderr)
        raise SystemExit(1) from None
    finally:
        _GLOBAL_OPTIONS.reset(token)
