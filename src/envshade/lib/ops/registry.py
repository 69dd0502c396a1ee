"""Registry of envshade operations shared by the CLI and the MCP server."""

from __future__ import annotations

import importlib
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")

# Each module registers its operations at import time.
_OPERATION_MODULES: tuple[str, ...] = (
    "envshade.lib.ops.config",
    "envshade.lib.ops.files",
    "envshade.lib.ops.generate",
)


@dataclass(frozen=True, slots=True)
class OperationSpec(Generic[InputT, OutputT]):
    """One operation, its payload types and where it is mounted.

    `sync_handler` backs the CLI command `<cli_group> <cli_name>`; `handler`
    backs the MCP tool `mcp_name` unless the operation is `cli_only`.
    """

    name: str
    handler: Callable[[InputT], Coroutine[Any, Any, OutputT]]
    sync_handler: Callable[..., OutputT]
    input_type: type[InputT]
    output_type: type[OutputT]
    cli_group: str
    cli_name: str
    mcp_name: str
    description: str
    cli_only: bool = False


_REGISTRY: dict[str, OperationSpec[Any, Any]] = {}
_loaded = False


def operation(spec: OperationSpec[InputT, OutputT]) -> OperationSpec[InputT, OutputT]:
    """Add `spec` to the registry; names are unique."""

    existing = _REGISTRY.get(spec.name)
    if existing is not None:
        raise ValueError(
            f"Duplicate operation name '{spec.name}' (first registered from "
            f"{existing.handler.__module__})"
        )
    _REGISTRY[spec.name] = spec
    return spec


def _load_operation_modules() -> None:
    global _loaded
    if _loaded:
        return
    for module in _OPERATION_MODULES:
        importlib.import_module(module)
    _loaded = True


def get_all_operations() -> list[OperationSpec[Any, Any]]:
    """All operations, ordered by name."""

    _load_operation_modules()
    return sorted(_REGISTRY.values(), key=lambda spec: spec.name)


def get_operation(name: str) -> OperationSpec[Any, Any]:
    _load_operation_modules()
    return _REGISTRY[name]


def get_mcp_tool_names() -> frozenset[str]:
    _load_operation_modules()
    return frozenset(spec.mcp_name for spec in _REGISTRY.values() if not spec.cli_only)
