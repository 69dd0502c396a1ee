"""FastMCP stdio server exposing envshade operations as tools."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, cast

import structlog
from mcp.server.fastmcp import FastMCP

from envshade.lib.logging import configure_logging
from envshade.lib.ops.codec import coerce_input_payload, signature_from_dataclass
from envshade.lib.ops.generate import GenerateAllInput, GenerateAllOutput, generate_all_sync
from envshade.lib.ops.registry import get_all_operations
from envshade.lib.serialization import to_jsonable

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from envshade.lib.ops.registry import OperationSpec

logger = structlog.get_logger(__name__)

# MCP tool name -> operation, filled when the module is imported.
_TOOLS: dict[str, OperationSpec[Any, Any]] = {}


def _keep_existing(_: str) -> bool:
    return False


async def _generate_all_unattended(payload: GenerateAllInput) -> GenerateAllOutput:
    # There is no terminal behind stdio: existing files stay unless `force`.
    return await asyncio.to_thread(generate_all_sync, payload, confirm=_keep_existing)


_UNATTENDED_HANDLERS: dict[str, Callable[[Any], Awaitable[object]]] = {
    "generate.all": _generate_all_unattended,
}


@asynccontextmanager
async def lifespan(server: FastMCP[Any]) -> AsyncIterator[dict[str, object]]:
    # stdout is the protocol channel; logs go to stderr as JSON.
    configure_logging(json_mode=True)
    logger.info("mcp server started", server=server.name, tools=sorted(_TOOLS))
    try:
        yield {"tools": tuple(sorted(_TOOLS))}
    finally:
        logger.info("mcp server stopped", server=server.name)


mcp = FastMCP("envshade", lifespan=lifespan)


def _build_tool_handler(op: OperationSpec[Any, Any]) -> Callable[..., Awaitable[object]]:
    run = _UNATTENDED_HANDLERS.get(op.name, op.handler)

    async def tool(**arguments: object) -> object:
        payload = coerce_input_payload(op.input_type, arguments)
        logger.debug("tool called", tool=op.mcp_name)
        return to_jsonable(await run(payload))

    tool.__name__ = op.mcp_name
    tool.__doc__ = op.description
    cast("Any", tool).__signature__ = signature_from_dataclass(op.input_type)
    return tool


def _mount_tools() -> None:
    for op in get_all_operations():
        if op.cli_only:
            continue
        mcp.tool(name=op.mcp_name, description=op.description)(_build_tool_handler(op))
        _TOOLS[op.mcp_name] = op


def get_registered_mcp_tools() -> set[str]:
    return set(_TOOLS)


def get_registered_mcp_descriptions() -> dict[str, str]:
    """Tool descriptions keyed by operation name."""

    return {op.name: op.description for op in _TOOLS.values()}


def run_server() -> None:
    mcp.run(transport="stdio")


_mount_tools()
