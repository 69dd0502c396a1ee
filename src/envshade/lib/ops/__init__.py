"""Operations shared by the CLI and the MCP server; see `registry`."""
