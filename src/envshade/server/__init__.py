"""MCP stdio server; tools are mounted from the operation registry in `main`."""
