"""Azure DevOps MCP Server - Model Context Protocol integration.

This package exposes an Azure DevOps organization to AI assistants as a
set of MCP tools that return markdown.

Modules:
- server: stdio MCP server implementation
- config: environment settings
- connection: authenticated REST connection and area clients
- formatters: Response formatting utilities
- tools: MCP tool definitions
- handlers: Tool implementation handlers
"""

__version__ = "1.0.0"

from . import formatters
from . import tools
from . import handlers

__all__ = ["formatters", "tools", "handlers", "__version__"]
