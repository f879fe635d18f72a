from .base import MCP_METHOD_ATTR, McpMethodInfo, get_method_info
from .client import (
    mcp_elicitation,
    mcp_logging,
    mcp_progress,
    mcp_prompt_list_changed,
    mcp_resource_list_changed,
    mcp_sampling,
    mcp_tool_list_changed,
)
from .server import mcp_complete, mcp_prompt, mcp_resource, mcp_tool

__all__ = [
    "MCP_METHOD_ATTR",
    "McpMethodInfo",
    "get_method_info",
    "mcp_complete",
    "mcp_elicitation",
    "mcp_logging",
    "mcp_progress",
    "mcp_prompt",
    "mcp_prompt_list_changed",
    "mcp_resource",
    "mcp_resource_list_changed",
    "mcp_sampling",
    "mcp_tool",
    "mcp_tool_list_changed",
]
