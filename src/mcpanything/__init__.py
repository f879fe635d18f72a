"""mcpanything 主入口。"""
from mcpanything.binding import (
    CallbackBuilder,
    CallbackConfig,
    CallKind,
    ExecutionMode,
    MethodBinding,
    ParameterRoleClassifier,
    RoleKind,
    TransportMode,
    build_callback,
)
from mcpanything.core import META, PROGRESS_TOKEN, McpMeta, Param, ProgressToken, TypeConverter, UriTemplate
from mcpanything.decorators import (
    mcp_complete,
    mcp_elicitation,
    mcp_logging,
    mcp_progress,
    mcp_prompt,
    mcp_prompt_list_changed,
    mcp_resource,
    mcp_resource_list_changed,
    mcp_sampling,
    mcp_tool,
    mcp_tool_list_changed,
)
from mcpanything.exceptions import (
    BindingError,
    ConversionError,
    InvocationError,
    McpAnythingError,
    McpError,
    ResolutionError,
    StatelessExchangeError,
    TemplateExtractionError,
)
from mcpanything.provider import (
    CompleteProvider,
    ElicitationProvider,
    ListChangedProvider,
    LoggingProvider,
    ProgressProvider,
    PromptProvider,
    ResourceProvider,
    SamplingProvider,
    ToolProvider,
)
from mcpanything.utils.logger import configure_logging

__all__ = [
    "BindingError",
    "CallKind",
    "CallbackBuilder",
    "CallbackConfig",
    "CompleteProvider",
    "ConversionError",
    "ElicitationProvider",
    "ExecutionMode",
    "InvocationError",
    "ListChangedProvider",
    "LoggingProvider",
    "META",
    "McpAnythingError",
    "McpError",
    "McpMeta",
    "MethodBinding",
    "PROGRESS_TOKEN",
    "Param",
    "ParameterRoleClassifier",
    "ProgressProvider",
    "ProgressToken",
    "PromptProvider",
    "ResolutionError",
    "ResourceProvider",
    "RoleKind",
    "SamplingProvider",
    "StatelessExchangeError",
    "TemplateExtractionError",
    "ToolProvider",
    "TransportMode",
    "TypeConverter",
    "UriTemplate",
    "build_callback",
    "configure_logging",
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
