from .providers import (
    CompleteProvider,
    ElicitationProvider,
    ListChangedProvider,
    LoggingProvider,
    McpMethodProvider,
    ProgressProvider,
    PromptProvider,
    ResourceProvider,
    SamplingProvider,
    ToolProvider,
    discover_methods,
)
from .specs import (
    CompleteSpecification,
    ElicitationSpecification,
    ListChangedSpecification,
    LoggingSpecification,
    ProgressSpecification,
    PromptSpecification,
    ResourceSpecification,
    SamplingSpecification,
    ToolSpecification,
)

__all__ = [
    "CompleteProvider",
    "CompleteSpecification",
    "ElicitationProvider",
    "ElicitationSpecification",
    "ListChangedProvider",
    "ListChangedSpecification",
    "LoggingProvider",
    "LoggingSpecification",
    "McpMethodProvider",
    "ProgressProvider",
    "ProgressSpecification",
    "PromptProvider",
    "PromptSpecification",
    "ResourceProvider",
    "ResourceSpecification",
    "SamplingProvider",
    "SamplingSpecification",
    "ToolProvider",
    "ToolSpecification",
    "discover_methods",
]
