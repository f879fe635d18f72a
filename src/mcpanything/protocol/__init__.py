from .types import (
    AsyncServerExchange,
    BlobResourceContents,
    CallToolRequest,
    CallToolResult,
    CompleteArgument,
    CompleteCompletion,
    CompleteReference,
    CompleteRequest,
    CompleteResult,
    Content,
    CreateMessageRequest,
    CreateMessageResult,
    ElicitAction,
    ElicitRequest,
    ElicitResult,
    ErrorCodes,
    GetPromptRequest,
    GetPromptResult,
    ImageContent,
    LoggingLevel,
    LoggingMessageNotification,
    ProgressNotification,
    Prompt,
    PromptArgument,
    PromptMessage,
    PromptReference,
    ReadResourceRequest,
    ReadResourceResult,
    Resource,
    ResourceContents,
    ResourceReference,
    ResourceTemplate,
    Role,
    SamplingMessage,
    ServerExchange,
    SyncServerExchange,
    TextContent,
    TextResourceContents,
    Tool,
    ToolAnnotations,
    TransportContext,
)

__all__ = [
    "AsyncServerExchange",
    "BlobResourceContents",
    "CallToolRequest",
    "CallToolResult",
    "CompleteArgument",
    "CompleteCompletion",
    "CompleteReference",
    "CompleteRequest",
    "CompleteResult",
    "Content",
    "CreateMessageRequest",
    "CreateMessageResult",
    "ElicitAction",
    "ElicitRequest",
    "ElicitResult",
    "ErrorCodes",
    "GetPromptRequest",
    "GetPromptResult",
    "ImageContent",
    "LoggingLevel",
    "LoggingMessageNotification",
    "ProgressNotification",
    "Prompt",
    "PromptArgument",
    "PromptMessage",
    "PromptReference",
    "ReadResourceRequest",
    "ReadResourceResult",
    "Resource",
    "ResourceContents",
    "ResourceReference",
    "ResourceTemplate",
    "Role",
    "SamplingMessage",
    "ServerExchange",
    "SyncServerExchange",
    "TextContent",
    "TextResourceContents",
    "Tool",
    "ToolAnnotations",
    "TransportContext",
]
