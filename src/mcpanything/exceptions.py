from __future__ import annotations

from typing import Any, Dict


class McpAnythingError(Exception):
    """mcpanything 的基礎例外。"""


class BindingError(McpAnythingError, ValueError):
    """建立 handler 時的方法簽名錯誤，屬於致命錯誤，不會重試。"""

    def __init__(
        self,
        message: str,
        *,
        role: Any = None,
        parameter: str | None = None,
        position: int | None = None,
    ) -> None:
        super().__init__(message)
        self.role = role
        self.parameter = parameter
        self.position = position


class StatelessExchangeError(BindingError):
    """無狀態 transport 的方法宣告了綁定 session 的 exchange 參數。"""


class ResolutionError(McpAnythingError, ValueError):
    """呼叫時請求本身結構不正確，例如 request 為 None。"""


class TemplateExtractionError(ResolutionError):
    """請求 URI 與資源 URI template 不相符。"""

    def __init__(self, message: str, *, uri: str, template: str, expected: tuple[str, ...]) -> None:
        super().__init__(message)
        self.uri = uri
        self.template = template
        self.expected = expected


class ConversionError(McpAnythingError):
    """具名參數無法轉換成宣告的型別。"""

    def __init__(self, target_type: str, value: Any, *, argument: str | None = None) -> None:
        target = f" for argument '{argument}'" if argument else ""
        super().__init__(f"Cannot convert value {value!r} to {target_type}{target}")
        self.target_type = target_type
        self.value = value
        self.argument = argument


class InvocationError(McpAnythingError):
    """使用者方法本身拋出例外，原始例外保留在 ``__cause__``。"""

    kind = "method"

    def __init__(self, message: str, *, method: str | None = None) -> None:
        super().__init__(message)
        self.method = method

    def to_dict(self) -> Dict[str, Any]:
        cause = find_root_cause(self)
        return {
            "type": f"{self.kind}_method_error",
            "message": str(self),
            "method": self.method,
            "cause": None if cause is self else str(cause),
        }


class ToolMethodError(InvocationError):
    kind = "tool"


class PromptMethodError(InvocationError):
    kind = "prompt"


class ResourceMethodError(InvocationError):
    kind = "resource"


class SamplingMethodError(InvocationError):
    kind = "sampling"


class ElicitationMethodError(InvocationError):
    kind = "elicitation"


class CompleteMethodError(InvocationError):
    kind = "complete"


class ProgressMethodError(InvocationError):
    kind = "progress"


class LoggingMethodError(InvocationError):
    kind = "logging"


class ListChangedMethodError(InvocationError):
    kind = "list_changed"


class McpError(McpAnythingError):
    """協議層錯誤，對應 JSON-RPC error 物件。"""

    def __init__(self, code: int, message: str, *, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            payload["data"] = self.data
        return payload


def find_root_cause(exc: BaseException) -> BaseException:
    """沿著 ``__cause__`` 找到最底層的原始例外。"""

    root = exc
    while root.__cause__ is not None and root.__cause__ is not root:
        root = root.__cause__
    return root
