from typing import Any, List

import pytest

from mcpanything import BindingError, CallKind, ResolutionError, build_callback
from mcpanything.binding import SyncNotificationCallback, SyncRequestCallback
from mcpanything.exceptions import ElicitationMethodError, ProgressMethodError, SamplingMethodError
from mcpanything.protocol import (
    CreateMessageRequest,
    CreateMessageResult,
    ElicitAction,
    ElicitRequest,
    ElicitResult,
    LoggingLevel,
    LoggingMessageNotification,
    ProgressNotification,
    Role,
    SamplingMessage,
    TextContent,
    Tool,
)

EVENTS: List[Any] = []


def on_progress(notification: ProgressNotification) -> None:
    EVENTS.append(notification)


def on_progress_fields(progress_token: str, progress: float, message: str) -> None:
    EVENTS.append((progress_token, progress, message))


def test_progress_notification_by_request_and_by_fields():
    EVENTS.clear()
    payload = ProgressNotification(progress_token="job-1", progress=0.5, total=1.0, message="half")

    handler = build_callback(on_progress, CallKind.PROGRESS)
    assert isinstance(handler, SyncNotificationCallback)
    assert handler(payload) is None

    build_callback(on_progress_fields, CallKind.PROGRESS)(payload)

    assert EVENTS == [payload, ("job-1", 0.5, "half")]


def on_log(level: LoggingLevel, data: Any) -> str:
    EVENTS.append((level, data))
    return "ignored"


def test_logging_rejects_declared_return_value():
    EVENTS.clear()

    with pytest.raises(BindingError, match="Logging methods cannot return str"):
        build_callback(on_log, CallKind.LOGGING)


def on_log_dynamic(level: LoggingLevel, data: Any):
    EVENTS.append((level, data))
    return "ignored"


def test_dynamic_notification_result_is_dropped():
    EVENTS.clear()
    handler = build_callback(on_log_dynamic, CallKind.LOGGING)

    assert handler(LoggingMessageNotification(level=LoggingLevel.ERROR, data={"code": 1})) is None
    assert EVENTS == [(LoggingLevel.ERROR, {"code": 1})]


def on_tools_changed(tools: List[Tool]) -> None:
    EVENTS.append([tool.name for tool in tools])


def on_anything_changed(items) -> None:
    EVENTS.append(len(items))


def test_list_changed_notifications():
    EVENTS.clear()
    tools = [Tool(name="a", description="", input_schema={}), Tool(name="b", description="", input_schema={})]

    build_callback(on_tools_changed, CallKind.TOOL_LIST_CHANGED)(tools)
    build_callback(on_anything_changed, CallKind.PROMPT_LIST_CHANGED)([])

    assert EVENTS == [["a", "b"], 0]


@pytest.mark.parametrize(
    "method, kind",
    [
        (on_progress, CallKind.PROGRESS),
        (on_log_dynamic, CallKind.LOGGING),
        (on_tools_changed, CallKind.TOOL_LIST_CHANGED),
    ],
)
def test_null_payload_is_rejected(method, kind):
    with pytest.raises(ResolutionError, match="Request must not be null"):
        build_callback(method, kind)(None)


def failing_progress(notification: ProgressNotification) -> None:
    raise RuntimeError("listener down")


def test_notification_errors_are_raised():
    handler = build_callback(failing_progress, CallKind.PROGRESS)

    with pytest.raises(ProgressMethodError) as exc:
        handler(ProgressNotification(progress_token=1, progress=1.0))

    assert isinstance(exc.value.__cause__, RuntimeError)
    assert exc.value.to_dict()["cause"] == "listener down"


def sample(request: CreateMessageRequest) -> CreateMessageResult:
    text = request.messages[-1].content.text
    return CreateMessageResult(role=Role.ASSISTANT, content=TextContent(text.upper()), model="echo")


def test_sampling_handler_takes_request_only():
    handler = build_callback(sample, CallKind.SAMPLING)
    request = CreateMessageRequest(messages=[SamplingMessage(role=Role.USER, content=TextContent("hi"))])

    assert isinstance(handler, SyncRequestCallback)
    assert handler(request) == CreateMessageResult(role=Role.ASSISTANT, content=TextContent("HI"), model="echo")


def sample_wrong(request):
    return "not a result"


def sample_failing(request: CreateMessageRequest) -> CreateMessageResult:
    raise ValueError("model offline")


def test_sampling_errors_are_raised():
    request = CreateMessageRequest(messages=[])

    with pytest.raises(SamplingMethodError, match="expected CreateMessageResult"):
        build_callback(sample_wrong, CallKind.SAMPLING)(request)
    with pytest.raises(SamplingMethodError) as exc:
        build_callback(sample_failing, CallKind.SAMPLING)(request)
    assert isinstance(exc.value.__cause__, ValueError)


def sample_extra(request: CreateMessageRequest, temperature: float) -> CreateMessageResult:
    raise AssertionError


def sample_without_request() -> CreateMessageResult:
    raise AssertionError


def test_sampling_signature_is_validated():
    with pytest.raises(BindingError, match="do not accept named argument parameters"):
        build_callback(sample_extra, CallKind.SAMPLING)
    with pytest.raises(BindingError, match="must have a CreateMessageRequest parameter"):
        build_callback(sample_without_request, CallKind.SAMPLING)


def elicit(request: ElicitRequest) -> ElicitResult:
    return ElicitResult(action=ElicitAction.ACCEPT, content={"answer": request.message})


def elicit_failing(request: ElicitRequest) -> ElicitResult:
    raise KeyError("name")


def test_elicitation_handler():
    result = build_callback(elicit, CallKind.ELICITATION)(ElicitRequest(message="yes"))
    assert result == ElicitResult(action=ElicitAction.ACCEPT, content={"answer": "yes"})

    with pytest.raises(ElicitationMethodError):
        build_callback(elicit_failing, CallKind.ELICITATION)(ElicitRequest(message="?"))
