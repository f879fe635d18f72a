import logging
from typing import List

import pytest

from mcpanything import (
    BindingError,
    CallKind,
    CompleteProvider,
    ExecutionMode,
    McpError,
    TransportMode,
    build_callback,
    mcp_complete,
)
from mcpanything.binding import AsyncMethodCallback, SyncMethodCallback
from mcpanything.exceptions import CompleteMethodError
from mcpanything.protocol import (
    CompleteArgument,
    CompleteCompletion,
    CompleteRequest,
    CompleteResult,
    ErrorCodes,
    PromptReference,
    ResourceReference,
    SyncServerExchange,
    TransportContext,
)

CITIES = ["Taichung", "Tainan", "Taipei", "Kaohsiung"]


def _request(value, name="city", ref=None):
    return CompleteRequest(ref=ref or PromptReference("travel"), argument=CompleteArgument(name, value))


def _complete(method, request, **options):
    return build_callback(method, CallKind.COMPLETE, **options)(SyncServerExchange(), request)


def complete_city(request: CompleteRequest) -> CompleteResult:
    values = [city for city in CITIES if city.startswith(request.argument.value)]
    return CompleteResult(completion=CompleteCompletion(values=values, total=len(values), has_more=False))


def test_request_parameter_and_native_result():
    handler = build_callback(complete_city, CallKind.COMPLETE)

    assert isinstance(handler, SyncMethodCallback)
    result = handler(SyncServerExchange(), _request("Tai"))
    assert result.completion.values == ["Taichung", "Tainan", "Taipei"]


def complete_by_value(value: str) -> List[str]:
    return [city for city in CITIES if city.startswith(value)]


def complete_one(name: str, value: str) -> str:
    return f"{name}={value}"


def complete_completion(argument: CompleteArgument) -> CompleteCompletion:
    return CompleteCompletion(values=[argument.value], total=10, has_more=True)


def complete_nothing(value: str):
    return None


def test_return_shapes_become_complete_result():
    assert _complete(complete_by_value, _request("Tain")) == CompleteResult(
        completion=CompleteCompletion(values=["Tainan"], total=1, has_more=False)
    )
    assert _complete(complete_one, _request("x")).completion.values == ["city=x"]
    assert _complete(complete_completion, _request("Ka")).completion == CompleteCompletion(
        values=["Ka"], total=10, has_more=True
    )
    assert _complete(complete_nothing, _request("Ka")).completion == CompleteCompletion(
        values=[], total=0, has_more=False
    )


def complete_with_context(context: TransportContext, ref: ResourceReference, value: str) -> List[str]:
    return [f"{context.get('region')}:{ref.uri}:{value}"]


def test_stateless_context_and_reference_fields():
    handler = build_callback(complete_with_context, CallKind.COMPLETE, transport=TransportMode.STATELESS)
    request = _request("v", name="variable", ref=ResourceReference("files://{variable}"))

    result = handler(TransportContext({"region": "tw"}), request)

    assert result.completion.values == ["tw:files://{variable}:v"]


def complete_failing(value: str) -> List[str]:
    raise LookupError("index offline")


def complete_wrong(value: str):
    return 42


def test_errors_become_invalid_params():
    with pytest.raises(McpError) as exc:
        _complete(complete_failing, _request("T"))
    assert exc.value.code == ErrorCodes.INVALID_PARAMS
    assert exc.value.message.startswith("Error invoking complete method: complete_failing in ")
    assert exc.value.message.endswith("Cause: index offline")

    with pytest.raises(McpError, match="expected CompleteResult") as exc:
        _complete(complete_wrong, _request("T"))
    assert isinstance(exc.value.__cause__, CompleteMethodError)


def complete_int(value: str) -> int:
    return 1


def complete_unknown(prefix: str) -> List[str]:
    return []


def test_signature_is_validated():
    with pytest.raises(BindingError, match="Complete methods cannot return int"):
        build_callback(complete_int, CallKind.COMPLETE)
    with pytest.raises(BindingError, match="does not match any CompleteRequest field"):
        build_callback(complete_unknown, CallKind.COMPLETE)


async def complete_async(value: str) -> List[str]:
    return [value.upper()]


@pytest.mark.asyncio
async def test_async_completion():
    handler = build_callback(complete_async, CallKind.COMPLETE, execution=ExecutionMode.ASYNC)

    assert isinstance(handler, AsyncMethodCallback)
    result = await handler(None, _request("tp"))
    assert result.completion.values == ["TP"]


class Completions:
    @mcp_complete(prompt="travel")
    def cities(self, value: str) -> List[str]:
        return complete_by_value(value)

    @mcp_complete(uri="files://{path}")
    def paths(self, value: str) -> List[str]:
        return [f"{value}/README.md"]

    @mcp_complete(prompt="travel")
    def cities_again(self, value: str) -> List[str]:
        return []


def test_complete_provider(caplog):
    with caplog.at_level(logging.WARNING, logger="mcpanything"):
        specs = CompleteProvider(Completions()).specifications()

    assert [spec.reference for spec in specs] == [PromptReference("travel"), ResourceReference("files://{path}")]
    assert "Duplicate complete 'ref/prompt:travel'" in caplog.text

    result = specs[1].handler(None, _request("docs", name="path", ref=ResourceReference("files://{path}")))
    assert result.completion.values == ["docs/README.md"]


@pytest.mark.parametrize("options", [{}, {"prompt": "p", "uri": "files://{x}"}])
def test_complete_decorator_needs_exactly_one_reference(options):
    with pytest.raises(ValueError, match="Either prompt or uri must be provided"):
        mcp_complete(**options)
