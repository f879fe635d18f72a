import base64
from typing import List

import pytest

from mcpanything import CallKind, McpError, ResolutionError, TemplateExtractionError, build_callback
from mcpanything.protocol import (
    BlobResourceContents,
    ErrorCodes,
    ReadResourceRequest,
    ReadResourceResult,
    SyncServerExchange,
    TextResourceContents,
)


def _read(method, uri_template, uri, **options):
    handler = build_callback(method, CallKind.RESOURCE, uri=uri_template, **options)
    return handler(SyncServerExchange(), ReadResourceRequest(uri=uri))


def user_post(userId: str, postId: str) -> str:
    return f"post {postId} by {userId}"


def test_template_mismatch_raises_extraction_error():
    handler = build_callback(user_post, CallKind.RESOURCE, uri="users/{userId}/posts/{postId}")

    with pytest.raises(TemplateExtractionError) as exc:
        handler(SyncServerExchange(), ReadResourceRequest(uri="invalid/uri/format"))

    assert isinstance(exc.value, ResolutionError)
    assert str(exc.value).startswith("Failed to extract all URI variables from request URI: invalid/uri/format")
    assert exc.value.expected == ("userId", "postId")


def test_template_variables_bind_to_parameters():
    result = _read(user_post, "users/{userId}/posts/{postId}", "users/42/posts/7")

    assert result == ReadResourceResult(
        contents=[TextResourceContents(uri="users/42/posts/7", mime_type="text/plain", text="post 7 by 42")]
    )


def read_file(path: str) -> str:
    return f"contents of {path}"


def test_reserved_expansion_spans_path_segments():
    result = _read(read_file, "files://{+path}", "files://docs/guide/intro.md")

    assert result.contents[0].text == "contents of docs/guide/intro.md"


def settings(uri: str) -> str:
    return '{"debug": true}'


def test_non_text_mime_type_base64_encodes_string_into_blob():
    result = _read(settings, "config://settings", "config://settings", mime_type="application/json")

    (contents,) = result.contents
    assert isinstance(contents, BlobResourceContents)
    assert contents.mime_type == "application/json"
    assert base64.b64decode(contents.blob).decode("utf-8") == '{"debug": true}'


def logo() -> bytes:
    return b"\x89PNG"


def test_bytes_become_base64_blob():
    (contents,) = _read(logo, "images://logo", "images://logo", mime_type="image/png").contents

    assert contents == BlobResourceContents(
        uri="images://logo", mime_type="image/png", blob=base64.b64encode(b"\x89PNG").decode("ascii")
    )


def chapters() -> List[str]:
    return ["one", "two"]


def missing():
    return None


def test_lists_and_none():
    result = _read(chapters, "book://chapters", "book://chapters")
    assert [item.text for item in result.contents] == ["one", "two"]

    assert _read(missing, "book://missing", "book://missing") == ReadResourceResult(contents=[])


def locked(name: str) -> str:
    raise PermissionError("access denied")


def test_user_error_becomes_invalid_params():
    with pytest.raises(McpError) as exc:
        _read(locked, "vault://{name}", "vault://secret")

    assert exc.value.code == ErrorCodes.INVALID_PARAMS
    assert exc.value.message.startswith("Error invoking resource method: locked in ")
    assert exc.value.message.endswith("Cause: access denied")
