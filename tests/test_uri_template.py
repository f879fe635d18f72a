import pytest

from mcpanything import BindingError, CallKind, TemplateExtractionError, UriTemplate, build_callback


def test_variables_are_listed_in_order():
    template = UriTemplate("users/{userId}/posts/{postId}")

    assert template.is_template is True
    assert template.variables == ("userId", "postId")
    assert template.extract("users/ann/posts/12") == {"userId": "ann", "postId": "12"}


def test_simple_variables_do_not_cross_segments():
    template = UriTemplate("docs://{name}")

    assert template.matches("docs://readme")
    assert not template.matches("docs://guide/intro")


def test_reserved_variables_cross_segments():
    template = UriTemplate("files://{+path}")

    assert template.extract("files://a/b/c.txt") == {"path": "a/b/c.txt"}


def test_literal_uri_is_not_a_template():
    template = UriTemplate("config://app.settings")

    assert template.is_template is False
    assert template.extract("config://app.settings") == {}
    assert not template.matches("config://appXsettings")


def test_mismatch_reports_expected_variables():
    template = UriTemplate("users/{userId}/posts/{postId}")

    with pytest.raises(TemplateExtractionError) as exc:
        template.extract("invalid/uri/format")

    assert str(exc.value) == (
        "Failed to extract all URI variables from request URI: invalid/uri/format. "
        "Expected variables: ['userId', 'postId'], but found: []"
    )


def test_duplicate_variables_are_rejected():
    with pytest.raises(BindingError, match="Duplicate URI variable 'id'"):
        UriTemplate("items/{id}/copies/{id}")


def read_item(id: str) -> str:
    return id


def test_duplicate_variables_fail_handler_construction():
    with pytest.raises(BindingError, match="Duplicate URI variable 'id' in template: items/{id}/{id}"):
        build_callback(read_item, CallKind.RESOURCE, uri="items/{id}/{id}")
