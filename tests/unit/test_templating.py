"""Placeholder substitution tests."""

from deskflow.templating import find_placeholders, resolve_parameters, resolve_string


def test_string_without_placeholders_is_unchanged():
    text = "plain text with {single} braces"
    assert resolve_string(text, {"single": "x"}) == text
    assert resolve_string(resolve_string(text, {}), {}) == text


def test_missing_placeholder_left_verbatim():
    assert resolve_string("hello {{missing}}", {"other": 1}) == "hello {{missing}}"


def test_values_are_stringified():
    context = {"count": 3, "flag": True, "ratio": 0.5}
    assert resolve_string("{{count}}/{{flag}}/{{ratio}}", context) == "3/True/0.5"


def test_multiple_placeholders_in_one_string():
    assert resolve_string("{{a}}-{{b}}-{{a}}", {"a": "x", "b": "y"}) == "x-y-x"


def test_nested_structures_resolved_element_wise():
    params = {
        "path": "{{dir}}/out.txt",
        "items": ["{{a}}", 1, {"deep": "{{b}}"}],
        "pair": ("{{a}}", None),
        "keep": False,
    }
    resolved = resolve_parameters(params, {"dir": "/tmp", "a": "A", "b": "B"})
    assert resolved == {
        "path": "/tmp/out.txt",
        "items": ["A", 1, {"deep": "B"}],
        "pair": ("A", None),
        "keep": False,
    }


def test_resolution_does_not_mutate_input():
    params = {"text": "{{name}}"}
    resolve_parameters(params, {"name": "deskflow"})
    assert params == {"text": "{{name}}"}


def test_non_container_values_pass_through():
    assert resolve_parameters(42, {"x": 1}) == 42
    assert resolve_parameters(None, {"x": 1}) is None


def test_find_placeholders():
    assert find_placeholders({"a": "{{x}} {{y}}", "b": ["{{z}}"]}) == ["x", "y", "z"]
