"""Tests for prompt template rendering."""

from inference_port.template import PLACEHOLDER_RE, find_placeholders, render_template


def test_substitutes_all_placeholders():
    template = "Hello {{user}}, please help with {{task}}. Priority: {{urgency}}"
    params = {"user": "Alice", "task": "code review", "urgency": "high"}

    assert (
        render_template(template, params)
        == "Hello Alice, please help with code review. Priority: high"
    )


def test_unresolved_placeholder_is_left_verbatim():
    assert render_template("Hello {{name}}", {}) == "Hello {{name}}"


def test_partial_substitution():
    rendered = render_template("{{greeting}} {{name}}!", {"greeting": "Hi"})
    assert rendered == "Hi {{name}}!"


def test_full_substitution_is_stable_and_complete():
    template = "{{a}} and {{b}} and {{a}} again"
    params = {"a": "x", "b": "y"}

    first = render_template(template, params)
    second = render_template(template, params)

    assert first == second == "x and y and x again"
    assert PLACEHOLDER_RE.search(first) is None


def test_edge_cases():
    assert render_template("", {"a": "b"}) == ""
    assert render_template("No parameters here", {}) == "No parameters here"
    assert render_template("Only {{used}} parameter", {"used": "yes", "unused": "no"}) == (
        "Only yes parameter"
    )


def test_names_are_case_sensitive():
    assert render_template("{{Name}}", {"name": "Ada"}) == "{{Name}}"


def test_malformed_syntax_passes_through():
    params = {"name": "Ada", "a": "1", "b": "2"}

    assert render_template("Hello {{name", params) == "Hello {{name"
    assert render_template("Hello name}}", params) == "Hello name}}"
    assert render_template("{{ name }}", params) == "{{ name }}"
    assert render_template("{{a b}}", params) == "{{a b}}"
    assert render_template("{{}}", params) == "{{}}"


def test_extra_braces_around_placeholder():
    assert render_template("{{{name}}}", {"name": "Ada"}) == "{Ada}"


def test_substitution_is_single_pass():
    params = {"a": "{{b}}", "b": "nested"}
    assert render_template("{{a}}", params) == "{{b}}"


def test_values_are_inserted_literally():
    value = r"$1 \g<0> \n"
    assert render_template("[{{v}}]", {"v": value}) == f"[{value}]"


def test_find_placeholders_keeps_first_occurrence_order():
    assert find_placeholders("{{b}} {{a}} {{b}} {{ c }}") == ["b", "a"]
    assert find_placeholders("nothing here") == []
