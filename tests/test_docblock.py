"""Tests for doc comment parsing."""

from hook_map.docblock import parse_docblock

DOC = """/**
	 * Filters the arguments for the post type.
	 *
	 * Runs before the post type is registered and may
	 * change any argument.
	 *
	 * @since 1.0.0
	 *
	 * @param array  $args Arguments for register_post_type,
	 *                     keyed by name.
	 * @param string $slug Post type slug.
	 * @return array Modified arguments.
	 */"""


def test_summary_and_description() -> None:
    doc = parse_docblock(DOC)
    assert doc.summary == "Filters the arguments for the post type."
    assert doc.description == "Runs before the post type is registered and may change any argument."


def test_params_and_return() -> None:
    doc = parse_docblock(DOC)
    assert [(p.name, p.type) for p in doc.params] == [("$args", "array"), ("$slug", "string")]
    assert doc.params[0].description == "Arguments for register_post_type, keyed by name."
    assert doc.params[1].description == "Post type slug."
    assert doc.returns.type == "array"
    assert doc.returns.description == "Modified arguments."


def test_single_line_doc() -> None:
    doc = parse_docblock("/** Fires after the menu. */")
    assert doc.summary == "Fires after the menu."
    assert doc.description == ""
    assert doc.params == []
    assert doc.returns is None


def test_untyped_param() -> None:
    doc = parse_docblock("/**\n * @param $value The value.\n */")
    assert doc.params[0].name == "$value"
    assert doc.params[0].type == ""


def test_missing_docblock() -> None:
    assert parse_docblock(None) is None
    assert parse_docblock("") is None
