import pytest

from designlint.diagnostics import LintMessage
from designlint.errors import DocumentSyntaxError
from designlint.parsers import (
    CSSDeclaration,
    JSXAttribute,
    NumericLiteral,
    RegisteredListener,
    ScanEvent,
    StringLiteral,
    SyntaxEvent,
    filter_disabled,
    find_expression_end,
    parse_disable_directives,
    run_parser,
    scan_script,
    scan_stylesheet,
    scan_template,
)


def _nodes(events: tuple[ScanEvent, ...], kind: type) -> list:
    return [scanned.node for scanned in events if isinstance(scanned.node, kind)]


def _message(rule_id: str, line: int) -> LintMessage:
    return LintMessage(rule_id=rule_id, message="x", severity="error", line=line, column=1)


def test_stylesheet_declarations_carry_positions_and_value_offsets() -> None:
    source = "a {\n  color: red !important;\n  margin: 0 4px;\n}\n"

    color, margin = scan_stylesheet(source)

    assert (color.prop, color.value, color.line, color.column) == ("color", "red", 2, 3)
    assert color.important is True
    assert source[color.value_start : color.value_end] == "red"
    assert (margin.prop, margin.value, margin.line) == ("margin", "0 4px", 3)


def test_stylesheet_skips_comments_strings_and_at_rules() -> None:
    source = '@import "x.css";\n/* color: red; */\na { content: "a;b}"; }\n'

    (declaration,) = scan_stylesheet(source)

    assert declaration.prop == "content"
    assert declaration.value == '"a;b}"'


def test_stylesheet_nested_blocks() -> None:
    declarations = scan_stylesheet("@media (min-width: 1px) { a { color: blue } }")

    assert [(decl.prop, decl.value) for decl in declarations] == [("color", "blue")]


def test_scss_line_comments_are_ignored_but_urls_are_not() -> None:
    source = "a {\n  // color: red;\n  background: url(http://x/y.png);\n}\n"

    (declaration,) = scan_stylesheet(source, syntax="scss")

    assert declaration.value == "url(http://x/y.png)"


@pytest.mark.parametrize(
    ("source", "message", "line", "column"),
    [
        ("a { color: red;", "Unclosed block", 1, 3),
        ("a { color: red; }}", "Unexpected }", 1, 18),
        ("/* open", "Unclosed comment", 1, 1),
        ('a { content: "x }', "Unclosed string", 1, 14),
        ("a { color red; }", "Unknown word", 1, 5),
    ],
)
def test_stylesheet_syntax_errors(source: str, message: str, line: int, column: int) -> None:
    with pytest.raises(DocumentSyntaxError) as excinfo:
        scan_stylesheet(source)

    assert excinfo.value.message == message
    assert (excinfo.value.line, excinfo.value.column) == (line, column)


def test_script_emits_strings_numbers_and_skips_regex() -> None:
    source = "const re = /'x'/g;\nconst n = 1_000 + 0x10;\nconst s = 'a\\'b';\n"

    result = scan_script(source)

    assert [node.value for node in _nodes(result.events, StringLiteral)] == ["a'b"]
    assert [node.value for node in _nodes(result.events, NumericLiteral)] == [1000.0, 16.0]


def test_script_division_is_not_a_regex() -> None:
    result = scan_script("const half = total / 2 / 'x'.length;")

    assert [node.value for node in _nodes(result.events, StringLiteral)] == ["x"]


def test_script_unterminated_string_raises() -> None:
    with pytest.raises(DocumentSyntaxError, match="Unterminated string literal"):
        scan_script("const a = 'oops\n")


def test_template_without_expressions_is_a_string() -> None:
    result = scan_script("const a = `#fff`; const b = `${x} #000`;")

    assert [node.value for node in _nodes(result.events, StringLiteral)] == ["#fff"]


def test_styled_template_is_scanned_as_css() -> None:
    source = "const Box = styled.div`\n  padding: ${gap}px;\n  color: navy;\n`;\n"

    result = scan_script(source)
    declarations = _nodes(result.events, CSSDeclaration)

    assert [(decl.prop, decl.line, decl.column) for decl in declarations] == [("padding", 2, 3), ("color", 3, 3)]
    assert declarations[1].value == "navy"


def test_jsx_attributes_and_style_object() -> None:
    source = 'const el = <Button variant="primary" style={{ marginTop: 3, color: theme.red }} />;\n'

    result = scan_script(source, jsx=True)
    attributes = _nodes(result.events, JSXAttribute)
    declarations = _nodes(result.events, CSSDeclaration)
    strings = _nodes(result.events, StringLiteral)

    assert [(attr.name, attr.is_component) for attr in attributes] == [("variant", True), ("style", True)]
    assert [(decl.prop, decl.value) for decl in declarations] == [("margin-top", "3")]
    assert [(node.value, node.attribute) for node in strings] == [("primary", "variant")]
    assert result.events[0].event is SyntaxEvent.JSX_ATTRIBUTE


def test_jsx_lowercase_element_is_not_a_component() -> None:
    result = scan_script('<div style="color: red">hi {"there"}</div>', jsx=True)

    (attribute,) = _nodes(result.events, JSXAttribute)
    (declaration,) = _nodes(result.events, CSSDeclaration)

    assert attribute.is_component is False
    assert (declaration.prop, declaration.value, declaration.column) == ("color", "red", 13)
    assert [node.value for node in _nodes(result.events, StringLiteral)] == ["there"]


def test_ts_generics_are_not_jsx() -> None:
    result = scan_script("const a = f<Foo>('x');", jsx=False)

    assert _nodes(result.events, JSXAttribute) == []
    assert [node.value for node in _nodes(result.events, StringLiteral)] == ["x"]


def test_embedded_css_error_is_recovered() -> None:
    result = scan_script("const a = css`color: red; }`; const b = 'ok';")

    assert [error.message for error in result.errors] == ["Unexpected }"]
    assert [node.value for node in _nodes(result.events, StringLiteral)] == ["ok"]


def test_vue_component_regions_and_bindings() -> None:
    source = (
        "<template>\n"
        '  <Card :style="{ color: \'#123\' }" title="Hi">{{ label }}</Card>\n'
        "</template>\n"
        '<script lang="ts">\n'
        "const label = 'x';\n"
        "</script>\n"
        '<style lang="scss">\n'
        ".card { margin: 2px; }\n"
        "</style>\n"
    )

    result = scan_template(source, "vue")
    declarations = _nodes(result.events, CSSDeclaration)
    strings = _nodes(result.events, StringLiteral)

    assert result.errors == ()
    assert [(decl.prop, decl.value, decl.line) for decl in declarations] == [("color", "#123", 2), ("margin", "2px", 8)]
    assert [(node.value, node.attribute, node.line) for node in strings] == [("Hi", "title", 2), ("x", None, 5)]
    assert [attr.name for attr in _nodes(result.events, JSXAttribute)] == [":style", "title"]


def test_vue_sass_style_block_is_reported() -> None:
    result = scan_template('<style lang="sass">\na\n  color: red\n</style>\n', "vue")

    assert [error.line for error in result.errors] == [1]
    assert "not supported" in result.errors[0].message


def test_svelte_directives_and_blocks() -> None:
    source = (
        '<div style:color="red" style="margin: {m}px">\n'
        "  {#if ok}{'yes'}{/if}\n"
        "</div>\n"
    )

    result = scan_template(source, "svelte")
    declarations = _nodes(result.events, CSSDeclaration)

    assert [(decl.prop, decl.value) for decl in declarations] == [("color", "red"), ("margin", "0  px")]
    assert [node.value for node in _nodes(result.events, StringLiteral)] == ["yes"]


def test_find_expression_end_skips_strings() -> None:
    text = "{ a: '}' }tail"

    assert find_expression_end(text, 0) == len("{ a: '}' }")
    assert find_expression_end("{ open", 0) == -1


def test_disable_directives() -> None:
    text = (
        "/* design-lint-disable-next-line design-token/colors */\n"
        "a { color: red; }\n"
        "b { color: red; } /* design-lint-disable-line */\n"
        "/* design-lint-disable */\n"
        "c { color: red; }\n"
        "/* design-lint-enable */\n"
        "d { color: red; }\n"
    )
    messages = [_message("design-token/colors", line) for line in (2, 3, 5, 7)]
    messages.append(_message("design-token/spacing", 2))
    messages.append(_message("parse-error", 5))

    kept = filter_disabled(messages, text)

    assert [(message.rule_id, message.line) for message in kept] == [
        ("design-token/colors", 7),
        ("design-token/spacing", 2),
        ("parse-error", 5),
    ]


def test_disable_directive_inside_string_is_ignored() -> None:
    assert parse_disable_directives("const a = '/* design-lint-disable */';\n") == ()


def test_listener_failure_is_isolated_per_rule_and_event() -> None:
    seen: list[str] = []

    def explode(node: CSSDeclaration) -> None:
        raise RuntimeError("boom")

    listeners = [
        RegisteredListener("broken", {SyntaxEvent.CSS_DECLARATION: explode}),
        RegisteredListener("healthy", {SyntaxEvent.CSS_DECLARATION: lambda node: seen.append(node.prop)}),
    ]
    messages: list[LintMessage] = []

    run_parser("css", "a { color: red; margin: 0; }", "a.css", listeners, messages)

    assert seen == ["color", "margin"]
    (message,) = messages
    assert message.rule_id == "rule-runtime-error"
    assert message.message == 'Rule "broken" failed in css_declaration: boom'
    assert message.metadata is not None and message.metadata["sourceRule"] == "broken"


def test_parse_error_suppresses_listeners() -> None:
    calls: list[object] = []
    messages: list[LintMessage] = []
    dispatcher_listeners = [RegisteredListener("r", {SyntaxEvent.CSS_DECLARATION: calls.append})]

    result = run_parser("css", "a { color: red;", "a.css", dispatcher_listeners, messages)

    assert calls == []
    assert result.token_references == ()
    assert [(message.rule_id, message.message) for message in messages] == [("parse-error", "Unclosed block")]


def test_token_references_are_collected_from_values() -> None:
    messages: list[LintMessage] = []

    result = run_parser("css", "a { color: var(--Brand-Primary, #FFF); }", "a.css", (), messages)

    assert "--brand-primary" in result.token_references
    assert "#fff" in result.token_references
    assert messages == []
