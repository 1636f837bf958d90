import asyncio
from pathlib import Path

import pytest

from designlint.diagnostics import LintResult
from designlint.engine import Linter
from designlint.errors import ConfigError, PluginLoadError, RuleRegistrationError
from designlint.parsers import SyntaxEvent
from designlint.pipeline import fix_text, lint_text
from designlint.rules import (
    BUILTIN_SOURCE,
    RuleMeta,
    RuleModule,
    RuleRegistry,
    builtin_rules,
    load_plugin,
    normalize_rule_setting,
    validate_listener,
)
from designlint.rules.builtin import SpacingOptions
from tests._shared_cases import BRAND_TOKENS

PLUGIN_SOURCE = """
from designlint.rules import RuleMeta, RuleModule


def create(context):
    def on_declaration(decl):
        context.report(f"saw {decl.prop}", decl.line, decl.column)

    return {"css_declaration": on_declaration}


rules = [RuleModule(name="acme/saw", meta=RuleMeta(description="records declarations"), create=create)]
"""


SCALE_TOKENS = {
    "radius": {"$type": "dimension", "sm": {"$value": "4px"}, "pill": {"$value": "999px"}},
    "shadow": {
        "$type": "shadow",
        "card": {"$value": {"color": "#000000", "offsetX": "0px", "offsetY": "1px", "blur": "2px"}},
        "focus": {
            "$value": [{"color": "#0055ff", "offsetX": 0, "offsetY": 0, "blur": 0, "spread": "2px", "inset": True}]
        },
    },
    "fontSizes": {"$type": "dimension", "body": {"$value": "16px"}, "lead": {"$value": "1.25rem"}},
    "lineHeights": {"$type": "number", "tight": {"$value": 1.2}},
    "text": {
        "$type": "typography",
        "body": {
            "$value": {
                "fontFamily": "Inter",
                "fontSize": "14px",
                "fontWeight": 400,
                "letterSpacing": "0px",
                "lineHeight": 1.5,
            }
        },
    },
}


def _rule(name: str, description: str = "test rule") -> RuleModule:
    return RuleModule(name=name, meta=RuleMeta(description=description), create=lambda context: {})


def _lint(source: str, rules: dict[str, object], document_type: str = "css") -> LintResult:
    return lint_text(source, {"tokens": BRAND_TOKENS, "rules": rules}, document_type=document_type)


def _summary(result: LintResult) -> list[tuple[str, int, int]]:
    return [(message.message, message.line, message.column) for message in result.messages]


def _lint_scale(source: str, rules: dict[str, object]) -> LintResult:
    return lint_text(source, {"tokens": SCALE_TOKENS, "rules": rules})


def test_builtin_rules_register_in_order() -> None:
    registry = RuleRegistry(builtin_rules())

    assert registry.names == (
        "design-token/colors",
        "design-token/spacing",
        "design-token/font-weight",
        "design-token/font-family",
        "design-token/duration",
        "design-token/border-radius",
        "design-token/box-shadow",
        "design-token/font-size",
        "design-token/line-height",
        "design-system/deprecation",
        "design-system/no-inline-styles",
        "design-system/no-unused-tokens",
    )
    assert registry.source_of("design-token/colors") == BUILTIN_SOURCE


def test_duplicate_builtin_rule_name_fails() -> None:
    with pytest.raises(RuleRegistrationError, match='Duplicate rule name "a"'):
        RuleRegistry([_rule("a"), _rule("a")])


def test_plugin_rule_conflicting_with_builtin_fails() -> None:
    registry = RuleRegistry(builtin_rules())

    with pytest.raises(RuleRegistrationError, match='conflicts with rule from "built-in"'):
        registry.register(_rule("design-token/colors"), source="/plugins/acme.py")


def test_strict_registration_requires_description() -> None:
    registry = RuleRegistry()

    with pytest.raises(RuleRegistrationError, match="missing meta.description"):
        registry.register(_rule("acme/x", description=" "), source="/plugins/acme.py", strict=True)


def test_resolve_rejects_unknown_rules() -> None:
    registry = RuleRegistry(builtin_rules())

    with pytest.raises(ConfigError, match=r"Unknown rule\(s\): acme/missing"):
        registry.resolve({"acme/missing": "error"})


def test_resolve_normalizes_severity_and_options() -> None:
    registry = RuleRegistry(builtin_rules())

    enabled = registry.resolve(
        {
            "design-system/no-inline-styles": 1,
            "design-token/spacing": ["error", {"base": 8}],
            "design-token/colors": "off",
        }
    )

    assert [(rule.name, rule.severity) for rule in enabled] == [
        ("design-token/spacing", "error"),
        ("design-system/no-inline-styles", "warn"),
    ]
    assert enabled[0].options == SpacingOptions(base=8)


@pytest.mark.parametrize(
    ("settings", "message"),
    [
        ({"design-token/spacing": ["error", {"base": 0}]}, "Invalid options for rule design-token/spacing"),
        ({"design-token/spacing": ["error", {"step": 2}]}, "Invalid options for rule design-token/spacing"),
        ({"design-token/duration": ["error", {"x": 1}]}, "rule takes no options"),
        ({"design-token/colors": "loud"}, "Invalid severity for rule design-token/colors"),
    ],
)
def test_resolve_rejects_bad_settings(settings: dict[str, object], message: str) -> None:
    registry = RuleRegistry(builtin_rules())

    with pytest.raises(ConfigError, match=message):
        registry.resolve(settings)


def test_normalize_rule_setting_off_is_disabled() -> None:
    assert normalize_rule_setting("r", 0) == (None, None)
    assert normalize_rule_setting("r", ["warn"]) == ("warn", None)


def test_validate_listener_rejects_unknown_events() -> None:
    assert validate_listener("r", {"css_declaration": print}) == {SyntaxEvent.CSS_DECLARATION: print}

    with pytest.raises(RuleRegistrationError, match='unknown event "onWhatever"'):
        validate_listener("r", {"onWhatever": print})
    with pytest.raises(RuleRegistrationError, match="non-callable handler"):
        validate_listener("r", {"css_declaration": 3})


def test_load_plugin_from_absolute_path(tmp_path: Path) -> None:
    plugin_path = tmp_path / "acme.py"
    plugin_path.write_text(PLUGIN_SOURCE, encoding="utf-8")

    loaded = load_plugin(plugin_path)

    assert loaded.source == str(plugin_path)
    assert [rule.name for rule in loaded.rules] == ["acme/saw"]


def test_load_plugin_errors(tmp_path: Path) -> None:
    broken = tmp_path / "broken.py"
    broken.write_text("raise RuntimeError('nope')\n", encoding="utf-8")
    empty = tmp_path / "empty.py"
    empty.write_text("x = 1\n", encoding="utf-8")

    with pytest.raises(PluginLoadError, match="must be absolute"):
        load_plugin("relative/plugin.py")
    with pytest.raises(PluginLoadError, match="file not found"):
        load_plugin(tmp_path / "missing.py")
    with pytest.raises(PluginLoadError, match="RuntimeError: nope"):
        load_plugin(broken)
    with pytest.raises(PluginLoadError, match="neither `plugin` nor `rules`"):
        load_plugin(empty)


def test_plugin_rules_receive_declarations(tmp_path: Path) -> None:
    plugin_path = tmp_path / "acme.py"
    plugin_path.write_text(PLUGIN_SOURCE, encoding="utf-8")

    result = lint_text("a { margin: 4px; }", {"plugins": [str(plugin_path)], "rules": {"acme/saw": "warn"}})

    assert [(message.rule_id, message.message, message.severity) for message in result.messages] == [
        ("acme/saw", "saw margin", "warn")
    ]


def test_plugin_duplicating_builtin_fails_before_linting(tmp_path: Path) -> None:
    plugin_path = tmp_path / "dupe.py"
    plugin_path.write_text(PLUGIN_SOURCE.replace("acme/saw", "design-token/colors"), encoding="utf-8")

    with pytest.raises(RuleRegistrationError, match="conflicts with rule"):
        Linter({"plugins": [str(plugin_path)]})


def test_colors_rule_reports_raw_colors_and_honors_allow() -> None:
    source = "a { color: red; border-color: #0055FF; background: rgb(0 0 0); }"

    assert _summary(_lint(source, {"design-token/colors": "error"})) == [
        ("Unexpected color red", 1, 5),
        ("Unexpected color rgb(0 0 0)", 1, 40),
    ]
    assert _summary(_lint(source, {"design-token/colors": ["error", {"allow": ["named", "rgb"]}]})) == []


def test_colors_rule_skips_non_style_attributes() -> None:
    source = 'const a = <Icon name="red" label={"blue"} />;\nconst b = "teal";\n'

    result = _lint(source, {"design-token/colors": "error"}, document_type="tsx")

    assert _summary(result) == [("Unexpected color teal", 2, 11)]


def test_spacing_rule_uses_scale_and_dimension_tokens() -> None:
    source = "a { margin: 8px 4px; padding: 6px; width: 3px; gap: 0; }"

    assert _summary(_lint(source, {"design-token/spacing": "error"})) == [("Unexpected spacing 6px", 1, 22)]
    assert _summary(_lint(source, {"design-token/spacing": ["error", {"base": 2}]})) == []


def test_font_weight_rule() -> None:
    source = "a { font-weight: 400; }\nb { font-weight: bold; }\nc { font-weight: 700; }\n"

    assert _summary(_lint(source, {"design-token/font-weight": "error"})) == [("Unexpected font weight 700", 3, 5)]


def test_font_family_rule() -> None:
    source = "a { font-family: 'Inter', sans-serif; }\nb { font-family: Georgia, serif; }\n"

    assert _summary(_lint(source, {"design-token/font-family": "error"})) == [
        ("Unexpected font family georgia", 2, 5)
    ]


def test_duration_rule_ignores_function_arguments() -> None:
    source = (
        "a { transition: opacity 150ms cubic-bezier(0.1, 0.2, 0.3, 0.4); }\n"
        "b { animation-duration: 200ms; }\n"
        "c { transition-delay: 999ms; }\n"
    )

    assert _summary(_lint(source, {"design-token/duration": "error"})) == [("Unexpected duration 200ms", 2, 5)]


def test_border_radius_rule_checks_configured_units() -> None:
    source = (
        "a { border-radius: 4px; }\n"
        "b { border-top-left-radius: 6px; }\n"
        "c { border-radius: 50%; }\n"
        "d { border-radius: var(--radius-sm); }\n"
    )

    assert _summary(_lint_scale(source, {"design-token/border-radius": "error"})) == [
        ("Unexpected border radius 6px", 2, 5)
    ]
    assert _summary(_lint_scale(source, {"design-token/border-radius": ["error", {"units": ["px", "%"]}]})) == [
        ("Unexpected border radius 6px", 2, 5),
        ("Unexpected border radius 50%", 3, 5),
    ]


def test_box_shadow_rule_matches_each_layer() -> None:
    source = (
        "a { box-shadow: 0 1px 2px #000000; }\n"
        "b { box-shadow: inset 0 0 0 2px #0055FF, var(--shadow-card); }\n"
        "c { box-shadow: 0 4px 8px rgba(0, 0, 0, 0.2); }\n"
        "d { box-shadow: none; }\n"
    )

    assert _summary(_lint_scale(source, {"design-token/box-shadow": "error"})) == [
        ("Unexpected box shadow 0 4px 8px rgba(0, 0, 0, 0.2)", 3, 5)
    ]


def test_font_size_rule_compares_rem_at_root_size() -> None:
    source = (
        "a { font-size: 16px; }\n"
        "b { font-size: 1.25rem; }\n"
        "c { font-size: 0.875rem; }\n"
        "d { font-size: 15px; }\n"
        "e { font-size: larger; }\n"
    )

    assert _summary(_lint_scale(source, {"design-token/font-size": "error"})) == [
        ("Unexpected font size 15px", 4, 5)
    ]


def test_line_height_rule_accepts_ratios_and_percentages() -> None:
    source = (
        "a { line-height: 1.5; }\n"
        "b { line-height: 120%; }\n"
        "c { line-height: 24px; }\n"
        "d { line-height: normal; }\n"
    )

    assert _summary(_lint_scale(source, {"design-token/line-height": "error"})) == [
        ("Unexpected line height 24px", 3, 5)
    ]


def test_scale_rules_require_their_tokens() -> None:
    rules = {"design-token/border-radius": "warn", "design-token/box-shadow": "warn"}

    result = _lint("a { border-radius: 3px; box-shadow: none; }", rules)

    assert [message.message.split(";")[0] for message in result.messages] == [
        "design-token/border-radius requires radius tokens",
        "design-token/box-shadow requires shadow tokens",
    ]


def test_token_rule_without_tokens_reports_once() -> None:
    result = lint_text("a { font-weight: 700; }", {"rules": {"design-token/font-weight": "warn"}})

    assert _summary(result) == [
        (
            'design-token/font-weight requires fontWeight tokens; configure tokens with $type "fontWeight" '
            "to enable this rule.",
            1,
            1,
        )
    ]


def test_token_patterns_require_matching_custom_properties() -> None:
    config = {"tokens": ["--space-*"], "rules": {"design-token/spacing": "error"}}

    result = lint_text("a { margin: var(--space-2); padding: var(--spacer); top: 4px; }", config)

    assert [(message.message, message.suggest) for message in result.messages] == [
        ("Unexpected spacing var(--spacer)", "--space-*"),
        ("Unexpected spacing 4px", None),
    ]


def test_deprecation_rule_fixes_custom_properties_and_paths() -> None:
    config = {"tokens": BRAND_TOKENS, "rules": {"design-system/deprecation": "warn"}}

    css_text, css_run = fix_text("a { color: var(--color-legacy); }", config)
    ts_text, _ = fix_text('const t = "color.legacy";\n', config, document_type="ts")

    assert css_text == "a { color: var(--color-primary); }"
    assert css_run.messages == []
    assert ts_text == 'const t = "color.primary";\n'


def test_deprecation_rule_message() -> None:
    result = _lint("a { color: var(--color-legacy); }", {"design-system/deprecation": "warn"})

    (message,) = result.messages
    assert message.message == "Token --color-legacy is deprecated, use --color-primary"
    assert message.fix is not None and message.fix.text == "--color-primary"


def test_no_inline_styles_on_components_only() -> None:
    source = '<Button style={{ color: "red" }} className="x" />;\n<div style={{ color: "red" }} className="y" />;\n'

    warned = _lint(source, {"design-system/no-inline-styles": "error"}, document_type="tsx")
    ignored = _lint(
        source,
        {"design-system/no-inline-styles": ["error", {"ignoreClassName": True}]},
        document_type="tsx",
    )

    assert _summary(warned) == [
        ("Unexpected style attribute on Button", 1, 9),
        ("Unexpected className attribute on Button", 1, 34),
    ]
    assert _summary(ignored) == [("Unexpected style attribute on Button", 1, 9)]


def test_failing_create_is_isolated() -> None:
    def create(context: object) -> dict[str, object]:
        raise ValueError("bad setup")

    linter = Linter({"rules": {"design-token/colors": "error"}})
    linter.registry.register(RuleModule("acme/broken", RuleMeta("broken"), create), source="/acme.py")
    linter.config.rules["acme/broken"] = "error"

    result = asyncio.run(linter.lint_text("a { color: red; }", "a.css", "css"))

    assert [(message.rule_id, message.message) for message in result.messages] == [
        ("rule-runtime-error", 'Rule "acme/broken" failed in create: bad setup'),
        ("design-token/colors", "Unexpected color red"),
    ]
