import asyncio
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from designlint.cache import CacheStore
from designlint.diagnostics import NO_FILES_MATCHED
from designlint.engine import (
    FileDocument,
    Linter,
    LintRun,
    TextDocument,
    TokenTracker,
    document_type_for_path,
    load_config,
    load_config_file,
    token_identities,
)
from designlint.errors import ConfigError
from designlint.pipeline import lint_text
from designlint.rules import RuleMeta, RuleModule
from designlint.tokens import flatten_design_tokens
from tests._shared_cases import BRAND_TOKENS, DOCUMENT_CASES, DocumentCase, case_id

COLOR_RULES = {"design-token/colors": "error"}

USAGE_TOKENS = {
    "color": {
        "$type": "color",
        "used": {"$value": "#111111"},
        "named": {"$value": "#222222"},
        "idle": {"$value": "#333333"},
    }
}


@dataclass(slots=True)
class RecordingDocument(TextDocument):
    """Text document that records every read."""

    reads: list[str] = field(default_factory=list)

    async def get_text(self) -> str:
        self.reads.append(self.id)
        return self.text


def _run(linter: Linter, *documents: TextDocument | FileDocument, **kwargs: Any) -> LintRun:
    return asyncio.run(linter.lint_documents(documents, **kwargs))


def test_single_raw_color_is_reported_once() -> None:
    config = {
        "tokens": {"--brand": {"$type": "color", "$value": "#ff0000"}},
        "rules": COLOR_RULES,
    }

    result = lint_text("a{color:red}", config)

    assert [(message.rule_id, message.severity, message.line, message.column) for message in result.messages] == [
        ("design-token/colors", "error", 1, 3)
    ]


@pytest.mark.parametrize("case", DOCUMENT_CASES, ids=case_id)
def test_document_types(case: DocumentCase) -> None:
    config = {"tokens": BRAND_TOKENS, "rules": COLOR_RULES}

    result = lint_text(case.source, config, document_id=f"doc.{case.document_type}", document_type=case.document_type)

    assert tuple((message.rule_id, message.line, message.column) for message in result.messages) == case.expected


def test_disable_directive_applies_to_engine_results() -> None:
    source = "/* design-lint-disable-next-line */\na { color: red; }\nb { color: red; }\n"

    result = lint_text(source, {"tokens": BRAND_TOKENS, "rules": COLOR_RULES})

    assert [message.line for message in result.messages] == [3]


def test_unused_tokens_are_reported_once_after_all_documents() -> None:
    linter = Linter({"tokens": USAGE_TOKENS, "rules": {"design-system/no-unused-tokens": "warn"}})

    run = _run(
        linter,
        TextDocument("a.css", "css", "a { color: #111111; }"),
        TextDocument("b.ts", "ts", 'const c = "color.named";\n'),
    )

    assert [result.document_id for result in run.results] == ["a.css", "b.ts", "designlint.config"]
    (message,) = run.results[-1].messages
    assert message.message == "Token #333333 is defined but never used"
    assert message.metadata is not None and message.metadata["path"] == "color.idle"


def test_unused_tokens_ignore_option_and_config_path() -> None:
    linter = Linter(
        {
            "tokens": USAGE_TOKENS,
            "rules": {"design-system/no-unused-tokens": ["warn", {"ignore": ["color.named", "#333333"]}]},
            "configPath": "tokens.config.json",
        }
    )

    run = _run(linter, TextDocument("a.css", "css", "a { color: var(--color-used); }"))

    assert [result.document_id for result in run.results] == ["a.css"]
    assert run.messages == []

    run = _run(linter, TextDocument("a.css", "css", "a { color: blue; }"))

    assert run.results[-1].document_id == "tokens.config.json"
    assert [message.metadata["path"] for message in run.messages] == ["color.used"]


def test_run_hook_fires_once_per_run() -> None:
    calls: list[int] = []

    def create_run(context):
        return {"run_complete": lambda: calls.append(len(context.unused_tokens()))}

    linter = Linter({"tokens": USAGE_TOKENS})
    linter.registry.register(
        RuleModule("acme/usage", RuleMeta("usage"), lambda context: {}, create_run=create_run),
        source="/acme.py",
    )
    linter.config.rules["acme/usage"] = "warn"

    _run(
        linter,
        TextDocument("a.css", "css", "a { color: #111111; }"),
        TextDocument("b.css", "css", "b { color: #222222; }"),
    )

    assert calls == [1]


def test_failing_run_hook_is_reported() -> None:
    def create_run(context):
        def explode() -> None:
            raise RuntimeError("boom")

        return {"run_complete": explode}

    linter = Linter()
    linter.registry.register(
        RuleModule("acme/explode", RuleMeta("explodes"), lambda context: {}, create_run=create_run),
        source="/acme.py",
    )
    linter.config.rules["acme/explode"] = "error"

    run = _run(linter, TextDocument("a.css", "css", "a {}"))

    (message,) = run.messages
    assert message.rule_id == "rule-runtime-error"
    assert message.message == 'Rule "acme/explode" failed in run_complete: boom'
    assert message.metadata is not None and message.metadata["phase"] == "run"


def test_listener_with_unknown_event_is_isolated_per_document() -> None:
    linter = Linter({"tokens": BRAND_TOKENS, "rules": COLOR_RULES})
    linter.registry.register(
        RuleModule("acme/typo", RuleMeta("typo"), lambda context: {"nope": lambda event: None}),
        source="/acme.py",
    )
    linter.config.rules["acme/typo"] = "error"

    run = _run(
        linter,
        TextDocument("a.css", "css", "a { color: red; }"),
        TextDocument("b.css", "css", "b { color: red; }"),
    )

    assert [result.document_id for result in run.results] == ["a.css", "b.css"]
    for result in run.results:
        assert sorted(message.rule_id for message in result.messages) == [
            "design-token/colors",
            "rule-runtime-error",
        ]
    failure = next(message for message in run.messages if message.rule_id == "rule-runtime-error")
    assert failure.message == 'Rule "acme/typo" failed in create: Rule "acme/typo" listens to unknown event "nope"'


def test_no_documents_returns_warning() -> None:
    run = _run(Linter({"ignoreFiles": ["dist/**"]}))

    assert run.results == ()
    assert run.warning == NO_FILES_MATCHED
    assert run.ignore_files == ("dist/**",)


def test_ignore_files_union_keeps_first_occurrence_order() -> None:
    def create(context):
        context.ignore_file("generated.css")
        context.ignore_file("dist/**")
        return {}

    linter = Linter({"ignoreFiles": ["dist/**"]})
    linter.registry.register(RuleModule("acme/ignore", RuleMeta("ignores"), create), source="/acme.py")
    linter.config.rules["acme/ignore"] = "warn"

    run = _run(linter, TextDocument("a.css", "css", "a {}"), ignore_files=["build/**", "dist/**"])

    assert run.ignore_files == ("dist/**", "build/**", "generated.css")


def test_bad_rule_settings_fail_before_any_document_is_read() -> None:
    linter = Linter({"rules": {"acme/missing": "error"}})
    document = RecordingDocument("a.css", "css", "a {}")

    with pytest.raises(ConfigError, match="Unknown rule"):
        _run(linter, document)

    assert document.reads == []


def test_unknown_document_type_produces_no_messages() -> None:
    run = _run(Linter({"rules": COLOR_RULES}), TextDocument("notes.md", "md", "color: red"))

    assert run.messages == []


def test_file_documents_are_cached_between_runs(tmp_path: Path) -> None:
    source = tmp_path / "app.css"
    source.write_text("a { color: red; }\n", encoding="utf-8")
    cache_path = tmp_path / ".designlint-cache.json"
    linter = Linter({"tokens": BRAND_TOKENS, "rules": COLOR_RULES})

    first = asyncio.run(linter.lint_documents([FileDocument(source)], cache=CacheStore(cache_path)))
    second = asyncio.run(linter.lint_documents([FileDocument(source)], cache=CacheStore(cache_path)))

    stored = json.loads(cache_path.read_text(encoding="utf-8"))
    assert list(stored) == [str(source.resolve())]
    assert [message.message for message in first.messages] == ["Unexpected color red"]
    assert second.results == first.results


def test_missing_file_becomes_parse_error(tmp_path: Path) -> None:
    run = _run(Linter(), FileDocument(tmp_path / "gone.css"))

    (message,) = run.messages
    assert message.rule_id == "parse-error"
    assert message.message.startswith("Failed to read document")


def test_file_fix_rewrites_deprecated_reference(tmp_path: Path) -> None:
    source = tmp_path / "theme.scss"
    source.write_text(".a {\n  color: var(--color-legacy);\n}\n", encoding="utf-8")
    linter = Linter({"tokens": BRAND_TOKENS, "rules": {"design-system/deprecation": "warn"}})

    run = asyncio.run(linter.lint_documents([FileDocument(source)], fix=True))

    assert source.read_text(encoding="utf-8") == ".a {\n  color: var(--color-primary);\n}\n"
    assert run.messages == []


def test_file_document_infers_type_and_resolves_path(tmp_path: Path) -> None:
    document = FileDocument(tmp_path / "x" / ".." / "Button.TSX")

    assert document.type == "tsx"
    assert document.id == str((tmp_path / "Button.TSX").resolve())
    assert document_type_for_path("README.md") == "md"


def test_token_identities_cover_path_pointer_var_and_value() -> None:
    tokens = {token.path: token for token in flatten_design_tokens(BRAND_TOKENS)}

    assert token_identities(tokens["color.primary"]) == {
        "#/color/primary",
        "color.primary",
        "--color-primary",
        "#0055ff",
    }
    assert "4px" in token_identities(tokens["space.sm"])


def test_tracker_marks_tokens_referenced_by_any_identity() -> None:
    tokens = flatten_design_tokens(BRAND_TOKENS)
    tracker = TokenTracker(tokens)

    tracker.track(["#0055FF", "8px", "unrelated"])

    used = {token.path for token in tokens if tracker.is_referenced(token)}
    assert used == {"color.primary", "color.accent", "space.md"}
    assert "weight.bold" in {token.path for token in tracker.unused_tokens()}
    assert "weight.bold" not in {token.path for token in tracker.unused_tokens(["WEIGHT.BOLD"])}


def test_config_accepts_camel_case_and_snake_case() -> None:
    config = load_config(
        {
            "ignoreFiles": ["dist/**"],
            "color_space": "rgb",
            "configPath": "design.json",
            "tokens": ["--brand-*"],
        }
    )

    assert config.ignore_files == ["dist/**"]
    assert config.color_space == "rgb"
    assert config.result_id == "design.json"
    assert config.token_patterns == ("--brand-*",)
    assert config.token_tree is None


@pytest.mark.parametrize(
    "data",
    [
        {"concurrency": 0},
        {"unknown": True},
        {"tokens": 5},
        {"tokens": ["--ok", 3]},
    ],
)
def test_invalid_config_raises(data: dict[str, object]) -> None:
    with pytest.raises(ConfigError, match="Invalid config"):
        load_config(data)


def test_load_config_file(tmp_path: Path) -> None:
    path = tmp_path / "designlint.json"
    path.write_text(json.dumps({"rules": COLOR_RULES}), encoding="utf-8")
    broken = tmp_path / "broken.json"
    broken.write_text("{", encoding="utf-8")

    config = load_config_file(path)

    assert config.rules == COLOR_RULES
    assert config.config_path == str(path)
    with pytest.raises(ConfigError, match="not valid JSON"):
        load_config_file(broken)
