"""design-system/no-unused-tokens: report tokens no document references."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from designlint.parsers.events import RuleListener, RunEvent, RunListener
from designlint.rules.base import RuleContext, RuleMeta, RuleModule, RunContext
from designlint.tokens import format_scalar


class NoUnusedTokensOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    ignore: list[str] = []


def _create(context: RuleContext) -> RuleListener:
    return {}


def _create_run(context: RunContext) -> RunListener:
    options = context.options if isinstance(context.options, NoUnusedTokensOptions) else NoUnusedTokensOptions()

    def on_run_complete() -> None:
        for token in context.unused_tokens(options.ignore):
            value = format_scalar(token.value)
            line, column = (token.location.line, token.location.column) if token.location else (1, 1)
            context.report(
                f"Token {value} is defined but never used",
                line,
                column,
                metadata={
                    "path": token.path,
                    "pointer": token.pointer,
                    "deprecated": token.deprecated,
                    "extensions": dict(token.extensions) if token.extensions is not None else None,
                },
            )

    return {RunEvent.RUN_COMPLETE: on_run_complete}


no_unused_tokens_rule = RuleModule(
    name="design-system/no-unused-tokens",
    meta=RuleMeta(
        description="report unused design tokens",
        category="design-system",
        schema=NoUnusedTokensOptions,
        capabilities=frozenset({"tokenUsage"}),
    ),
    create=_create,
    create_run=_create_run,
)
