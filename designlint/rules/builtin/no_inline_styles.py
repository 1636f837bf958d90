"""design-system/no-inline-styles: no style or class attributes on components."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from designlint.parsers.events import JSXAttribute, RuleListener, SyntaxEvent
from designlint.rules.base import RuleContext, RuleMeta, RuleModule

_CLASS_ATTRIBUTES = frozenset({"class", "className"})


class NoInlineStylesOptions(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    ignore_class_name: bool = Field(default=False, alias="ignoreClassName")


def _create(context: RuleContext) -> RuleListener:
    options = context.options if isinstance(context.options, NoInlineStylesOptions) else NoInlineStylesOptions()

    def on_attribute(node: JSXAttribute) -> None:
        if not node.is_component:
            return
        if node.name == "style":
            context.report(f"Unexpected style attribute on {node.element}", node.line, node.column)
        elif node.name in _CLASS_ATTRIBUTES and not options.ignore_class_name:
            context.report(f"Unexpected {node.name} attribute on {node.element}", node.line, node.column)

    return {SyntaxEvent.JSX_ATTRIBUTE: on_attribute}


no_inline_styles_rule = RuleModule(
    name="design-system/no-inline-styles",
    meta=RuleMeta(
        description="disallow inline style or className attributes on design system components",
        category="design-system",
        schema=NoInlineStylesOptions,
    ),
    create=_create,
)
