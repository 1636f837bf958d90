"""Centralized token trees and document sources used across tests."""

from __future__ import annotations

import textwrap
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class TokenCase:
    name: str
    tokens: dict[str, Any]
    expected_paths: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class InvalidTokenCase:
    name: str
    tokens: dict[str, Any]
    message: str


@dataclass(frozen=True, slots=True)
class DocumentCase:
    name: str
    document_type: str
    source: str
    expected: tuple[tuple[str, int, int], ...]
    """(rule id, line, column) of every expected message, in report order."""


def _dedent(text: str) -> str:
    return textwrap.dedent(text).lstrip()


def case_id(case: TokenCase | InvalidTokenCase | DocumentCase) -> str:
    return case.name


BRAND_TOKENS: dict[str, Any] = {
    "color": {
        "$type": "color",
        "primary": {"$value": "#0055ff"},
        "accent": {"$value": "{color.primary}"},
        "legacy": {"$value": "#ff0000", "$deprecated": "{color.primary}"},
    },
    "space": {
        "$type": "dimension",
        "sm": {"$value": {"value": 4, "unit": "px"}},
        "md": {"$value": "8px"},
    },
    "weight": {
        "$type": "fontWeight",
        "regular": {"$value": 400},
        "bold": {"$value": "bold"},
    },
    "motion": {
        "$type": "duration",
        "fast": {"$value": {"value": 150, "unit": "ms"}},
        "slow": {"$value": "0.3s"},
    },
    "font": {
        "$type": "fontFamily",
        "body": {"$value": ["Inter", "sans-serif"]},
    },
}


VALID_TOKEN_CASES: tuple[TokenCase, ...] = (
    TokenCase(
        name="type_inherited_from_group",
        tokens={"color": {"$type": "color", "red": {"$value": "#f00"}}},
        expected_paths=("color.red",),
    ),
    TokenCase(
        name="untyped_alias_infers_type",
        tokens={
            "base": {"$type": "color", "blue": {"$value": "#00f"}},
            "link": {"$value": "{base.blue}"},
        },
        expected_paths=("base.blue", "link"),
    ),
    TokenCase(
        name="ref_object_becomes_alias",
        tokens={
            "size": {
                "$type": "dimension",
                "base": {"$value": {"value": 1, "unit": "rem"}},
                "body": {"$ref": "#/size/base"},
            }
        },
        expected_paths=("size.base", "size.body"),
    ),
    TokenCase(
        name="fallback_chain",
        tokens={"color": {"$type": "color", "text": {"$value": ["#111", "black"]}}},
        expected_paths=("color.text",),
    ),
    TokenCase(
        name="nested_groups_keep_document_order",
        tokens={
            "a": {"$type": "number", "z": {"$value": 1}, "b": {"c": {"$value": 2}}},
            "d": {"$type": "string", "$description": "labels", "e": {"$value": "x"}},
        },
        expected_paths=("a.z", "a.b.c", "d.e"),
    ),
)


INVALID_TOKEN_CASES: tuple[InvalidTokenCase, ...] = (
    InvalidTokenCase(
        name="alias_cycle",
        tokens={
            "color": {
                "$type": "color",
                "a": {"$value": "{color.b}"},
                "b": {"$value": "{color.a}"},
            }
        },
        message="Circular alias reference",
    ),
    InvalidTokenCase(
        name="unknown_alias",
        tokens={"color": {"$type": "color", "a": {"$value": "{color.missing}"}}},
        message="references unknown token: color.missing",
    ),
    InvalidTokenCase(
        name="nan_number",
        tokens={"ratio": {"$type": "number", "$value": float("nan")}},
        message="has invalid number value",
    ),
    InvalidTokenCase(
        name="infinite_dimension",
        tokens={"gap": {"$type": "dimension", "$value": {"value": float("inf"), "unit": "px"}}},
        message="has invalid dimension value",
    ),
    InvalidTokenCase(
        name="dot_in_name",
        tokens={"color.red": {"$type": "color", "$value": "#f00"}},
        message="Invalid token or group name",
    ),
    InvalidTokenCase(
        name="case_insensitive_duplicate",
        tokens={"color": {"$type": "color", "Red": {"$value": "#f00"}, "red": {"$value": "#e00"}}},
        message="differing only by case",
    ),
    InvalidTokenCase(
        name="missing_type",
        tokens={"thing": {"$value": 12}},
        message="is missing $type",
    ),
    InvalidTokenCase(
        name="alias_type_mismatch",
        tokens={
            "size": {"$type": "dimension", "sm": {"$value": "4px"}},
            "color": {"$type": "color", "text": {"$value": "{size.sm}"}},
        },
        message="expected color",
    ),
    InvalidTokenCase(
        name="schema_below_root",
        tokens={"color": {"$schema": "x", "$type": "color", "red": {"$value": "#f00"}}},
        message="$schema is only allowed on the root group",
    ),
)


DOCUMENT_CASES: tuple[DocumentCase, ...] = (
    DocumentCase(
        name="css_raw_color",
        document_type="css",
        source="a {\n  color: red;\n  background: #0055ff;\n}\n",
        expected=(("design-token/colors", 2, 3),),
    ),
    DocumentCase(
        name="scss_line_comment_and_interpolation",
        document_type="scss",
        source=_dedent(
            """
            // color: red;
            .a-#{$name} {
              color: #abcdef;
            }
            """
        ),
        expected=(("design-token/colors", 3, 3),),
    ),
    DocumentCase(
        name="tsx_style_object",
        document_type="tsx",
        source='const a = <Box style={{ color: "#123456" }} />;\n',
        expected=(("design-token/colors", 1, 25),),
    ),
    DocumentCase(
        name="ts_string_literal",
        document_type="ts",
        source='const accent = "rgb(1, 2, 3)";\n',
        expected=(("design-token/colors", 1, 16),),
    ),
    DocumentCase(
        name="styled_component_template",
        document_type="ts",
        source="const Box = styled.div`\n  color: orange;\n`;\n",
        expected=(("design-token/colors", 2, 3),),
    ),
    DocumentCase(
        name="vue_style_block",
        document_type="vue",
        source=_dedent(
            """
            <template><div class="box"></div></template>
            <style scoped>
            .box { color: #0055ff; background: teal; }
            </style>
            """
        ),
        expected=(("design-token/colors", 3, 24),),
    ),
    DocumentCase(
        name="svelte_inline_style",
        document_type="svelte",
        source='<div style="color: purple">x</div>\n',
        expected=(("design-token/colors", 1, 13),),
    ),
    DocumentCase(
        name="css_unclosed_block",
        document_type="css",
        source="a { color: red;\n",
        expected=(("parse-error", 1, 3),),
    ),
    DocumentCase(
        name="sass_is_unsupported",
        document_type="sass",
        source="a\n  color: red\n",
        expected=(("parse-error", 1, 1),),
    ),
    DocumentCase(
        name="unknown_type_is_skipped",
        document_type="md",
        source="color: red",
        expected=(),
    ),
)
