#!/usr/bin/env python
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from designlint.errors import DesignLintError
from designlint.tokens import FlattenedToken, format_scalar, parse_tokens_by_theme


def format_token(idx: int, token: FlattenedToken) -> str:
    base = f"[{idx}] {token.path} type={token.type.value} value={format_scalar(token.value)}"
    if token.references:
        base += f" refs={','.join(token.references)}"
    if token.is_deprecated:
        base += f" deprecated={token.deprecated!r}"
    return base


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Print the flattened tokens of a design token file.")
    parser.add_argument("input", type=Path, help="JSON token tree or theme record.")
    parser.add_argument("--theme", help="Only print this theme.")
    parser.add_argument("--color-space", choices=["hex", "rgb", "hsl"], help="Convert color values.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        tree = json.loads(args.input.read_text(encoding="utf-8"))
        by_theme = parse_tokens_by_theme(tree, color_space=args.color_space)
    except (OSError, ValueError, DesignLintError) as exc:
        print(f"Failed to read tokens: {exc}", file=sys.stderr)
        return 1

    for theme, tokens in by_theme.items():
        if args.theme is not None and theme != args.theme:
            continue
        print(f"# {theme} ({len(tokens)} tokens)")
        for idx, token in enumerate(tokens):
            print(format_token(idx, token))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
