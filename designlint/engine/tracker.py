"""Which tokens the linted documents referenced."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from designlint.tokens import FlattenedToken, css_var_name, format_scalar

type TokenKey = tuple[str, str]


def token_identities(token: FlattenedToken) -> set[str]:
    """Lowercased strings a document may use to refer to `token`."""
    identities = {token.pointer, token.path, css_var_name(token.path)}
    value = token.value
    if isinstance(value, str):
        identities.add(value.strip())
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        identities.add(format_scalar(value))
    elif isinstance(value, Mapping) and set(value) == {"value", "unit"}:
        identities.add(format_scalar(value))
    return {identity.lower() for identity in identities if identity}


class TokenTracker:
    """Maps reference identities back to tokens and records which were used."""

    def __init__(self, tokens: Sequence[FlattenedToken]) -> None:
        self._tokens = tuple(tokens)
        self._keys_by_identity: dict[str, set[TokenKey]] = {}
        self._used: set[TokenKey] = set()
        for token in self._tokens:
            for identity in token_identities(token):
                self._keys_by_identity.setdefault(identity, set()).add(_key(token))

    def track(self, references: Iterable[str]) -> None:
        for reference in references:
            keys = self._keys_by_identity.get(reference.lower())
            if keys:
                self._used.update(keys)

    def is_referenced(self, token: FlattenedToken) -> bool:
        return _key(token) in self._used

    def unused_tokens(self, ignore: Sequence[str] = ()) -> list[FlattenedToken]:
        """Unused tokens, skipping those whose path or value is in `ignore`."""
        ignored = {item.lower() for item in ignore}
        return [
            token
            for token in self._tokens
            if _key(token) not in self._used
            and token.path.lower() not in ignored
            and format_scalar(token.value).lower() not in ignored
        ]


def _key(token: FlattenedToken) -> TokenKey:
    return token.theme, token.path
