"""Token substitution for template paths and contents.

Two disjoint token conventions are used so that file name placeholders never
collide with source text placeholders:

* content tokens are written ``[-key-]`` (e.g. ``[-name-]``)
* path tokens are written ``__key__`` (e.g. ``__Plugin__``)

A literal ``[--`` collapses to ``[-`` and is never taken as the start of a
token, which lets generated files contain token-looking text
(``[--name-]`` -> ``[-name-]``).
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Protocol

LITERAL_ESCAPE = "[--"
LITERAL_ESCAPE_VALUE = "[-"


def text_token(key: str) -> str:
    return f"[-{key}-]"


def path_token(key: str) -> str:
    return f"__{key}__"


class ContentProcessor(Protocol):
    """Substitutes tokens in file contents and file paths."""

    def process_text(self, text: str) -> str: ...

    def process_path(self, path: str) -> str: ...


class _Substitution:
    """Single-pass replacement of a fixed set of literal tokens.

    All tokens are matched by one compiled alternation, longest first, so a
    token that is a prefix of another never shadows it, and replacement
    values are never scanned again.
    """

    def __init__(self, replacements: Mapping[str, str]) -> None:
        self.replacements = dict(replacements)
        self.replacements[LITERAL_ESCAPE] = LITERAL_ESCAPE_VALUE
        alternatives = sorted(self.replacements, key=len, reverse=True)
        self.pattern = re.compile("|".join(re.escape(token) for token in alternatives))

    def __call__(self, value: str) -> str:
        return self.pattern.sub(lambda match: self.replacements[match.group(0)], value)


class TokenBasedContentProcessor:
    """``ContentProcessor`` bound to one resolved token set."""

    def __init__(self, tokens: Mapping[str, str]) -> None:
        self.text_tokens = {text_token(key): value for key, value in tokens.items()}
        self.path_tokens = {path_token(key): value for key, value in tokens.items()}
        self._text = _Substitution(self.text_tokens)
        self._path = _Substitution(self.path_tokens)

    def process_text(self, text: str) -> str:
        return self._text(text)

    def process_path(self, path: str) -> str:
        return self._path(path)

    def process_content(self, content: str | bytes) -> str | bytes:
        """Like :meth:`process_text`, but binary content passes through untouched."""
        if isinstance(content, bytes):
            return content
        return self.process_text(content)
