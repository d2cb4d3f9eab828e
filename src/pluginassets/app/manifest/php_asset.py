"""Reader for ``.asset.php`` files written by the dependency-extraction webpack plugin.

Those files hold a single ``return`` statement over a PHP array literal, e.g.::

    <?php return array('dependencies' => array('wp-element'), 'version' => 'a1b2c3');

Only literals are accepted (strings, numbers, booleans, null and nested
``array(...)``/``[...]``); anything else is rejected instead of evaluated.
"""

from __future__ import annotations

import re
from typing import Any, List, Tuple

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+|//[^\n]*|\#[^\n]*|/\*.*?\*/)
  | (?P<open_tag><\?php)
  | (?P<close_tag>\?>)
  | (?P<sq>'(?:[^'\\]|\\.)*')
  | (?P<dq>"(?:[^"\\]|\\.)*")
  | (?P<number>-?\d+(?:\.\d+)?)
  | (?P<arrow>=>)
  | (?P<word>[A-Za-z_][A-Za-z0-9_]*)
  | (?P<punct>[()\[\],;])
    """,
    re.VERBOSE | re.DOTALL,
)

_DQ_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "v": "\v", "f": "\f", "0": "\0", "\\": "\\", '"': '"', "$": "$"}


class PhpAssetSyntaxError(ValueError):
    """Raised when an asset file is not a plain PHP array literal."""


Token = Tuple[str, str, int]


def _tokenize(source: str) -> List[Token]:
    tokens: list[Token] = []
    position = 0
    while position < len(source):
        match = _TOKEN_RE.match(source, position)
        if match is None:
            raise PhpAssetSyntaxError(f"unexpected character {source[position]!r} at offset {position}")
        kind = match.lastgroup or ""
        if kind != "ws":
            tokens.append((kind, match.group(), position))
        position = match.end()
    return tokens


def _unquote_single(raw: str) -> str:
    body = raw[1:-1]
    return re.sub(r"\\([\\'])", r"\1", body)


def _unquote_double(raw: str) -> str:
    body = raw[1:-1]

    def _replace(match: re.Match[str]) -> str:
        char = match.group(1)
        return _DQ_ESCAPES.get(char, "\\" + char)

    return re.sub(r"\\(.)", _replace, body)


class _Parser:
    def __init__(self, tokens: List[Token]) -> None:
        self._tokens = tokens
        self._index = 0

    def _peek(self) -> Token | None:
        if self._index < len(self._tokens):
            return self._tokens[self._index]
        return None

    def _next(self) -> Token:
        token = self._peek()
        if token is None:
            raise PhpAssetSyntaxError("unexpected end of input")
        self._index += 1
        return token

    def _expect(self, value: str) -> None:
        kind, text, offset = self._next()
        if text.lower() != value:
            raise PhpAssetSyntaxError(f"expected {value!r} at offset {offset}, got {text!r}")

    def parse_file(self) -> Any:
        self._expect("<?php")
        self._expect("return")
        value = self._value()
        self._expect(";")
        token = self._peek()
        if token is not None and token[0] == "close_tag":
            self._index += 1
        token = self._peek()
        if token is not None:
            raise PhpAssetSyntaxError(f"unexpected {token[1]!r} at offset {token[2]}")
        return value

    def _value(self) -> Any:
        kind, text, offset = self._next()
        if kind == "sq":
            return _unquote_single(text)
        if kind == "dq":
            return _unquote_double(text)
        if kind == "number":
            return float(text) if "." in text else int(text)
        if kind == "word":
            lowered = text.lower()
            if lowered == "true":
                return True
            if lowered == "false":
                return False
            if lowered == "null":
                return None
            if lowered == "array":
                self._expect("(")
                return self._array_body(")")
        if kind == "punct" and text == "[":
            return self._array_body("]")
        raise PhpAssetSyntaxError(f"unsupported expression {text!r} at offset {offset}")

    def _array_body(self, closing: str) -> Any:
        items: list[tuple[Any, Any]] = []
        has_keys = False
        while True:
            token = self._peek()
            if token is not None and token[1] == closing:
                self._index += 1
                break
            first = self._value()
            token = self._peek()
            if token is not None and token[0] == "arrow":
                self._index += 1
                items.append((first, self._value()))
                has_keys = True
            else:
                items.append((None, first))
            token = self._next()
            if token[1] == closing:
                break
            if token[1] != ",":
                raise PhpAssetSyntaxError(f"expected ',' or {closing!r} at offset {token[2]}, got {token[1]!r}")
        return _build_array(items, has_keys)


def _build_array(items: List[tuple[Any, Any]], has_keys: bool) -> Any:
    if not has_keys:
        return [value for _, value in items]
    result: dict[Any, Any] = {}
    next_index = 0
    for key, value in items:
        if key is None:
            key = next_index
        if isinstance(key, int):
            next_index = max(next_index, key + 1)
        result[key] = value
    return result


def parse_php_asset(source: str) -> Any:
    """Return the Python value of an ``.asset.php`` return statement."""

    return _Parser(_tokenize(source)).parse_file()


__all__ = ["PhpAssetSyntaxError", "parse_php_asset"]
