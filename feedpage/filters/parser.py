"""Parser and evaluator for the feed reader's filter language.

Expressions compare article or feed attributes against literal values::

    tags # "news" and age < 4 and (unread = "yes" or title =~ "python")

``and`` binds tighter than ``or``; parentheses group. Attributes are
resolved through ``attribute_value`` so articles fall back to their feed.
"""

import logging
import re
from typing import Any, List, NamedTuple, Optional, Tuple

from ..errors import FilterParseError

logger = logging.getLogger(__name__)

TOKEN_RE = re.compile(
    r"""
    \s*(?:
        (?P<lparen>\()
      | (?P<rparen>\))
      | (?P<string>"(?:[^"\\]|\\.)*")
      | (?P<op>=~|!~|!=|==|<=|>=|!\#|=|<|>|\#)
      | (?P<number>-?\d+)
      | (?P<word>[A-Za-z_][A-Za-z0-9_-]*)
    )
    """,
    re.VERBOSE,
)

KEYWORDS = ("and", "or", "between")


class Token(NamedTuple):
    kind: str
    value: str
    position: int


def tokenize(text: str) -> List[Token]:
    """Split filter text into tokens."""
    tokens = []
    pos = 0
    text = text.rstrip()
    while pos < len(text):
        match = TOKEN_RE.match(text, pos)
        if match is None or match.end() == pos:
            raise FilterParseError(text, f"unexpected character at position {pos}")
        kind = match.lastgroup
        value = match.group(kind)
        if kind == "string":
            value = re.sub(r"\\(.)", r"\1", value[1:-1])
        tokens.append(Token(kind, value, match.start(kind)))
        pos = match.end()
    return tokens


def _to_int(value: str) -> int:
    # Non numeric values compare as 0, as the feed reader does.
    match = re.match(r"\s*-?\d+", value)
    return int(match.group()) if match else 0


class Comparison:
    """Single ``attribute OP value`` test."""

    def __init__(self, attribute: str, operator: str, value: str) -> None:
        self.attribute = attribute
        self.operator = operator
        self.value = value
        self._regex: Optional[re.Pattern] = None
        self._range: Optional[Tuple[int, int]] = None
        if operator in ("=~", "!~"):
            try:
                self._regex = re.compile(value, re.IGNORECASE)
            except re.error as e:
                raise FilterParseError(value, f"invalid regular expression: {e}")
        elif operator == "between":
            parts = value.split(":")
            if len(parts) != 2 or not all(re.fullmatch(r"\s*-?\d+\s*", p) for p in parts):
                raise FilterParseError(value, "between expects a range like \"1:5\"")
            self._range = (int(parts[0]), int(parts[1]))

    def evaluate(self, obj: Any) -> bool:
        actual = obj.attribute_value(self.attribute)
        if actual is None:
            logger.debug(f"Attribute {self.attribute} unavailable, treating as no match")
            return False
        op = self.operator
        if op in ("=", "=="):
            return actual == self.value
        if op == "!=":
            return actual != self.value
        if op == "=~":
            return self._regex.search(actual) is not None
        if op == "!~":
            return self._regex.search(actual) is None
        if op == "#":
            return self.value in actual.split()
        if op == "!#":
            return self.value not in actual.split()
        if op == "between":
            low, high = self._range
            return low <= _to_int(actual) <= high
        number, expected = _to_int(actual), _to_int(self.value)
        if op == "<":
            return number < expected
        if op == ">":
            return number > expected
        if op == "<=":
            return number <= expected
        return number >= expected

    def __repr__(self) -> str:
        return f"Comparison({self.attribute} {self.operator} {self.value!r})"


class BooleanOp:
    """``and`` / ``or`` of two sub expressions."""

    def __init__(self, operator: str, left: Any, right: Any) -> None:
        self.operator = operator
        self.left = left
        self.right = right

    def evaluate(self, obj: Any) -> bool:
        if self.operator == "and":
            return self.left.evaluate(obj) and self.right.evaluate(obj)
        return self.left.evaluate(obj) or self.right.evaluate(obj)

    def __repr__(self) -> str:
        return f"({self.left!r} {self.operator} {self.right!r})"


class FilterExpression:
    """Parsed filter, callable as a predicate over matchable objects."""

    def __init__(self, text: str, root: Any) -> None:
        self.text = text
        self.root = root

    def matches(self, obj: Any) -> bool:
        return self.root.evaluate(obj)

    __call__ = matches

    def __repr__(self) -> str:
        return f"FilterExpression({self.text!r})"


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = tokenize(text)
        self.pos = 0

    def _peek(self) -> Optional[Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _next(self, expected: str) -> Token:
        token = self._peek()
        if token is None:
            raise FilterParseError(self.text, f"expected {expected}, got end of expression")
        self.pos += 1
        return token

    def _is_keyword(self, token: Optional[Token], word: str) -> bool:
        return token is not None and token.kind == "word" and token.value.lower() == word

    def parse(self) -> Any:
        if not self.tokens:
            raise FilterParseError(self.text, "empty expression")
        root = self._parse_or()
        token = self._peek()
        if token is not None:
            raise FilterParseError(self.text, f"unexpected {token.value!r} at position {token.position}")
        return root

    def _parse_or(self) -> Any:
        left = self._parse_and()
        while self._is_keyword(self._peek(), "or"):
            self.pos += 1
            left = BooleanOp("or", left, self._parse_and())
        return left

    def _parse_and(self) -> Any:
        left = self._parse_term()
        while self._is_keyword(self._peek(), "and"):
            self.pos += 1
            left = BooleanOp("and", left, self._parse_term())
        return left

    def _parse_term(self) -> Any:
        token = self._next("attribute or '('")
        if token.kind == "lparen":
            inner = self._parse_or()
            closing = self._next("')'")
            if closing.kind != "rparen":
                raise FilterParseError(self.text, f"expected ')' at position {closing.position}")
            return inner
        if token.kind != "word" or token.value.lower() in KEYWORDS:
            raise FilterParseError(self.text, f"expected attribute at position {token.position}")
        return self._parse_comparison(token.value)

    def _parse_comparison(self, attribute: str) -> Comparison:
        op_token = self._next("operator")
        if op_token.kind == "op":
            operator = op_token.value
        elif self._is_keyword(op_token, "between"):
            operator = "between"
        else:
            raise FilterParseError(self.text, f"expected operator at position {op_token.position}")
        value_token = self._next("value")
        if value_token.kind not in ("string", "number"):
            raise FilterParseError(self.text, f"expected value at position {value_token.position}")
        return Comparison(attribute, operator, value_token.value)


def parse_filter(text: str) -> FilterExpression:
    """
    Parse filter expression text.

    Raises:
        FilterParseError: If the expression is not valid
    """
    return FilterExpression(text, _Parser(text).parse())

