"""Calculator for the command bar.

Evaluates a restricted arithmetic grammar:

    [sign] number (operator number)*

where number is an unsigned decimal and operator is one of + - * /.
Anything outside the grammar is declined so the text can be routed as a
bookmark query or web search instead.
"""

import math
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Union

from loguru import logger


OPERATORS = "+-*/"
PRECEDENCE = {"+": 1, "-": 1, "*": 2, "/": 2}

_NUMBER = r"\d+(?:\.\d+)?"
_GRAMMAR_RE = re.compile(
    rf"^\s*[+\-]?\s*{_NUMBER}(?:\s*[+\-*/]\s*{_NUMBER})*\s*$"
)
_TOKEN_RE = re.compile(rf"{_NUMBER}|[+\-*/]")
_LEADING_OPERATOR_RE = re.compile(r"^\s*[+\-*/]")
_EXPONENT_RE = re.compile(r"e([+-])0*(\d)")

Token = Union[float, str]


class EvaluationError(Exception):
    """Raised internally when a token stream cannot be reduced to a value."""


@dataclass(frozen=True)
class EvaluationResult:
    """Outcome of a calculator attempt."""
    evaluated: bool
    value: Optional[float] = None

    @classmethod
    def declined(cls) -> "EvaluationResult":
        return cls(evaluated=False)


def starts_with_operator(text: str) -> bool:
    """True when text (ignoring leading whitespace) begins with + - * /."""
    return bool(_LEADING_OPERATOR_RE.match(text))


def matches_grammar(text: str) -> bool:
    return bool(_GRAMMAR_RE.match(text))


def format_number(value: float) -> str:
    """
    Render a result the way it is shown back in the search field.

    Follows browser number-to-string rules: plain decimals from 1e-6 up to
    1e21, exponent form (without zero padding) outside that range. Chaining
    relies on this, since the grammar has no exponent syntax.
    """
    if math.isfinite(value) and value == int(value) and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    if "e" in text and 1e-6 <= abs(value) < 1e21:
        return format(Decimal(text), "f")
    return _EXPONENT_RE.sub(r"e\1\2", text)


def tokenize(expression: str) -> List[Token]:
    """
    Split an expression into numbers and operators.

    A leading sign is folded into the first number so that "-5+3" yields
    [-5.0, "+", 3.0].
    """
    raw = _TOKEN_RE.findall(expression)
    if not any(t not in OPERATORS for t in raw):
        raise EvaluationError("no numeric tokens")

    tokens: List[Token] = []
    sign = 1.0
    if raw and raw[0] in "+-":
        sign = -1.0 if raw[0] == "-" else 1.0
        raw = raw[1:]

    for text in raw:
        if text in OPERATORS:
            tokens.append(text)
        else:
            tokens.append(float(text) * sign if not tokens else float(text))
    return tokens


def to_postfix(tokens: List[Token]) -> List[Token]:
    """Shunting-yard conversion; equal precedence associates left to right."""
    output: List[Token] = []
    ops: List[str] = []
    for token in tokens:
        if isinstance(token, str):
            while ops and PRECEDENCE[ops[-1]] >= PRECEDENCE[token]:
                output.append(ops.pop())
            ops.append(token)
        else:
            output.append(token)
    while ops:
        output.append(ops.pop())
    return output


def _apply(op: str, a: float, b: float) -> float:
    if op == "+":
        return a + b
    if op == "-":
        return a - b
    if op == "*":
        return a * b
    if b == 0:
        # IEEE semantics: x/0 is +-inf, 0/0 is nan; both are rejected later
        return math.nan if a == 0 else math.copysign(math.inf, a)
    return a / b


def evaluate_postfix(postfix: List[Token]) -> float:
    stack: List[float] = []
    for token in postfix:
        if isinstance(token, str):
            if len(stack) < 2:
                raise EvaluationError(f"operator {token!r} is missing an operand")
            b = stack.pop()
            a = stack.pop()
            stack.append(_apply(token, a, b))
        else:
            stack.append(token)
    if len(stack) != 1:
        raise EvaluationError(f"malformed expression, {len(stack)} values left")
    return stack[0]


def evaluate(raw_input: str, last_result: Optional[float] = None) -> EvaluationResult:
    """
    Try to evaluate command bar text as arithmetic.

    When last_result is set and the text starts with an operator the
    previous result becomes the implicit left operand ("+8" after 10 is
    "10 +8"). Never raises: grammar mismatches, malformed token streams
    and non-finite results all come back as a declined result.
    """
    expression = raw_input
    if last_result is not None and starts_with_operator(raw_input):
        expression = f"{format_number(last_result)} {raw_input}"

    if not matches_grammar(expression):
        return EvaluationResult.declined()

    try:
        value = evaluate_postfix(to_postfix(tokenize(expression)))
    except (EvaluationError, OverflowError) as e:
        logger.debug(f"Calculator declined {expression!r}: {e}")
        return EvaluationResult.declined()

    if not math.isfinite(value):
        logger.debug(f"Calculator rejected non-finite result for {expression!r}")
        return EvaluationResult.declined()

    logger.debug(f"Calculator evaluated {expression!r} = {value}")
    return EvaluationResult(evaluated=True, value=value)
