"""
Token types and the Token value produced by the tokenizer.

Payload kind follows from the token type:

    Identifier, Mnemonic, Directive, StringLit, Error   -> str
    NumericLit                                          -> int (signed 64-bit)
    everything else                                     -> None

NEWLINE_SIGNIFICANT says, for each token type, whether a newline right
after it ends the statement. A newline after an operator or "(" is just
whitespace, so an expression can be continued on the next line.
"""

from __future__ import annotations
import enum
from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from .position import Position

__all__ = ['TokenType', 'Token', 'NEWLINE_SIGNIFICANT', 'S64_MIN', 'S64_MAX']

S64_MIN = -(1 << 63)
S64_MAX = (1 << 63) - 1


# ──────────────────────────────────────────────
# Token types
# ──────────────────────────────────────────────

class TokenType(enum.Enum):
    Error = "Error"
    EndOfFile = "EndOfFile"
    NewLine = "NewLine"

    # Words and literals
    Identifier = "Identifier"
    Mnemonic = "Mnemonic"
    Directive = "Directive"
    StringLit = "StringLit"
    NumericLit = "NumericLit"

    # Punctuation
    Comma = ","
    LParen = "("
    RParen = ")"

    # Operators
    Plus = "+"
    Minus = "-"
    Mul = "*"
    Div = "/"
    Mod = "%"
    Xor = "^"
    ShLeft = "<<"
    LessEqual = "<="
    Less = "<"
    ShRight = ">>"
    GreaterEqual = ">="
    Greater = ">"
    Equal = "=="
    NotEqual = "!="
    LogicNot = "!"
    LogicAnd = "&&"
    BitAnd = "&"
    LogicOr = "||"
    BitOr = "|"
    BitNot = "~"
    TokCat = "@@"


STRING_PAYLOAD_TYPES = frozenset({
    TokenType.Identifier,
    TokenType.Mnemonic,
    TokenType.Directive,
    TokenType.StringLit,
    TokenType.Error,
})


# ──────────────────────────────────────────────
# Newline significance
# ──────────────────────────────────────────────
# True: a newline right after this token is emitted as NewLine.
# Error is significant so that a bad statement is still terminated.

NEWLINE_SIGNIFICANT: Dict[TokenType, bool] = {
    TokenType.Error: True,
    TokenType.EndOfFile: False,
    TokenType.NewLine: False,
    TokenType.Identifier: True,
    TokenType.Mnemonic: True,
    TokenType.Directive: True,
    TokenType.StringLit: True,
    TokenType.NumericLit: True,
    TokenType.Comma: False,
    TokenType.LParen: False,
    TokenType.RParen: True,
    TokenType.Plus: False,
    TokenType.Minus: False,
    TokenType.Mul: False,
    TokenType.Div: False,
    TokenType.Mod: False,
    TokenType.Xor: False,
    TokenType.ShLeft: False,
    TokenType.LessEqual: False,
    TokenType.Less: False,
    TokenType.ShRight: False,
    TokenType.GreaterEqual: False,
    TokenType.Greater: False,
    TokenType.Equal: False,
    TokenType.NotEqual: False,
    TokenType.LogicNot: False,
    TokenType.LogicAnd: False,
    TokenType.BitAnd: False,
    TokenType.LogicOr: False,
    TokenType.BitOr: False,
    TokenType.BitNot: False,
    TokenType.TokCat: False,
}


# ──────────────────────────────────────────────
# Token data class
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class Token:
    pos: Position
    type: TokenType
    payload: Union[None, str, int] = None
    source_code: str = field(default="", compare=False)

    def __post_init__(self):
        if self.type in STRING_PAYLOAD_TYPES:
            if not isinstance(self.payload, str):
                raise TypeError(f"{self.type.name} token needs a str payload, got {self.payload!r}")
        elif self.type is TokenType.NumericLit:
            if isinstance(self.payload, bool) or not isinstance(self.payload, int):
                raise TypeError(f"NumericLit token needs an int payload, got {self.payload!r}")
            if not S64_MIN <= self.payload <= S64_MAX:
                raise ValueError(f"NumericLit payload {self.payload} does not fit in 64 bits")
        elif self.payload is not None:
            raise TypeError(f"{self.type.name} token takes no payload, got {self.payload!r}")

    @property
    def text(self) -> Optional[str]:
        return self.payload if isinstance(self.payload, str) else None

    @property
    def value(self) -> Optional[int]:
        return self.payload if self.type is TokenType.NumericLit else None

    @property
    def is_error(self) -> bool:
        return self.type is TokenType.Error

    def __str__(self):
        if self.payload is None:
            payload = "(empty)"
        elif isinstance(self.payload, str):
            payload = f"`{self.payload}`"
        else:
            payload = str(self.payload)
        return f"{self.pos} - {self.type.name} - {payload} - `{self.source_code}`"

    def __repr__(self):
        if self.payload is None:
            return f"Token({self.type.name}, L{self.pos.line}:{self.pos.column})"
        return f"Token({self.type.name}, {self.payload!r}, L{self.pos.line}:{self.pos.column})"
