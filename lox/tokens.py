"""Token definitions shared by the scanner and the parser."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class Token:
    type: str
    lexeme: str
    literal: Any
    line: int

    def __str__(self) -> str:
        return f"{self.type} {self.lexeme} {self.literal}"


# Reserved words map to an upper-cased token type of the same name.
KEYWORDS: Dict[str, str] = {
    word: word.upper()
    for word in (
        'and', 'class', 'else', 'false', 'for', 'fun', 'if', 'nil',
        'or', 'print', 'return', 'super', 'this', 'true', 'var', 'while',
    )
}

# Token types that start a statement; the parser resynchronizes on these.
STATEMENT_KEYWORDS = frozenset({
    'CLASS', 'FUN', 'VAR', 'FOR', 'IF', 'WHILE', 'PRINT', 'RETURN',
})

EOF = 'EOF'
