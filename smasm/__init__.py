"""
smasm — assembler front end for the stamina CPU
================================================
Turns assembly source into a token stream for the smasm parser.

Architecture:
    ┌────────────┐    ┌────────────┐    ┌────────────┐
    │ CharSource │───>│ Tokenizer  │───>│   Parser   │
    │ (str/file) │    │  (Tokens)  │    │ (external) │
    └────────────┘    └────────────┘    └────────────┘
                            ▲
                      ┌─────┴──────┐
                      │ Vocabulary │  mnemonics + compare conditions
                      └────────────┘

    - position.py:   (filename, line, column) values
    - source.py:     peek/advance character sources
    - vocabulary.py: mnemonic/condition sets, loaded from the ISA listing
    - tokens.py:     TokenType, Token, newline significance table
    - lexer.py:      the tokenizer state machine
    - errors.py:     LexerError, VocabularyError, InternalError
"""

__version__ = "0.2.0"

from .position import Position
from .source import CharSource, StringSource, FileSource
from .tokens import Token, TokenType, NEWLINE_SIGNIFICANT
from .vocabulary import Vocabulary, load_vocabulary, EMPTY_VOCABULARY
from .lexer import Tokenizer, tokenize, DIALECTS
from .errors import LexerError, VocabularyError, InternalError, raise_on_error

__all__ = [
    'Position', 'CharSource', 'StringSource', 'FileSource',
    'Token', 'TokenType', 'NEWLINE_SIGNIFICANT',
    'Vocabulary', 'load_vocabulary', 'EMPTY_VOCABULARY',
    'Tokenizer', 'tokenize', 'DIALECTS',
    'LexerError', 'VocabularyError', 'InternalError', 'raise_on_error',
]
