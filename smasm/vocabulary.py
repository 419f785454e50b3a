"""
Lexical vocabulary: the mnemonics and compare conditions the tokenizer
recognizes.

The vocabulary is configuration, not code. It is normally loaded from the
instruction-set listing the rest of the toolchain is generated from:

    INSTRUCTION(ADD, 0x01, ...)
    INSTRUCTION(LD,  0x10, ...)
    COMPAREINST(CMP, EQ, ...)
    COMPAREINST(CMPI, LT, ...)

INSTRUCTION entries contribute mnemonics. COMPAREINST entries contribute
condition codes; CMP and CMPI themselves are matched by the tokenizer and
never need to be in the mnemonic set.

A JSON form is also accepted:

    {"mnemonics": ["ADD", "LD"], "conditions": ["EQ", "LT"]}
"""

from __future__ import annotations
import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Iterable, Union

from .errors import VocabularyError

__all__ = ['Vocabulary', 'load_vocabulary', 'EMPTY_VOCABULARY']

log = logging.getLogger(__name__)

_NAME_RE = re.compile(r'^[A-Za-z_][A-Za-z0-9_.]*$')
_INSTRUCTION_RE = re.compile(r'^\s*INSTRUCTION\s*\(\s*([^,\s)]+)\s*[,)]')
_COMPAREINST_RE = re.compile(r'^\s*COMPAREINST\s*\(\s*([^,\s)]+)\s*,\s*([^,\s)]+)\s*[,)]')
_LINE_COMMENT_RE = re.compile(r'//.*$')
_BLOCK_COMMENT_RE = re.compile(r'/\*.*?\*/', re.DOTALL)


def _fold(names: Iterable[str], kind: str) -> FrozenSet[str]:
    folded = set()
    for name in names:
        if not isinstance(name, str) or not _NAME_RE.match(name):
            raise VocabularyError(f"invalid {kind} name: {name!r}")
        folded.add(name.upper())
    return frozenset(folded)


@dataclass(frozen=True)
class Vocabulary:
    mnemonics: FrozenSet[str] = frozenset()
    conditions: FrozenSet[str] = frozenset()

    def __post_init__(self):
        # frozen: bypass __setattr__ to store the case-folded sets
        object.__setattr__(self, "mnemonics", _fold(self.mnemonics, "mnemonic"))
        object.__setattr__(self, "conditions", _fold(self.conditions, "condition"))

    def is_mnemonic(self, text: str) -> bool:
        return text.upper() in self.mnemonics

    def is_condition(self, text: str) -> bool:
        return text.upper() in self.conditions

    @classmethod
    def from_listing(cls, text: str, source: str = "") -> Vocabulary:
        """Build a vocabulary from an INSTRUCTION/COMPAREINST macro listing."""
        text = _BLOCK_COMMENT_RE.sub(lambda m: "\n" * m.group(0).count("\n"), text)
        mnemonics = []
        conditions = []
        for line_num, line in enumerate(text.splitlines(), start=1):
            line = _LINE_COMMENT_RE.sub("", line)
            m = _INSTRUCTION_RE.match(line)
            if m:
                mnemonics.append(m.group(1))
                continue
            m = _COMPAREINST_RE.match(line)
            if m:
                conditions.append(m.group(2))
                continue
            if re.match(r'^\s*(INSTRUCTION|COMPAREINST)\b', line):
                raise VocabularyError(f"malformed entry: {line.strip()}", source, line_num)
        try:
            vocab = cls(frozenset(mnemonics), frozenset(conditions))
        except VocabularyError as e:
            raise VocabularyError(e.message, source) from None
        log.debug("Loaded %d mnemonics, %d conditions from listing %s",
                  len(vocab.mnemonics), len(vocab.conditions), source or "<string>")
        return vocab

    @classmethod
    def from_json(cls, text: str, source: str = "") -> Vocabulary:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise VocabularyError(f"invalid JSON: {e.msg}", source, e.lineno) from None
        if not isinstance(data, dict):
            raise VocabularyError("expected a JSON object", source)
        mnemonics = data.get("mnemonics", [])
        conditions = data.get("conditions", [])
        for key, value in (("mnemonics", mnemonics), ("conditions", conditions)):
            if not isinstance(value, list):
                raise VocabularyError(f"'{key}' must be a list of strings", source)
        try:
            vocab = cls(frozenset(mnemonics), frozenset(conditions))
        except TypeError:
            raise VocabularyError("vocabulary entries must be strings", source) from None
        except VocabularyError as e:
            raise VocabularyError(e.message, source) from None
        log.debug("Loaded %d mnemonics, %d conditions from JSON %s",
                  len(vocab.mnemonics), len(vocab.conditions), source or "<string>")
        return vocab


EMPTY_VOCABULARY = Vocabulary()


def load_vocabulary(path: Union[str, Path]) -> Vocabulary:
    """Load a vocabulary file. ``.json`` files are JSON, anything else a listing."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise VocabularyError(f"cannot read file: {e.strerror}", str(path)) from None
    if path.suffix.lower() == ".json":
        return Vocabulary.from_json(text, str(path))
    return Vocabulary.from_listing(text, str(path))
