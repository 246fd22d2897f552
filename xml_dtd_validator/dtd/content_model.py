"""
Content-model matcher compilation.

A DTD element-content spec such as ``(head, (p | list)+, foot?)`` is a regular
expression whose symbols are whole element names. It is tokenized into tagged
tokens and compiled into a position automaton: every occurrence of a name in
the spec is one position, and the automaton records which positions may follow
which. A child sequence is matched by tracking the set of every position it
could currently be at, so non-deterministic models such as ``(a?, b*)*`` are
matched in time linear in the number of children.

Names are compared as whole strings, so no name can ever match inside or as a
prefix of another (``a`` never matches ``ab``).
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Sequence, Set, Tuple

from ..exceptions import ContentModelError
from ..utils import StringUtils


DELIMITER_PATTERN = re.compile(r'([(),|*+?])')
NAME_TOKEN_PATTERN = re.compile(r'^[#\w\-.:]+$')

OPERATORS = frozenset('(),|*+?')
REPEAT_OPERATORS = frozenset('*+?')

# Position 0 is the state before any child has been seen
START_STATE = 0


class TokenKind(Enum):
    NAME = "name"
    OPERATOR = "operator"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str

    @property
    def is_name(self) -> bool:
        return self.kind is TokenKind.NAME

    def is_operator(self, *values: str) -> bool:
        return self.kind is TokenKind.OPERATOR and self.value in values


def tokenize(spec: str) -> List[Token]:
    """
    Split a content spec into operator and name tokens.

    Whitespace is removed first. Raises ContentModelError for an empty spec
    or a name token containing characters that cannot form an element name.
    """
    compact = StringUtils.remove_whitespace(spec)
    tokens: List[Token] = []
    for piece in DELIMITER_PATTERN.split(compact):
        if not piece:
            continue
        if piece in OPERATORS:
            tokens.append(Token(TokenKind.OPERATOR, piece))
        elif NAME_TOKEN_PATTERN.match(piece):
            tokens.append(Token(TokenKind.NAME, piece))
        else:
            raise ContentModelError(f"Invalid name token {piece!r} in content spec", spec=spec)

    if not tokens:
        raise ContentModelError("Content spec is empty", spec=spec)
    return tokens


# (nullable, first positions, last positions) of a sub-expression
_Particle = Tuple[bool, FrozenSet[int], FrozenSet[int]]


class PositionAutomatonBuilder:
    """
    Recursive-descent parser that builds a position automaton from tokens.

    Grammar, loosest binding first::

        choice   := sequence ('|' sequence)*
        sequence := (item | ',')*
        item     := (NAME | '(' choice ')') ['*' | '+' | '?']

    An empty sequence or group matches the empty child list.
    """

    def __init__(self, tokens: Sequence[Token], spec: str = ''):
        self.tokens = tokens
        self.spec = spec
        self.index = 0
        self.names: List[Optional[str]] = [None]
        self.follow: List[Set[int]] = [set()]

    def build(self) -> 'ContentModelMatcher':
        nullable, first, last = self._choice()
        if self._peek() is not None:
            raise ContentModelError("Unbalanced ')' in content spec", spec=self.spec)

        self.follow[START_STATE] = set(first)
        accepting = set(last)
        if nullable:
            accepting.add(START_STATE)

        transitions: List[Dict[str, FrozenSet[int]]] = []
        for successors in self.follow:
            by_name: Dict[str, Set[int]] = {}
            for position in successors:
                by_name.setdefault(self.names[position], set()).add(position)
            transitions.append({name: frozenset(positions) for name, positions in by_name.items()})

        return ContentModelMatcher(self.spec, transitions, frozenset(accepting))

    def _peek(self) -> Optional[Token]:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def _choice(self) -> _Particle:
        nullable, first, last = self._sequence()
        token = self._peek()
        while token is not None and token.is_operator('|'):
            self.index += 1
            branch_nullable, branch_first, branch_last = self._sequence()
            nullable = nullable or branch_nullable
            first = first | branch_first
            last = last | branch_last
            token = self._peek()
        return nullable, first, last

    def _sequence(self) -> _Particle:
        nullable, first, last = True, frozenset(), frozenset()
        while True:
            token = self._peek()
            if token is None or token.is_operator('|', ')'):
                return nullable, first, last
            if token.is_operator(','):
                self.index += 1
                continue

            item_nullable, item_first, item_last = self._item()
            for position in last:
                self.follow[position].update(item_first)
            if nullable:
                first = first | item_first
            last = (last | item_last) if item_nullable else item_last
            nullable = nullable and item_nullable

    def _item(self) -> _Particle:
        token = self._peek()
        if token.is_name:
            self.index += 1
            position = len(self.names)
            self.names.append(token.value)
            self.follow.append(set())
            nullable, first, last = False, frozenset([position]), frozenset([position])
        elif token.is_operator('('):
            self.index += 1
            nullable, first, last = self._choice()
            closing = self._peek()
            if closing is None or not closing.is_operator(')'):
                raise ContentModelError("Unbalanced '(' in content spec", spec=self.spec)
            self.index += 1
        else:
            raise ContentModelError(f"Nothing to repeat before {token.value!r}", spec=self.spec)

        token = self._peek()
        if token is not None and token.is_operator(*REPEAT_OPERATORS):
            self.index += 1
            if token.value in '*+':
                for position in last:
                    self.follow[position].update(first)
            if token.value in '*?':
                nullable = True

            token = self._peek()
            if token is not None and token.is_operator(*REPEAT_OPERATORS):
                raise ContentModelError(f"Repeated occurrence indicator {token.value!r}", spec=self.spec)

        return nullable, first, last


class ContentModelMatcher:
    """
    Compiled matcher for one element-content spec.

    Attributes:
        spec: Content spec it was compiled from
        transitions: For each state, child name to the set of next states
        accepting: States in which the child list may end
    """

    def __init__(self, spec: str, transitions: List[Dict[str, FrozenSet[int]]],
                 accepting: FrozenSet[int]):
        self.spec = spec
        self.transitions = transitions
        self.accepting = accepting

    @property
    def position_count(self) -> int:
        return len(self.transitions) - 1

    def matches(self, names: Sequence[str]) -> bool:
        """True if the whole child-name sequence conforms to the content model."""
        active: FrozenSet[int] = frozenset([START_STATE])
        for name in names:
            active = frozenset(
                position
                for state in active
                for position in self.transitions[state].get(name, ())
            )
            if not active:
                return False
        return not active.isdisjoint(self.accepting)

    def __repr__(self) -> str:
        return f"ContentModelMatcher({self.spec!r})"


def compile_content_model(spec: str) -> ContentModelMatcher:
    """
    Compile a content spec into a matcher.

    Raises:
        ContentModelError: If the content spec cannot be tokenized or does not form a
            valid expression (for example unbalanced parentheses)
    """
    tokens = tokenize(spec)
    try:
        return PositionAutomatonBuilder(tokens, spec).build()
    except RecursionError as e:
        raise ContentModelError("Content spec nests too deeply", spec=spec) from e
