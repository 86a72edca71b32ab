"""Label selector parsing.

Supports the Kubernetes label selector syntax::

    app=web,tier!=cache,env in (prod,staging),release,!canary,replicas>2
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from .exceptions import SelectorParseError

_KEY = re.compile(
    r"^([A-Za-z0-9]([-A-Za-z0-9_.]*[A-Za-z0-9])?/)?[A-Za-z0-9]([-A-Za-z0-9_.]*[A-Za-z0-9])?$"
)
_VALUE = re.compile(r"^([A-Za-z0-9]([-A-Za-z0-9_.]*[A-Za-z0-9])?)?$")

_SET_TERM = re.compile(r"^(?P<key>[^\s=!<>(),]+)\s+(?P<op>in|notin)\s*\((?P<values>[^()]*)\)$")
_CMP_TERM = re.compile(r"^(?P<key>[^\s=!<>(),]+)\s*(?P<op>==|=|!=|>|<)\s*(?P<value>[^\s=!<>(),]*)$")
_EXISTS_TERM = re.compile(r"^(?P<neg>!)?\s*(?P<key>[^\s=!<>(),]+)$")


class Operator(str, Enum):
    """Label requirement operator."""

    EQUALS = "="
    NOT_EQUALS = "!="
    IN = "in"
    NOT_IN = "notin"
    EXISTS = "exists"
    DOES_NOT_EXIST = "!"
    GREATER_THAN = ">"
    LESS_THAN = "<"


@dataclass(frozen=True)
class Requirement:
    """A single label constraint."""

    key: str
    operator: Operator
    values: tuple[str, ...] = ()

    def matches(self, labels: Mapping[str, str]) -> bool:
        present = self.key in labels
        value = labels.get(self.key)

        if self.operator == Operator.EXISTS:
            return present
        if self.operator == Operator.DOES_NOT_EXIST:
            return not present
        if self.operator in (Operator.EQUALS, Operator.IN):
            return present and value in self.values
        if self.operator in (Operator.NOT_EQUALS, Operator.NOT_IN):
            return not present or value not in self.values

        # > and < compare integers
        if not present:
            return False
        try:
            actual, expected = int(value), int(self.values[0])
        except ValueError:
            return False
        if self.operator == Operator.GREATER_THAN:
            return actual > expected
        return actual < expected

    def __str__(self) -> str:
        if self.operator == Operator.EXISTS:
            return self.key
        if self.operator == Operator.DOES_NOT_EXIST:
            return f"!{self.key}"
        if self.operator in (Operator.IN, Operator.NOT_IN):
            return f"{self.key} {self.operator.value} ({','.join(self.values)})"
        return f"{self.key}{self.operator.value}{self.values[0]}"


@dataclass(frozen=True)
class LabelSelector:
    """A conjunction of label requirements. Empty selects everything."""

    requirements: tuple[Requirement, ...] = field(default_factory=tuple)

    def empty(self) -> bool:
        return not self.requirements

    def matches(self, labels: Mapping[str, str]) -> bool:
        return all(req.matches(labels) for req in self.requirements)

    def __str__(self) -> str:
        return ",".join(str(req) for req in self.requirements)


def _split_terms(text: str) -> list[str]:
    terms: list[str] = []
    depth = 0
    current: list[str] = []
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise SelectorParseError(f"unbalanced parentheses in selector {text!r}")
        if char == "," and depth == 0:
            terms.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    if depth != 0:
        raise SelectorParseError(f"unbalanced parentheses in selector {text!r}")
    terms.append("".join(current).strip())
    return terms


def _check_key(key: str) -> str:
    if not _KEY.match(key) or len(key.rsplit("/", 1)[-1]) > 63:
        raise SelectorParseError(f"invalid label key {key!r}")
    return key


def _check_value(value: str) -> str:
    if not _VALUE.match(value) or len(value) > 63:
        raise SelectorParseError(f"invalid label value {value!r}")
    return value


def _parse_term(term: str) -> Requirement:
    match = _SET_TERM.match(term)
    if match:
        values = [v.strip() for v in match.group("values").split(",")]
        if not any(values):
            raise SelectorParseError(f"empty value set in {term!r}")
        return Requirement(
            key=_check_key(match.group("key")),
            operator=Operator(match.group("op")),
            values=tuple(sorted(_check_value(v) for v in values)),
        )

    match = _CMP_TERM.match(term)
    if match:
        op = match.group("op")
        value = _check_value(match.group("value"))
        if op in (">", "<"):
            try:
                int(value)
            except ValueError:
                raise SelectorParseError(f"{op} requires an integer in {term!r}") from None
        operator = Operator.EQUALS if op == "==" else Operator(op)
        return Requirement(key=_check_key(match.group("key")), operator=operator, values=(value,))

    match = _EXISTS_TERM.match(term)
    if match:
        operator = Operator.DOES_NOT_EXIST if match.group("neg") else Operator.EXISTS
        return Requirement(key=_check_key(match.group("key")), operator=operator)

    raise SelectorParseError(f"unable to parse requirement {term!r}")


def parse_selector(text: str) -> LabelSelector:
    """
    Parse a label selector expression.

    Args:
        text: Selector such as ``app=web,env in (prod)``; empty selects everything

    Returns:
        LabelSelector with requirements sorted by key

    Raises:
        SelectorParseError: If the expression is malformed
    """
    if not text or not text.strip():
        return LabelSelector()

    requirements = []
    for term in _split_terms(text):
        if not term:
            raise SelectorParseError(f"empty requirement in selector {text!r}")
        requirements.append(_parse_term(term))

    requirements.sort(key=lambda req: req.key)
    return LabelSelector(requirements=tuple(requirements))
