"""
Condition evaluation and variable mutations.

Conditions are flat OR-of-AND groups of single comparisons:

```
gold >= 10 && met_ann == true || cheat == true
```

`||` binds loosest. There are no parentheses. Each comparison is exactly
three whitespace-separated tokens: `name op value`. The value decides
the type: an integer literal compares against the integer store, `true`
or `false` against the boolean store.

Mutations have the same three-token shape:

```
gold += 5
met_ann = true
```

Malformed conditions evaluate to False and malformed mutations do
nothing. A typo in a script locks content instead of stopping playback.
"""

from __future__ import annotations

import logging
import operator
import re
from itertools import product
from typing import Callable, Iterable, Optional, Union

from convo_framework.components.variables import VariableStore

logger = logging.getLogger(__name__)

OR = "||"
AND = "&&"

INT_PATTERN = re.compile(r'^[+-]?\d+$')

INT_COMPARISONS: dict[str, Callable[[int, int], bool]] = {
    '==': operator.eq,
    '!=': operator.ne,
    '>': operator.gt,
    '<': operator.lt,
    '>=': operator.ge,
    '<=': operator.le,
}

BOOL_COMPARISONS: dict[str, Callable[[bool, bool], bool]] = {
    '==': operator.eq,
    '!=': operator.ne,
}

INT_MUTATIONS: dict[str, Callable[[int, int], int]] = {
    '=': lambda current, value: value,
    '+=': operator.add,
    '-=': operator.sub,
}


def parse_literal(token: str) -> Optional[Union[int, bool]]:
    """
    Type a literal token: integer first, then boolean.

    Returns None when the token is neither.
    """
    if INT_PATTERN.match(token):
        return int(token)
    lowered = token.lower()
    if lowered == 'true':
        return True
    if lowered == 'false':
        return False
    return None


def split_groups(condition: str) -> list[list[str]]:
    """Split a condition into OR groups of stripped AND atoms."""
    return [
        [atom.strip() for atom in group.split(AND)]
        for group in condition.split(OR)
    ]


def _check_atom(atom: str) -> Optional[tuple[str, str, Union[int, bool]]]:
    tokens = atom.split()
    if len(tokens) != 3:
        return None

    name, op, raw_value = tokens
    value = parse_literal(raw_value)
    if value is None:
        return None

    # bool is checked first: True/False are ints too
    if isinstance(value, bool):
        if op not in BOOL_COMPARISONS:
            return None
    elif op not in INT_COMPARISONS:
        return None

    return name, op, value


def evaluate_atom(atom: str, store: VariableStore) -> bool:
    """Evaluate one `name op value` comparison. Malformed atoms are False."""
    checked = _check_atom(atom)
    if checked is None:
        logger.debug(f"Malformed condition atom: {atom!r}")
        return False

    name, op, value = checked
    if isinstance(value, bool):
        return BOOL_COMPARISONS[op](store.get_bool(name, False), value)
    return INT_COMPARISONS[op](store.get_int(name, 0), value)


def evaluate_condition(condition: Optional[str], store: VariableStore) -> bool:
    """
    Evaluate a condition against a variable store.

    An absent or blank condition is always True. The condition holds when
    any OR group holds, and a group holds when all of its atoms hold.
    """
    if condition is None or not condition.strip():
        return True

    return any(
        all(evaluate_atom(atom, store) for atom in group)
        for group in split_groups(condition)
    )


def is_valid_condition(condition: Optional[str]) -> bool:
    """Check condition syntax without evaluating it."""
    if condition is None or not condition.strip():
        return True
    return all(
        _check_atom(atom) is not None
        for group in split_groups(condition)
        for atom in group
    )


def conjoin_conditions(first: Optional[str], second: Optional[str]) -> Optional[str]:
    """
    Combine two conditions with AND, staying in flat OR-of-AND form.

    AND is distributed over OR: `(a || b) AND c` becomes `a && c || b && c`.
    """
    if first is None or not first.strip():
        return second
    if second is None or not second.strip():
        return first

    groups = [
        left + right
        for left, right in product(split_groups(first), split_groups(second))
    ]
    return f" {OR} ".join(f" {AND} ".join(group) for group in groups)


def _check_mutation(expression: str) -> Optional[tuple[str, str, Union[int, bool]]]:
    tokens = expression.split()
    if len(tokens) != 3:
        return None

    name, op, raw_value = tokens
    value = parse_literal(raw_value)
    if value is None:
        return None

    if isinstance(value, bool):
        if op != '=':
            return None
    elif op not in INT_MUTATIONS:
        return None

    return name, op, value


def apply_mutation(expression: str, store: VariableStore) -> bool:
    """
    Apply one mutation expression to the store.

    Returns:
        True if the expression was well formed and applied
    """
    checked = _check_mutation(expression)
    if checked is None:
        logger.debug(f"Ignoring malformed mutation: {expression!r}")
        return False

    name, op, value = checked
    if isinstance(value, bool):
        store.set_bool(name, value)
    else:
        current = store.get_int(name, 0)
        store.set_int(name, INT_MUTATIONS[op](current, value))
    return True


def apply_mutations(expressions: Iterable[str], store: VariableStore) -> int:
    """Apply mutations in order. Returns how many were applied."""
    return sum(1 for expression in expressions if apply_mutation(expression, store))


def is_valid_mutation(expression: str) -> bool:
    """Check mutation syntax without applying it."""
    return _check_mutation(expression) is not None
