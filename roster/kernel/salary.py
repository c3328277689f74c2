"""
Roster Kernel — Salary Reducer

Pure function: (state, action) → state
No side effects. No IO. Deterministic.

The salary adjustment control keeps its own numeric state while a user is
being edited. It only changes through these actions, and never goes below zero.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# State and actions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SalaryState:
    salary: int | float = 0


@dataclass(frozen=True)
class Increment:
    amount: int | float


@dataclass(frozen=True)
class Decrement:
    amount: int | float


@dataclass(frozen=True)
class Set:
    value: int | float


SalaryAction = Increment | Decrement | Set


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def apply(state: SalaryState, action: SalaryAction) -> SalaryState:
    """
    Apply one action to the salary state.

    Decrement clamps at zero. Amounts are not checked here; the control
    only dispatches positive amounts (see parse_amount).

    Raises:
        ValueError: For anything that is not a SalaryAction
    """
    if isinstance(action, Increment):
        return SalaryState(salary=state.salary + action.amount)
    if isinstance(action, Decrement):
        return SalaryState(salary=max(0, state.salary - action.amount))
    if isinstance(action, Set):
        return SalaryState(salary=action.value)
    raise ValueError("Unhandled action type")


def replay(state: SalaryState, actions: list[SalaryAction]) -> SalaryState:
    """Apply a sequence of actions in order."""
    for action in actions:
        state = apply(state, action)
    return state


def parse_amount(raw: object) -> int | float | None:
    """
    Read the transient amount input.

    Returns the amount when it is a positive finite number, else None
    (the increment/decrement buttons are disabled).
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = raw
    else:
        text = str(raw).strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
        if value.is_integer():
            value = int(value)
    if not math.isfinite(value) or value <= 0:
        return None
    return value
