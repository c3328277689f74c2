"""
Salary Reducer Tests

The adjustment control only changes through apply(). Decrement clamps at
zero; increment undoes an unclamped decrement.
"""

import pytest

from roster.kernel.salary import Decrement, Increment, SalaryState, Set, apply, parse_amount, replay


def test_increment_adds_amount():
    assert apply(SalaryState(5000), Increment(250)) == SalaryState(5250)


def test_decrement_subtracts_amount():
    assert apply(SalaryState(5000), Decrement(1200)) == SalaryState(3800)


def test_decrement_clamps_at_zero():
    """Ann has 5000; taking 6000 leaves 0, not -1000."""
    assert apply(SalaryState(5000), Decrement(6000)).salary == 0


def test_decrement_to_exactly_zero():
    assert apply(SalaryState(700), Decrement(700)).salary == 0


def test_set_replaces_value():
    assert apply(SalaryState(5000), Set(0)) == SalaryState(0)
    assert apply(SalaryState(0), Set(91000)) == SalaryState(91000)


def test_apply_does_not_mutate_input():
    state = SalaryState(100)
    apply(state, Increment(1))
    assert state.salary == 100


def test_unknown_action_raises():
    with pytest.raises(ValueError, match="Unhandled action type"):
        apply(SalaryState(1), "increment")  # type: ignore[arg-type]


@pytest.mark.parametrize("salary", [0, 1, 999, 5000, 123456.5])
@pytest.mark.parametrize("amount", [1, 0.5, 999, 5000])
def test_decrement_never_negative(salary, amount):
    assert apply(SalaryState(salary), Decrement(amount)).salary == max(0, salary - amount)


@pytest.mark.parametrize(("salary", "amount"), [(5000, 5000), (5000, 1), (10, 3), (88000, 12000)])
def test_increment_inverts_unclamped_decrement(salary, amount):
    lowered = apply(SalaryState(salary), Decrement(amount))
    assert apply(lowered, Increment(amount)).salary == salary


def test_clamped_decrement_is_not_invertible():
    lowered = apply(SalaryState(100), Decrement(300))
    assert apply(lowered, Increment(300)).salary == 300


def test_replay_applies_in_order():
    actions = [Set(1000), Increment(500), Decrement(2000), Increment(40)]
    assert replay(SalaryState(), actions).salary == 40


# ============================================================================
# Amount input
# ============================================================================


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("500", 500),
        ("12.5", 12.5),
        (" 7 ", 7),
        (300, 300),
        (0.25, 0.25),
    ],
)
def test_parse_amount_accepts_positive_numbers(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", None, "0", 0, "-5", -1, "abc", "nan", "inf", True])
def test_parse_amount_rejects_everything_else(raw):
    assert parse_amount(raw) is None
