#!/usr/bin/env python3
"""Compatibility check tests"""

from lcp.op.check import Accept, NoOp, Reject, check, expand_through, reduced_configurations

PASSIVE_SOURCE = frozenset({("a", "a"), ("a", "b"), ("b", "b")})
PASSIVE_TARGET = frozenset({("x", "x"), ("x", "y"), ("y", "y")})
PASSIVE_TARGET_NO_YY = frozenset({("x", "x"), ("x", "y")})


def test_accept_returns_extended_copy():
    """Accepted pair extends a copy; the input relation is untouched."""
    print("Testing accept...")

    relation = {}
    result = check(relation, "b", "x", PASSIVE_SOURCE, PASSIVE_TARGET, 2)

    assert isinstance(result, Accept), f"Expected Accept, got {result}"
    assert result.relation == {"b": frozenset({"x"})}, f"Got {result.relation}"
    assert relation == {}, "Input relation must not be mutated"

    print("  ✓ Accept works")


def test_reject_when_passive_config_escapes():
    """a->y forces (a,a)->(y,y), which the target does not allow."""
    print("Testing reject...")

    relation = {"b": frozenset({"x"})}
    result = check(relation, "a", "y", PASSIVE_SOURCE, PASSIVE_TARGET_NO_YY, 2)

    assert isinstance(result, Reject), f"Expected Reject, got {result}"
    assert relation == {"b": frozenset({"x"})}, "Rejected check must not touch the relation"

    print("  ✓ Reject works")


def test_noop_when_pair_present():
    """A pair already in the relation is never re-verified."""
    print("Testing no-op...")

    # a->y alone would be rejected against PASSIVE_TARGET_NO_YY
    relation = {"a": frozenset({"y"})}
    result = check(relation, "a", "y", PASSIVE_SOURCE, PASSIVE_TARGET_NO_YY, 2)

    assert isinstance(result, NoOp), f"Expected NoOp, got {result}"
    assert relation == {"a": frozenset({"y"})}

    print("  ✓ No-op works")


def test_noop_after_accept_is_idempotent():
    """Re-checking every accepted pair gives NoOp and leaves the relation equal."""
    print("Testing no-op idempotence...")

    relation = {}
    for source, target in [("b", "x"), ("a", "y"), ("a", "x")]:
        result = check(relation, source, target, PASSIVE_SOURCE, PASSIVE_TARGET, 2)
        assert isinstance(result, Accept), f"{source}->{target}: expected Accept, got {result}"
        relation = result.relation

        again = check(relation, source, target, PASSIVE_SOURCE, PASSIVE_TARGET, 2)
        assert isinstance(again, NoOp), f"{source}->{target}: expected NoOp, got {again}"

    assert relation == {"a": frozenset({"x", "y"}), "b": frozenset({"x"})}

    print("  ✓ No-op idempotence verified")


def test_degree_one():
    """With passive degree 1 the check is plain membership of the target label."""
    print("Testing passive degree 1...")

    source = frozenset({("a",)})
    target = frozenset({("x",)})

    assert isinstance(check({}, "a", "x", source, target, 1), Accept)
    assert isinstance(check({}, "a", "y", source, target, 1), Reject)
    # Label absent from every passive configuration: nothing constrains it
    assert isinstance(check({}, "c", "y", source, target, 1), Accept)

    print("  ✓ Degree 1 works")


def test_degree_three_uses_all_slots():
    """Repeated source labels: the removed slot is fixed, the others expand."""
    print("Testing passive degree 3...")

    source = frozenset({("a", "a", "b")})
    target = frozenset({("x", "x", "y")})

    # b has no image yet, so (a, a, b) cannot be completed: accepted
    r1 = check({}, "a", "x", source, target, 3)
    assert isinstance(r1, Accept), f"Expected Accept, got {r1}"

    # (a, a) -> (x, x) plus y is (x, x, y): accepted
    r2 = check(r1.relation, "b", "y", source, target, 3)
    assert isinstance(r2, Accept), f"Expected Accept, got {r2}"

    # (a, a) -> (x, x) plus x is (x, x, x): rejected
    r3 = check(r2.relation, "b", "x", source, target, 3)
    assert isinstance(r3, Reject), f"Expected Reject, got {r3}"

    print("  ✓ Degree 3 works")


def test_reduction_and_expansion_helpers():
    print("Testing helpers...")

    reduced = reduced_configurations(PASSIVE_SOURCE, "a")
    assert reduced == {("a",), ("b",)}, f"Got {reduced}"

    rows = expand_through({("a", "b")}, {"a": frozenset({"x", "y"}), "b": frozenset({"z"})}, 2)
    assert rows == {("x", "z"), ("y", "z")}, f"Got {rows}"

    # A label without images removes the row
    rows = expand_through({("a", "c")}, {"a": frozenset({"x"})}, 2)
    assert rows == set(), f"Got {rows}"

    print("  ✓ Helpers work")


def run_tests():
    print("\n" + "="*60)
    print("Compatibility Check Tests")
    print("="*60 + "\n")

    test_accept_returns_extended_copy()
    test_reject_when_passive_config_escapes()
    test_noop_when_pair_present()
    test_noop_after_accept_is_idempotent()
    test_degree_one()
    test_degree_three_uses_all_slots()
    test_reduction_and_expansion_helpers()

    print("\n" + "="*60)
    print("✓ All compatibility check tests passed")
    print("="*60 + "\n")


if __name__ == "__main__":
    run_tests()
