"""
Tests for the type environment and unification.

These tests verify:
- Unification of concrete types
- Binding and chaining of type variables
- Path compression in resolve
- Snapshot and restore
"""

import pytest

from errors import TypeMismatchError
from type_env import TypeEnv, TypeId, TypeVar, INT, BOOL


class TestConcreteUnification:
    """Tests for unifying Int and Bool."""

    def test_int_with_int(self):
        TypeEnv().unify(INT, INT)

    def test_bool_with_bool(self):
        TypeEnv().unify(BOOL, BOOL)

    def test_int_with_bool_fails(self):
        with pytest.raises(TypeMismatchError) as exc:
            TypeEnv().unify(INT, BOOL)
        assert exc.value.left == INT
        assert exc.value.right == BOOL

    def test_bool_with_int_reports_sides_in_order(self):
        with pytest.raises(TypeMismatchError) as exc:
            TypeEnv().unify(BOOL, INT)
        assert str(exc.value) == "Type error: not same types (`Bool` and `Int`)"


class TestTypeVariables:
    """Tests for slots and their resolution."""

    def test_declare_creates_slot(self):
        env = TypeEnv()
        ty = env.declare_or_lookup("a")
        assert ty == TypeId(0)
        assert env.slots == [TypeVar(0, None)]

    def test_declare_twice_returns_same_binding(self):
        env = TypeEnv()
        first = env.declare_or_lookup("a")
        second = env.declare_or_lookup("a")
        assert first == second
        assert len(env.slots) == 1

    def test_slots_are_ordered(self):
        env = TypeEnv()
        assert env.declare_or_lookup("a") == TypeId(0)
        assert env.declare_or_lookup("b") == TypeId(1)
        assert env.declare_or_lookup("c") == TypeId(2)

    def test_variable_binds_to_concrete(self):
        env = TypeEnv()
        a = env.declare_or_lookup("a")
        env.unify(a, INT)
        assert env.resolve(a) == INT

    def test_concrete_on_left_binds_variable_on_right(self):
        env = TypeEnv()
        a = env.declare_or_lookup("a")
        env.unify(BOOL, a)
        assert env.resolve(a) == BOOL

    def test_variable_with_itself_is_noop(self):
        env = TypeEnv()
        a = env.declare_or_lookup("a")
        env.unify(a, a)
        assert env.slots[0].resolution is None

    def test_bound_variable_conflicts(self):
        env = TypeEnv()
        a = env.declare_or_lookup("a")
        env.unify(a, INT)
        with pytest.raises(TypeMismatchError):
            env.unify(a, BOOL)

    def test_variable_chain_resolves_to_end(self):
        env = TypeEnv()
        a = env.declare_or_lookup("a")
        b = env.declare_or_lookup("b")
        c = env.declare_or_lookup("c")
        env.unify(a, b)
        env.unify(b, c)
        env.unify(c, INT)
        assert env.resolve(a) == INT

    def test_resolve_compresses_paths(self):
        env = TypeEnv()
        a = env.declare_or_lookup("a")
        b = env.declare_or_lookup("b")
        c = env.declare_or_lookup("c")
        env.unify(a, b)
        env.unify(b, c)
        env.unify(c, BOOL)
        assert env.slots[0].resolution == TypeId(1)

        env.resolve(a)
        assert env.slots[0].resolution == BOOL
        assert env.slots[1].resolution == BOOL

    def test_unbound_chain_resolves_to_last_variable(self):
        env = TypeEnv()
        a = env.declare_or_lookup("a")
        b = env.declare_or_lookup("b")
        env.unify(a, b)
        assert env.resolve(a) == b

    def test_type_of(self):
        env = TypeEnv()
        env.unify(env.declare_or_lookup("a"), INT)
        assert env.type_of("a") == INT
        assert env.type_of("missing") is None


class TestSnapshots:
    """Tests for snapshot / restore."""

    def test_restore_drops_new_names_and_slots(self):
        env = TypeEnv()
        env.unify(env.declare_or_lookup("a"), INT)
        snapshot = env.snapshot()

        env.declare_or_lookup("b")
        env.restore(snapshot)

        assert "b" not in env
        assert len(env.slots) == 1

    def test_restore_undoes_bindings(self):
        env = TypeEnv()
        a = env.declare_or_lookup("a")
        snapshot = env.snapshot()

        env.unify(a, BOOL)
        env.restore(snapshot)

        assert env.resolve(a) == a

    def test_snapshot_is_independent_of_later_changes(self):
        env = TypeEnv()
        a = env.declare_or_lookup("a")
        snapshot = env.snapshot()
        env.unify(a, INT)

        env.restore(snapshot)
        env.unify(a, BOOL)
        assert env.type_of("a") == BOOL
