"""Tests for the Entity core: construction, resolution, reset and equality."""

import pytest

from entitytrace import (
    ArgumentInvalidError,
    ArgumentNullError,
    Entity,
    EntityKind,
    InvalidStateError,
    equals,
    not_equals,
)


class TestLeafConstruction:
    """Tests for building leaf entities."""

    def test_name_and_value(self) -> None:
        """Should expose the name and value of a leaf with no operands or conditions."""
        price = Entity("Price", 100)

        assert price.name == "Price"
        assert price.resolve() == 100
        assert price.value == 100
        assert price.kind is EntityKind.LEAF
        assert price.is_leaf
        assert price.operation is None
        assert price.operands == ()
        assert price.conditions == ()

    @pytest.mark.parametrize("name", [None, "", "   ", "\t\n", 42])
    def test_invalid_name_raises(self, name: object) -> None:
        """Should reject names that are missing, blank or not strings."""
        with pytest.raises(ArgumentInvalidError, match="Name cannot be None or whitespace"):
            Entity(name, 1)  # type: ignore[arg-type]

    def test_invalid_name_is_a_value_error(self) -> None:
        """Should raise an error that callers can catch as ValueError."""
        with pytest.raises(ValueError, match="cannot be None or whitespace"):
            Entity("", 1)

    def test_value_type_defaults_to_type_of_value(self) -> None:
        """Should take the value type from the initial value."""
        assert Entity("A", 1).value_type is int
        assert Entity("B", "text").value_type is str

    def test_explicit_value_type(self) -> None:
        """Should prefer an explicit value type over the type of the value."""
        maybe = Entity("Maybe", None, value_type=int)

        assert maybe.value_type is int

    def test_description_defaults_to_none_and_is_settable(self) -> None:
        """Should let a description be attached without changing the name."""
        total = Entity("A", 1) + Entity("B", 2)
        assert total.description is None

        total.description = "Total"

        assert total.description == "Total"
        assert total.name == "A + B"

    def test_repr(self) -> None:
        assert repr(Entity("A", 1)) == "Entity(name='A', kind='leaf')"


class TestMetadata:
    """Tests for arbitrary and value-typed metadata."""

    def test_state_is_exposed(self) -> None:
        """Should expose both metadata maps by key."""
        revenue = Entity(
            "Revenue",
            1000,
            arbitrary_state={"Region": "EU", "Quarter": "Q1"},
            value_state={"Target": 1200},
        )

        assert revenue.has_arbitrary_state
        assert revenue.has_value_state
        assert revenue.arbitrary_state["Region"] == "EU"
        assert revenue.arbitrary_state.get("Missing") is None
        assert revenue.value_state["Target"] == 1200

    def test_state_is_copied_at_construction(self) -> None:
        """Should not see later changes to the caller's dictionary."""
        state = {"Region": "EU"}
        revenue = Entity("Revenue", 1000, arbitrary_state=state)

        state["Region"] = "US"
        state["Extra"] = "x"

        assert dict(revenue.arbitrary_state) == {"Region": "EU"}

    def test_state_is_read_only(self) -> None:
        """Should refuse item assignment on the metadata view."""
        revenue = Entity("Revenue", 1000, arbitrary_state={"Region": "EU"})

        with pytest.raises(TypeError):
            revenue.arbitrary_state["Region"] = "US"  # type: ignore[index]

    def test_empty_state(self) -> None:
        plain = Entity("Plain", 1)

        assert not plain.has_arbitrary_state
        assert not plain.has_value_state
        assert len(plain.arbitrary_state) == 0

    def test_derived_entities_do_not_inherit_state(self) -> None:
        """Should start derived entities with empty metadata."""
        a = Entity("A", 1, arbitrary_state={"unit": "kg"})
        b = Entity("B", 2, value_state={"max": 3})

        total = a + b

        assert not total.has_arbitrary_state
        assert not total.has_value_state


class TestResolve:
    """Tests for lazy resolution."""

    def test_lazy_consistency(self) -> None:
        """Should reflect a leaf reset on the next resolve of a dependent."""
        a = Entity("A", 10)
        b = Entity("B", 5)
        total = a + b

        assert total.resolve() == 15

        a.reset(20)

        assert total.resolve() == 25

    def test_resolve_is_repeatable(self) -> None:
        total = Entity("A", 2) * Entity("B", 3)

        assert total.resolve() == total.resolve() == 6

    def test_shared_leaf_propagates_to_all_dependents(self) -> None:
        """Should update every entity that shares the reset leaf."""
        base = Entity("Base", 10)
        doubled = base + base
        squared = base * base

        base.reset(3)

        assert doubled.resolve() == 6
        assert squared.resolve() == 9

    def test_derived_from_derived(self) -> None:
        """Should follow operator precedence of the Python expression."""
        a = Entity("A", 2)
        b = Entity("B", 3)
        c = Entity("C", 4)

        assert (a + b * c).resolve() == 14
        assert ((a + b) * c).resolve() == 20

    def test_domain_errors_propagate_on_resolve(self) -> None:
        """Should raise the computation's own error from resolve, not at construction."""
        ratio = Entity("A", 1) / Entity("Zero", 0)

        with pytest.raises(ZeroDivisionError):
            ratio.resolve()


class TestReset:
    """Tests for reset and reload."""

    def test_reload_is_an_alias(self) -> None:
        a = Entity("A", 1)

        a.reload(7)

        assert a.resolve() == 7

    def test_reset_derived_raises(self) -> None:
        """Should refuse to reset a derived entity."""
        total = Entity("A", 1) + Entity("B", 2)

        with pytest.raises(
            InvalidStateError,
            match=r"Cannot reset a derived entity\. Only leaf entities can be reset\.",
        ):
            total.reset(5)

    def test_reload_derived_raises(self) -> None:
        total = Entity("A", 1) + Entity("B", 2)

        with pytest.raises(InvalidStateError):
            total.reload(5)


class TestDerivedShape:
    """Tests for the structure of operator results."""

    def test_operands_are_exactly_left_and_right(self) -> None:
        """Should keep the left and right operands, in order, as an immutable tuple."""
        a = Entity("A", 1)
        b = Entity("B", 2)

        total = a + b

        assert total.kind is EntityKind.DERIVED
        assert not total.is_leaf
        assert total.operation == "+"
        assert isinstance(total.operands, tuple)
        assert len(total.operands) == 2
        assert total.operands[0] is a
        assert total.operands[1] is b

    def test_derived_entities_have_no_conditions(self) -> None:
        """Should not capture scope conditions on derived entities."""
        flag = Entity("Flag", True)
        a = Entity("A", 1)
        with flag.as_scope():
            total = a + a

        assert total.conditions == ()

    def test_none_operand_raises(self) -> None:
        """Should name the missing side and the operator."""
        a = Entity("A", 1)

        with pytest.raises(ArgumentNullError, match=r"Right operand of \+ cannot be None"):
            a + None  # type: ignore[operator]

    def test_non_entity_operand_is_not_implemented(self) -> None:
        """Should leave plain values to Python's own TypeError."""
        a = Entity("A", 1)

        with pytest.raises(TypeError):
            a + 5  # type: ignore[operator]


class TestDependencyNames:
    """Tests for dependency_names."""

    def test_dependency_closure(self) -> None:
        a = Entity("A", 2)
        b = Entity("B", 3)
        c = Entity("C", 4)

        assert ((a + b) * c).dependency_names() == ["A", "B", "C"]

    def test_names_are_deduplicated_in_first_seen_order(self) -> None:
        """Should list a shared leaf once, where it first appears."""
        base = Entity("BasePrice", 100)
        tax = Entity("TaxRate", 2)
        discount = Entity("Discount", 10)

        final = base + base * tax - discount

        assert final.dependency_names() == ["BasePrice", "TaxRate", "Discount"]

    def test_leaf_depends_on_itself(self) -> None:
        assert Entity("A", 1).dependency_names() == ["A"]


class TestEquality:
    """Tests for traced equality and value-based hashing."""

    def test_eq_builds_traced_boolean(self) -> None:
        """Should return a derived boolean entity named after both operands."""
        a = Entity("A", 10)
        b = Entity("B", 10)

        same = a == b

        assert isinstance(same, Entity)
        assert same.name == "A == B"
        assert same.value_type is bool
        assert same.resolve() is True
        assert bool(same)

    def test_eq_follows_mutation(self) -> None:
        a = Entity("A", 10)
        b = Entity("B", 10)
        same = a == b

        b.reset(11)

        assert same.resolve() is False

    def test_ne(self) -> None:
        different = Entity("A", 1) != Entity("B", 2)

        assert different.name == "A != B"
        assert different.resolve() is True

    def test_equality_is_legal_for_any_type(self) -> None:
        """Should compare values that have no capabilities at all."""
        left = Entity("Left", [1, 2])
        right = Entity("Right", [1, 2])

        assert (left == right).resolve() is True

    def test_hash_follows_resolved_value(self) -> None:
        assert hash(Entity("A", 10)) == hash(10)

    def test_entities_with_equal_values_share_dict_slot(self) -> None:
        """Should find a dict entry through another entity with an equal value."""
        lookup = {Entity("A", 10): "ten"}

        assert lookup[Entity("B", 10)] == "ten"

    def test_truthiness_follows_resolved_value(self) -> None:
        assert bool(Entity("Zero", 0)) is False
        assert bool(Entity("One", 1)) is True


class TestEqualsWithNone:
    """Tests for equals and not_equals with missing operands."""

    def test_both_none(self) -> None:
        """Should return the literal leaf 'true'."""
        result = equals(None, None)

        assert result.is_leaf
        assert result.name == "true"
        assert result.resolve() is True

    def test_one_none(self) -> None:
        """Should return the literal leaf 'false' whichever side is missing."""
        a = Entity("A", 1)

        assert equals(a, None).name == "false"
        assert equals(None, a).resolve() is False

    def test_not_equals_mirrors_equals(self) -> None:
        a = Entity("A", 1)

        assert not_equals(None, None).resolve() is False
        assert not_equals(a, None).resolve() is True
        assert not_equals(a, Entity("B", 1)).resolve() is False
