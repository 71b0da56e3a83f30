"""Integration tests for parsing live Python classes into type trees.

Sample hierarchies are declared at module level so their canonical names are
stable: ``<module>.<qualname>``.
"""

from __future__ import annotations

import collections
import logging
from abc import ABC, abstractmethod
from typing import Any, ForwardRef, Generic, NamedTuple, Protocol, TypedDict, TypeVar

import pytest

from typelineage.core.errors import TypeMismatchError
from typelineage.core.models import NULL_TYPE, TOP_TYPE, Compatibility, TypeNode
from typelineage.core.options import ParseOptions
from typelineage.oracles.python import PythonTypeOracle
from typelineage.parser import HierarchyParser, parse

A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")
R = TypeVar("R")
T = TypeVar("T")
U = TypeVar("U")
V = TypeVar("V")

COMPARABLE_REGEX = ".*Comparable.*"
FUNCTION_REGEX = ".*Function.*"


def qualified(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


class Function(Protocol[A, B]):
    def apply(self, value: A) -> B: ...


class Comparable(Protocol[T]):
    def compare_to(self, other: T) -> int: ...


class Serializable(Protocol):
    def dump(self) -> bytes: ...


class HelloWorld(Function[int, bool], Comparable[str]):
    pass


class HelloWorld2(Comparable[str], Function[int, bool]):
    pass


class HelloWorld3(Comparable[bytes], Function[object, bool]):
    pass


class HelloWorld4(Comparable[bytes], Function[str, object]):
    pass


class GenericInterface(Protocol[T]):
    def bears(self, obj: T) -> None: ...


class ExtendingGenericInterface(GenericInterface[str], Protocol[U]):
    pass


class GenericClass(Generic[R]):
    pass


class SecondGenericClass(GenericClass, Generic[T, V]):
    pass


class StringGenericClass(GenericClass[str]):
    pass


class MultipleImplements(GenericInterface[str], Comparable[str]):
    pass


class MultipleExtends(SecondGenericClass[str, int]):
    pass


class AtomicBox(Serializable, Generic[T]):
    pass


class CustomInterfaceHandler(Function[AtomicBox[bool], str], Comparable):
    pass


class HandlerOne(Generic[A]):
    pass


class HandlerTwo(HandlerOne, Generic[B]):
    pass


class HandlerThree(HandlerTwo, Generic[C]):
    pass


class Runnable(ABC):
    @abstractmethod
    def run(self) -> None: ...


class Worker:
    pass


class ScheduledWorker(Runnable, Worker):
    pass


class Base:
    pass


class AbstractBase(Base, ABC):
    @abstractmethod
    def build(self) -> None: ...


class Impl(AbstractBase):
    def build(self) -> None:
        pass


class Point(NamedTuple):
    x: int
    y: int


class Movie(TypedDict):
    title: str


class TestValues:
    """Tests for parsing values and builtin types."""

    def test_none(self) -> None:
        node = parse(None)
        assert node.name == NULL_TYPE
        assert node.children == []

    def test_empty_string(self) -> None:
        assert parse("").render() == "builtins.str"

    def test_int_value(self) -> None:
        assert parse(123).render() == "builtins.int"

    def test_bool_value_climbs_to_int(self) -> None:
        assert parse(True).render() == "builtins.bool<builtins.int>"

    def test_none_type_matches_null_node(self) -> None:
        assert parse(type(None)).compare(parse(None)) == Compatibility.EXACT

    def test_any_is_top(self) -> None:
        assert parse(Any).name == TOP_TYPE
        assert parse(object).name == TOP_TYPE

    def test_stdlib_class(self) -> None:
        assert parse(collections.OrderedDict).render() == "collections.OrderedDict<builtins.dict>"

    def test_instance_uses_runtime_type(self) -> None:
        assert parse(collections.OrderedDict()) == parse(collections.OrderedDict)


class TestGenericAliases:
    """Tests for parameterized handles."""

    def test_builtin_alias(self) -> None:
        assert parse(list[int]).render() == "builtins.list<builtins.int>"

    def test_nested_alias_recurses(self) -> None:
        node = parse(dict[str, list[int]])
        assert node.render() == "builtins.dict<builtins.str, builtins.list<builtins.int>>"

    def test_user_generic_alias(self) -> None:
        assert parse(GenericClass[int]).render() == f"{qualified(GenericClass)}<builtins.int>"

    def test_forward_reference_resolves(self) -> None:
        node = parse(GenericClass["collections.OrderedDict"])
        assert node.children[0].name == "collections.OrderedDict"

    def test_unresolvable_forward_reference_is_top(self) -> None:
        node = parse(GenericClass["nowhere.Missing"])
        assert node.children[0].name == TOP_TYPE

    def test_type_variable_argument_is_top(self) -> None:
        assert parse(GenericClass[T]).children[0].name == TOP_TYPE


class TestUnresolvedRoots:
    """Tests for roots that name a type without being one."""

    def test_type_variable_root_is_top(self) -> None:
        node = parse(T)

        assert node.name == TOP_TYPE
        assert node.children == []

    def test_type_variable_root_compares_as_unknown(self) -> None:
        assert parse(T).compare(parse(int)) == Compatibility.SOURCE_UNKNOWN

    def test_unresolvable_forward_reference_root_is_top(self) -> None:
        assert parse(ForwardRef("nowhere.Missing")).name == TOP_TYPE

    def test_forward_reference_root_walks_hierarchy(self) -> None:
        node = parse(ForwardRef("collections.OrderedDict"))
        assert node.render() == "collections.OrderedDict<builtins.dict>"
        assert node == parse(collections.OrderedDict)


class TestHierarchies:
    """Tests mirroring class and interface hierarchies."""

    def test_generic_class(self) -> None:
        node = parse(GenericClass)

        assert node.name == qualified(GenericClass)
        assert len(node.children) == 1
        assert node.children[0].name == TOP_TYPE

    def test_parameterized_super_type(self) -> None:
        node = parse(StringGenericClass)
        assert node.render() == f"{qualified(StringGenericClass)}<{qualified(GenericClass)}<builtins.str>>"

    def test_multiple_extends(self) -> None:
        node = parse(MultipleExtends)

        assert node.name == qualified(MultipleExtends)
        assert len(node.children) == 1
        second = node.children[0]
        assert second.name == qualified(SecondGenericClass)
        assert [child.name for child in second.children] == [
            "builtins.str",
            "builtins.int",
            qualified(GenericClass),
        ]
        assert second.children[2].children[0].name == TOP_TYPE

    def test_multiple_implements(self) -> None:
        node = parse(MultipleImplements)

        assert [child.name for child in node.children] == [
            qualified(GenericInterface),
            qualified(Comparable),
        ]
        assert node.children[0].children[0].name == "builtins.str"
        assert node.children[1].children[0].name == "builtins.str"

    def test_extending_generic_interface(self) -> None:
        node = parse(ExtendingGenericInterface)

        assert node.name == qualified(ExtendingGenericInterface)
        assert len(node.children) == 2
        assert node.children[0].name == TOP_TYPE
        assert node.children[0].children == []
        assert node.children[1].name == qualified(GenericInterface)
        assert [child.name for child in node.children[1].children] == ["builtins.str"]

    def test_interfaces_precede_super_type(self) -> None:
        node = parse(ScheduledWorker)
        assert [child.name for child in node.children] == [qualified(Runnable), qualified(Worker)]

    def test_abstract_class_on_concrete_base_is_walked(self) -> None:
        node = parse(Impl)
        assert node.render() == f"{qualified(Impl)}<{qualified(AbstractBase)}<{qualified(Base)}>>"

    def test_named_tuple_extends_tuple(self) -> None:
        assert parse(Point).render() == f"{qualified(Point)}<builtins.tuple>"

    def test_typed_dict_extends_dict(self) -> None:
        assert parse(Movie).render() == f"{qualified(Movie)}<builtins.dict>"

    def test_plain_interface_is_leaf(self) -> None:
        node = parse(CustomInterfaceHandler)

        comparable = node.children[1]
        assert comparable.name == qualified(Comparable)
        assert comparable.children == []


class TestHelloWorld:
    """Tests for lookup and comparison over parsed interface trees."""

    def test_structure(self) -> None:
        hello = parse(HelloWorld)

        assert hello.first_child_matching(".*NonExistentType.*") is None
        assert hello.name == qualified(HelloWorld)
        assert len(hello.children) == 2

        function = hello.first_child_matching(FUNCTION_REGEX)
        assert function is not None
        assert [child.name for child in function.children] == ["builtins.int", "builtins.bool"]

        comparable = hello.first_child_matching(COMPARABLE_REGEX)
        assert comparable is not None
        assert [child.name for child in comparable.children] == ["builtins.str"]

    def test_comparisons(self) -> None:
        hello = parse(HelloWorld)
        hello2 = parse(HelloWorld2)
        hello3 = parse(HelloWorld3)
        hello4 = parse(HelloWorld4)

        def comparable(node: TypeNode) -> TypeNode:
            return node.first_child_matching(COMPARABLE_REGEX)

        def function(node: TypeNode) -> TypeNode:
            return node.first_child_matching(FUNCTION_REGEX)

        assert hello.compare_to(hello2) == -1
        assert comparable(hello).compare_to(comparable(hello3)) == -1
        assert comparable(hello).compare_to(comparable(hello2)) == 0
        assert function(hello3).compare_to(function(hello2)) == 1
        assert function(hello2).compare_to(function(hello3)) == 2
        assert function(hello3).compare_to(function(hello4)) == 3

    def test_compare_raises(self) -> None:
        hello = parse(HelloWorld)
        hello3 = parse(HelloWorld3)

        with pytest.raises(TypeMismatchError):
            hello.first_child_matching(COMPARABLE_REGEX).compare(
                hello3.first_child_matching(COMPARABLE_REGEX)
            )

    def test_compare_with_none_raises(self) -> None:
        hello = parse(HelloWorld)

        with pytest.raises(TypeMismatchError):
            hello.first_child_matching(COMPARABLE_REGEX).compare(None)

    def test_reparse_compares_equal(self) -> None:
        assert parse(HelloWorld).compare(parse(HelloWorld)) == Compatibility.EXACT
        assert parse(GenericClass).compare(parse(GenericClass)) == Compatibility.BOTH_UNKNOWN


class TestExclusionFilters:
    """Tests for pruning hierarchies with ParseOptions."""

    def test_class_filter_prunes_branch(self) -> None:
        options = ParseOptions(class_filter=".*HandlerTwo")
        node = parse(HandlerThree, options)

        assert len(node.children) == 1
        assert node.children[0].name == TOP_TYPE

    def test_class_param_filter(self) -> None:
        options = ParseOptions(class_param_filter=r"builtins\.object")
        node = parse(HandlerThree, options)

        assert len(node.children) == 1
        assert node.children[0].name == qualified(HandlerTwo)
        assert node.render() == f"{qualified(HandlerThree)}<{qualified(HandlerTwo)}<{qualified(HandlerOne)}>>"

    def test_interface_filter(self) -> None:
        options = ParseOptions(interface_filter=COMPARABLE_REGEX)
        node = parse(CustomInterfaceHandler, options)

        assert len(node.children) == 1
        function = node.children[0]
        assert function.name == qualified(Function)
        assert len(function.children) == 2

        box = function.children[0]
        assert box.name == qualified(AtomicBox)
        assert [child.name for child in box.children] == ["builtins.bool", qualified(Serializable)]
        assert function.children[1].name == "builtins.str"

    def test_interface_param_filter(self) -> None:
        options = ParseOptions(interface_param_filter=r".*\.str")
        node = parse(CustomInterfaceHandler, options)

        assert len(node.children) == 2
        function = node.children[0]
        assert [child.name for child in function.children] == [qualified(AtomicBox)]
        assert [child.name for child in function.children[0].children] == [
            "builtins.bool",
            qualified(Serializable),
        ]

    def test_filters_do_not_affect_default_parse(self) -> None:
        assert len(parse(HandlerThree).children) == 2

    def test_pruning_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="typelineage.parser"):
            parse(HandlerThree, ParseOptions(class_filter=".*HandlerTwo"))

        assert any("Excluded super-type" in record.message for record in caplog.records)


class TestHierarchyParser:
    """Tests for the explicit-options parser."""

    def test_explicit_oracle(self) -> None:
        parser = HierarchyParser(ParseOptions(), PythonTypeOracle(cache_size=16))

        assert parser.parse(bool).render() == "builtins.bool<builtins.int>"
        assert isinstance(parser.oracle, PythonTypeOracle)

    def test_parse_is_repeatable(self) -> None:
        parser = HierarchyParser(ParseOptions(interface_filter=COMPARABLE_REGEX))

        first = parser.parse(HelloWorld)
        second = parser.parse(HelloWorld)
        assert first == second
        assert first is not second
