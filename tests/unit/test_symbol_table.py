#!/usr/bin/env python3
"""
Tests for the flat-scope symbol table.
"""

import pytest

from pseudotrace.runtime.environment import SymbolTable
from pseudotrace.runtime.values import PrimitiveValue, SubstringResult
from pseudotrace.shared.errors import UndeclaredVariable
from pseudotrace.shared.types import ValueType


class TestSymbolTable:
    """declare/get semantics"""

    def test_declare_then_get(self):
        table = SymbolTable()
        table.declare("x", ValueType.NUMBER, PrimitiveValue(ValueType.NUMBER, 10))
        entry = table.get("x")
        assert entry.name == "x"
        assert entry.type is ValueType.NUMBER
        assert entry.value == PrimitiveValue(ValueType.NUMBER, 10)

    def test_redeclare_overwrites_in_place(self):
        table = SymbolTable()
        first = table.declare("x", ValueType.NUMBER, PrimitiveValue(ValueType.NUMBER, 1))
        second = table.declare("x", ValueType.STRING, PrimitiveValue(ValueType.STRING, "a"))
        assert first is second
        assert table.get("x").type is ValueType.STRING
        assert len(table) == 1

    def test_get_missing_raises(self):
        table = SymbolTable()
        with pytest.raises(UndeclaredVariable) as exc_info:
            table.get("y")
        assert exc_info.value.name == "y"
        assert str(exc_info.value) == "Variable 'y' is not declared."

    def test_membership_and_order(self):
        table = SymbolTable()
        table.declare("b", ValueType.BOOLEAN, PrimitiveValue(ValueType.BOOLEAN, True))
        table.declare("a", ValueType.NUMBER, PrimitiveValue(ValueType.NUMBER, 0))
        assert "a" in table
        assert table.has("b")
        assert not table.has("c")
        assert table.names() == ["b", "a"]
        assert [entry.name for entry in table] == ["b", "a"]

    def test_substring_value_is_string_typed(self):
        table = SymbolTable()
        value = SubstringResult(source="s", start=0, end=2, result="he")
        table.declare("t", value.type, value)
        assert table.get("t").type is ValueType.STRING
        assert table.get("t").value is value
