#!/usr/bin/env python3
"""
Tests for struct field extraction.
"""

from conftest import make_named
from core.fields import extract_fields, struct_of
from go_types import INVALID, Basic, Field, Pointer, Struct

INT = Basic("int")


def test_fields_keep_declaration_order():
    s = Struct((Field("Zeta", INT), Field("alpha", INT), Field("Mid", INT)))
    assert extract_fields(s) == ["Zeta", "alpha", "Mid"]


def test_unexported_and_embedded_fields_are_included():
    reader = make_named("Reader", INT)
    s = Struct((Field("Reader", Pointer(reader), embedded=True), Field("count", INT)))
    assert extract_fields(s) == ["Reader", "count"]


def test_blank_fields_are_skipped():
    s = Struct((Field("_", INT), Field("A", INT), Field("_", Basic("string"))))
    assert extract_fields(s) == ["A"]


def test_empty_struct_has_no_fields():
    assert extract_fields(Struct()) == []


class TestStructOf:
    def test_named_struct(self):
        s = Struct((Field("A", INT),))
        assert struct_of(make_named("T", s)) is s

    def test_struct_through_alias_chain(self):
        s = Struct((Field("A", INT),))
        inner = make_named("Inner", s)
        assert struct_of(make_named("Outer", inner)) is s

    def test_non_struct_returns_none(self):
        assert struct_of(make_named("ID", INT)) is None
        assert struct_of(make_named("Ref", Pointer(INT))) is None

    def test_invalid_returns_none(self):
        assert struct_of(make_named("Broken", INVALID)) is None
