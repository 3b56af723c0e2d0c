"""Tests for result assembly."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from eli5docs.constants import ElementKind
from eli5docs.pipeline.assembler import assemble_results
from eli5docs.scanner.schemas import MarkedElement


class TestAssembleResults:
    def test_positional_pairing(
        self, make_element: Callable[..., MarkedElement]
    ) -> None:
        elements = [
            make_element("add", body="return a + b;", custom_prompt="sum"),
            make_element("PI", kind=ElementKind.FIELD, signature="double PI"),
        ]
        results = assemble_results(elements, ["adds", "a circle number"])

        assert [r.element_name for r in results] == ["add", "PI"]
        assert results[0].explanation == "adds"
        assert results[0].body == "return a + b;"
        assert results[0].custom_prompt == "sum"
        assert results[0].signature == "int add(int a, int b)"
        assert results[1].element_kind is ElementKind.FIELD
        assert results[1].explanation == "a circle number"

    def test_duplicate_elements_kept(
        self, make_element: Callable[..., MarkedElement]
    ) -> None:
        elements = [make_element("same"), make_element("same")]
        assert len(assemble_results(elements, ["x", "y"])) == 2

    def test_empty(self) -> None:
        assert assemble_results([], []) == []

    def test_length_mismatch_raises(
        self, make_element: Callable[..., MarkedElement]
    ) -> None:
        with pytest.raises(ValueError, match="1 elements but 2"):
            assemble_results([make_element()], ["a", "b"])
