"""Tests for name sorting and legend letters."""

from __future__ import annotations

from cutlistedit.core.utils import base_sort_key, index_to_letter


def test_base_sort_ignores_case() -> None:
    names = ["shelf", "Back", "door", "Apron"]
    assert sorted(names, key=base_sort_key) == ["Apron", "Back", "door", "shelf"]


def test_base_sort_ignores_accents() -> None:
    names = ["Zocle", "étagère", "Façade"]
    assert sorted(names, key=base_sort_key) == ["étagère", "Façade", "Zocle"]


def test_base_sort_ties_are_deterministic() -> None:
    assert sorted(["door", "Door"], key=base_sort_key) == sorted(
        ["Door", "door"], key=base_sort_key
    )


def test_base_sort_empty_list() -> None:
    names: list[str] = []
    assert sorted(names, key=base_sort_key) == []


def test_index_to_letter() -> None:
    assert index_to_letter(0) == "A"
    assert index_to_letter(25) == "Z"
    assert index_to_letter(26) == "AA"
    assert index_to_letter(51) == "AZ"
    assert index_to_letter(52) == "BA"
