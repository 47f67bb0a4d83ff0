"""Unit tests for case-insensitive term keys."""

import pytest

from corpus_search.search.terms import TermKey, ascii_fold


class TestEquality:
    """Equality and hashing ignore ASCII case only."""

    @pytest.mark.parametrize("text", ["this", "Rust", "snake_case", "v1.2", "", "MiXeD123"])
    def test_case_variants_are_equal(self, text):
        key = TermKey(text)
        assert key == TermKey(text.upper())
        assert key == TermKey(text.lower())
        assert hash(key) == hash(TermKey(text.upper())) == hash(TermKey(text.lower()))

    def test_non_ascii_is_not_folded(self):
        assert TermKey("É") != TermKey("é")
        assert TermKey("straße") != TermKey("STRASSE")
        assert ascii_fold("ÉCOLE") == "École"

    def test_different_terms_are_not_equal(self):
        assert TermKey("this1") != TermKey("this")
        assert TermKey("ab") != TermKey("ba")

    def test_comparison_with_plain_string_is_not_supported(self):
        assert TermKey("a") != "a"
        with pytest.raises(TypeError):
            TermKey("a") < "b"

    def test_keys_work_as_dictionary_keys(self):
        table = {TermKey("Apple"): 1}
        table[TermKey("APPLE")] += 1
        assert table == {TermKey("apple"): 2}
        assert next(iter(table)).text == "Apple"


class TestOrdering:
    """Ordering is total and consistent with equality."""

    def test_equal_keys_compare_equal(self):
        a, b = TermKey("this"), TermKey("THIS")
        assert a <= b
        assert b <= a
        assert not a < b
        assert not b < a

    def test_prefix_sorts_first(self):
        assert TermKey("this") < TermKey("this1")
        assert TermKey("this1") > TermKey("THIS")

    def test_first_differing_character_decides(self):
        assert TermKey("apple") < TermKey("Banana")
        assert TermKey("BANANA") > TermKey("apple")
        assert not TermKey("banana") < TermKey("apple")

    def test_sorted_is_consistent_with_equality(self):
        words = ["pear", "Apple", "apple_pie", "APPLE", "banana", "b", "Zebra", "_x", "1.0"]
        keys = [TermKey(word) for word in words]
        ordered = sorted(keys)
        for left, right in zip(ordered, ordered[1:]):
            assert left < right or left == right
        for left in keys:
            for right in keys:
                outcomes = [left < right, left == right, left > right]
                assert outcomes.count(True) == 1


class TestViews:
    """Transient views over a larger buffer."""

    def test_view_matches_owned_key(self):
        buffer = "hello WORLD"
        view = TermKey.view(buffer, 6, 11)
        assert not view.is_owned
        assert view.text == "WORLD"
        assert view == TermKey("world")
        assert hash(view) == hash(TermKey("world"))

    def test_to_owned_detaches_from_buffer(self):
        view = TermKey.view("hello WORLD", 0, 5)
        owned = view.to_owned()
        assert owned.is_owned
        assert owned.text == "hello"
        assert owned == view
        assert owned.to_owned() is owned

    def test_invalid_span_rejected(self):
        with pytest.raises(ValueError):
            TermKey.view("abc", 2, 5)

    def test_view_lookup_in_owned_table(self):
        table = {TermKey("World"): 3}
        assert table[TermKey.view("hello world", 6, 11)] == 3

    def test_empty_key(self):
        assert TermKey("") == TermKey.view("abc", 1, 1)
        assert len(TermKey("")) == 0
