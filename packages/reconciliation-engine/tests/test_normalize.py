"""Tests for channel name canonicalization."""

import pytest
from inbox_reconciliation_engine.normalize import names_match, normalize_name

SAMPLES = [
    "Loja-Centro",
    "loja centro",
    "LOJA_CENTRO",
    "  Vendas SP  ",
    "Promoção #1",
    "wa-01@s.whatsapp.net",
    "---",
    "",
    "ÁÉÍ",
    "tab\tseparated\nname",
]


class TestNormalizeName:
    @pytest.mark.parametrize("raw", SAMPLES)
    def test_idempotent(self, raw):
        once = normalize_name(raw)
        assert normalize_name(once) == once

    @pytest.mark.parametrize("raw", SAMPLES)
    def test_output_alphabet(self, raw):
        assert all(ch in "abcdefghijklmnopqrstuvwxyz0123456789" for ch in normalize_name(raw))

    def test_separator_equivalence(self):
        assert normalize_name("Loja-01") == normalize_name("loja 01") == normalize_name("LOJA_01")
        assert normalize_name("Loja-01") == "loja01"

    def test_accents_dropped_not_transliterated(self):
        assert normalize_name("Promoção") == "promoo"

    def test_punctuation_dropped(self):
        assert normalize_name("Vendas (SP)!") == "vendassp"

    @pytest.mark.parametrize("raw", ["", None, "   ", "-_-"])
    def test_empty_inputs(self, raw):
        assert normalize_name(raw) == ""


class TestNamesMatch:
    def test_match_across_separators(self):
        assert names_match("Loja-Centro", "lojacentro")

    def test_different_names(self):
        assert not names_match("Loja Centro", "Loja Norte")

    def test_empty_keys_never_match(self):
        assert not names_match("", "")
        assert not names_match("!!!", "???")
