"""
Tests for Huffman tree construction, code generation and round trips.
"""

import pytest

from algotrace.algorithms import huffman
from algotrace.errors import PreconditionError
from algotrace.traces import StepKind
from algotrace.validation import validate


def build_tree(table):
    return huffman.tree_of(huffman.build(table))


# =============================================================================
# Construction Tests
# =============================================================================

class TestHuffmanBuild:
    def test_frequencies_in_first_appearance_order(self):
        table = huffman.frequencies_from_text("abracadabra")
        assert table == {"a": 5, "b": 2, "r": 2, "c": 1, "d": 1}
        assert list(table) == ["a", "b", "r", "c", "d"]

    def test_step_sequence(self, clrs_frequencies):
        """init, then pop/merge/push per merge, then complete."""
        trace = huffman.build(clrs_frequencies)
        assert trace[0].kind == StepKind.INIT
        assert trace.kinds()[1:-1] == [StepKind.POP, StepKind.MERGE, StepKind.PUSH] * 5
        assert trace.last_step.kind == StepKind.COMPLETE
        assert trace[1].description == "Pop two minimum: 'a' (freq: 5) and 'b' (freq: 9)"
        assert trace[2].description == "Merge into new node with frequency 14"

    def test_queue_snapshots_are_preserved(self, clrs_frequencies):
        """Earlier queue states stay intact after later merges."""
        trace = huffman.build(clrs_frequencies)
        assert [f for _, f in trace[0].snapshot.queue_frequencies()] == [5, 9, 12, 13, 16, 45]
        assert trace.final.tree.frequency == 100
        assert trace.final.queue_frequencies() == (("internal", 100),)

    def test_empty_table(self):
        with pytest.raises(PreconditionError):
            huffman.build({})

    def test_non_positive_frequency(self):
        with pytest.raises(PreconditionError):
            huffman.build({"a": 0})

    def test_tree_shape(self, clrs_frequencies):
        assert validate(build_tree(clrs_frequencies)) == []


# =============================================================================
# Code Tests
# =============================================================================

class TestHuffmanCodes:
    def test_standard_codes(self, clrs_frequencies):
        codes = huffman.generate_codes(build_tree(clrs_frequencies))
        assert codes == {"f": "0", "c": "100", "d": "101", "a": "1100", "b": "1101", "e": "111"}

    def test_most_frequent_shortest(self, clrs_frequencies):
        codes = huffman.generate_codes(build_tree(clrs_frequencies))
        lengths = {symbol: len(code) for symbol, code in codes.items()}
        assert lengths["f"] == 1
        assert lengths["a"] == max(lengths.values())

    def test_canonical_codes(self, clrs_frequencies):
        codes = huffman.generate_codes(build_tree(clrs_frequencies))
        canonical = huffman.generate_canonical_codes(codes)
        assert canonical == {"f": "0", "c": "100", "d": "101", "e": "110", "a": "1110", "b": "1111"}

    def test_canonical_keeps_lengths(self, clrs_frequencies):
        codes = huffman.generate_codes(build_tree(clrs_frequencies))
        canonical = huffman.generate_canonical_codes(codes)
        assert {s: len(c) for s, c in canonical.items()} == {s: len(c) for s, c in codes.items()}

    @pytest.mark.parametrize("text", ["abracadabra", "mississippi river", "aaaabbbccd"])
    def test_prefix_free_and_kraft(self, text):
        """Both tables are prefix-free and sum to exactly 1 under Kraft."""
        codes = huffman.generate_codes(build_tree(huffman.frequencies_from_text(text)))
        canonical = huffman.generate_canonical_codes(codes)
        for table in (codes, canonical):
            assert huffman.is_prefix_free(table)
            assert huffman.kraft_sum(table) == 1

    def test_single_symbol(self):
        """A single leaf gets the code '0' and decodes one symbol per '0'."""
        trace = huffman.build({"x": 3})
        assert trace.kinds() == [StepKind.INIT, StepKind.COMPLETE]
        tree = huffman.tree_of(trace)
        assert huffman.generate_codes(tree) == {"x": "0"}
        assert huffman.decode("000", tree) == "xxx"

    def test_is_prefix_free_detects_prefix(self):
        assert not huffman.is_prefix_free({"a": "0", "b": "01"})


# =============================================================================
# Encode / Decode Tests
# =============================================================================

class TestHuffmanRoundTrip:
    @pytest.mark.parametrize("text", ["abracadabra", "hello world", "zzzzzy"])
    def test_standard_round_trip(self, text):
        tree = build_tree(huffman.frequencies_from_text(text))
        codes = huffman.generate_codes(tree)
        assert huffman.decode(huffman.encode(text, codes).bits, tree) == text

    @pytest.mark.parametrize("text", ["abracadabra", "hello world", "zzzzzy"])
    def test_canonical_round_trip(self, text):
        """Canonical codes decode through a tree rebuilt from the table."""
        tree = build_tree(huffman.frequencies_from_text(text))
        canonical = huffman.generate_canonical_codes(huffman.generate_codes(tree))
        decoder = huffman.tree_from_codes(canonical)
        assert huffman.decode(huffman.encode(text, canonical).bits, decoder) == text

    def test_unmapped_characters(self, clrs_frequencies):
        codes = huffman.generate_codes(build_tree(clrs_frequencies))
        result = huffman.encode("fz", codes)
        assert result.bits == "0?"
        assert result.unmapped == ["z"]
        assert not result.ok

    def test_decode_ignores_noise_and_trailing_bits(self, clrs_frequencies):
        tree = build_tree(clrs_frequencies)
        assert huffman.decode("0 0x", tree) == "ff"
        assert huffman.decode("011", tree) == "f"

    def test_compression_stats(self):
        stats = huffman.compression_stats("ab", "0101")
        assert stats.original_bits == 16
        assert stats.encoded_bits == 4
        assert stats.ratio == pytest.approx(0.75)
