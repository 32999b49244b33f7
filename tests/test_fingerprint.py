"""
Unit tests for content fingerprints.
Equality of fingerprints is the only content comparison the scanner makes.
"""
from datetime import timedelta

from reportsweep.core.fingerprint import ContentFingerprinter, XXHashAlgorithmImpl, canonical_content


class TestContentFingerprinter:
    """Fingerprints depend on content fields only."""

    def test_identical_content_gives_identical_fingerprint(self, make_report):
        fp = ContentFingerprinter()
        assert fp.fingerprint(make_report("a")) == fp.fingerprint(make_report("b"))

    def test_answer_insertion_order_does_not_matter(self, make_report):
        """
        Answers populated in different orders MUST produce the same key.
        Naive serialization would keep insertion order and miss the duplicate.
        """
        first = make_report("a", answers={"q1": "yes", "q2": "no", "q3": ["x", "y"]})
        second = make_report("b", answers={"q3": ["x", "y"], "q2": "no", "q1": "yes"})

        fp = ContentFingerprinter()
        assert fp.fingerprint(first) == fp.fingerprint(second)

    def test_legacy_mode_is_order_sensitive(self, make_report):
        """With canonical_answers=False the key follows insertion order."""
        first = make_report("a", answers={"q1": "yes", "q2": "no"})
        second = make_report("b", answers={"q2": "no", "q1": "yes"})

        fp = ContentFingerprinter(canonical_answers=False)
        assert fp.fingerprint(first) != fp.fingerprint(second)

    def test_list_answer_order_is_content(self, make_report):
        """Order inside a multi-choice answer is part of the content."""
        first = make_report("a", answers={"q1": ["x", "y"]})
        second = make_report("b", answers={"q1": ["y", "x"]})

        fp = ContentFingerprinter()
        assert fp.fingerprint(first) != fp.fingerprint(second)

    def test_metadata_is_ignored(self, make_report):
        """Title, id, owner, timestamp and payload do not affect the key."""
        first = make_report("a", minutes=0, title="First", owner="alice")
        second = make_report("b", minutes=500, title="Second", owner="bob")
        second.report_data = {"score": 42}

        fp = ContentFingerprinter()
        assert fp.fingerprint(first) == fp.fingerprint(second)

    def test_each_content_field_matters(self, make_report):
        fp = ContentFingerprinter()
        base = fp.fingerprint(make_report("a"))

        assert fp.fingerprint(make_report("b", description="Other")) != base
        assert fp.fingerprint(make_report("c", file_content="attached text")) != base
        assert fp.fingerprint(make_report("d", answers={"q1": "no"})) != base

    def test_missing_optional_fields_equal_empty(self, make_report):
        """None description/file content/answers compare equal to empty values."""
        empty = make_report("a", description="", file_content="", answers={})
        missing = make_report("b", description=None, file_content=None)
        missing.answers = None

        fp = ContentFingerprinter()
        assert fp.fingerprint(empty) == fp.fingerprint(missing)

    def test_field_boundaries_are_unambiguous(self, make_report):
        """Moving text between description and file content changes the key."""
        fp = ContentFingerprinter()
        first = make_report("a", description="ab", file_content="c")
        second = make_report("b", description="a", file_content="bc")
        assert fp.fingerprint(first) != fp.fingerprint(second)

    def test_fingerprint_is_xxh3_128_hex(self, make_report):
        key = ContentFingerprinter().fingerprint(make_report("a"))
        assert len(key) == 32
        int(key, 16)  # valid hex

    def test_custom_algorithm_is_used(self, make_report):
        class ConstantAlgorithm:
            @staticmethod
            def hexdigest(data: bytes) -> str:
                return "constant"

        fp = ContentFingerprinter(algorithm=ConstantAlgorithm())
        assert fp.fingerprint(make_report("a")) == "constant"


class TestCanonicalContent:

    def test_nested_mappings_are_sorted(self, make_report):
        first = make_report("a", answers={"q1": {"b": 1, "a": 2}})
        second = make_report("b", answers={"q1": {"a": 2, "b": 1}})
        assert canonical_content(first) == canonical_content(second)

    def test_mixed_key_types_do_not_raise(self, make_report):
        report = make_report("a", answers={1: "a", "q": "b"})

        assert ContentFingerprinter().fingerprint(report)
        assert ContentFingerprinter(canonical_answers=False).fingerprint(report)

    def test_int_keys_match_their_string_form(self, make_report):
        first = make_report("a", answers={1: "a", "q": "b"})
        second = make_report("b", answers={"q": "b", "1": "a"})
        assert canonical_content(first) == canonical_content(second)

    def test_unicode_is_preserved(self, make_report):
        report = make_report("a", description="Café onboarding")
        assert "Café" in canonical_content(report)

    def test_xxhash_algorithm_is_deterministic(self):
        assert XXHashAlgorithmImpl.hexdigest(b"abc") == XXHashAlgorithmImpl.hexdigest(b"abc")
        assert XXHashAlgorithmImpl.hexdigest(b"abc") != XXHashAlgorithmImpl.hexdigest(b"abd")
