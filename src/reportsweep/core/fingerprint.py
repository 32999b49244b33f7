"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/fingerprint.py
Builds content fingerprints for reports using xxHash3-128.

The fingerprint covers exactly three fields: process description, file content
and answers. Title, identity, owner, timestamps and the report payload are ignored.
"""

import json
from typing import Any, Dict

import xxhash

from reportsweep.core.interfaces import HashAlgorithm
from reportsweep.core.models import Report


class XXHashAlgorithmImpl(HashAlgorithm):
    """Concrete implementation of HashAlgorithm using xxHash3 (128-bit)."""

    @staticmethod
    def hexdigest(data: bytes) -> str:
        return xxhash.xxh3_128(data).hexdigest()


def _string_keys(value: Any) -> Any:
    """Converts mapping keys to str recursively, as JSON objects would."""
    if isinstance(value, dict):
        return {str(key): _string_keys(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_string_keys(item) for item in value]
    return value


def canonical_content(report: Report, canonical_answers: bool = True) -> str:
    """
    Serializes the equivalence fields of a report to a compact JSON string.

    With canonical_answers=True, mapping keys are sorted (recursively) so the
    result does not depend on the order the answers were populated in.
    With canonical_answers=False, answers keep their insertion order, which
    reproduces the legacy order-sensitive comparison.
    List values keep their order in both modes. Non-string keys are compared
    by their str() form.
    """
    answers: Dict[str, Any] = _string_keys(report.answers or {})
    if canonical_answers:
        answers_text = json.dumps(answers, sort_keys=True, ensure_ascii=False, separators=(",", ":"), default=str)
    else:
        answers_text = json.dumps(answers, ensure_ascii=False, separators=(",", ":"), default=str)

    # Field order is fixed here; only the answers mapping varies by mode
    return json.dumps(
        [report.process_description or "", report.file_content or "", answers_text],
        ensure_ascii=False,
        separators=(",", ":"),
    )


class ContentFingerprinter:
    """
    Derives a deterministic content key from a report.
    Pure: no caching on the report, no side effects.
    """

    def __init__(self, algorithm: HashAlgorithm = None, canonical_answers: bool = True):
        self.algorithm = algorithm or XXHashAlgorithmImpl()
        self.canonical_answers = canonical_answers

    def fingerprint(self, report: Report) -> str:
        content = canonical_content(report, canonical_answers=self.canonical_answers)
        return self.algorithm.hexdigest(content.encode("utf-8"))
