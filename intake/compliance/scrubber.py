"""Redacts patient identifiers from text that leaves the service.

Matching runs on an ICU Latin-ASCII-lowercase transliteration of the text so
that "José Núñez", "JOSE NUNEZ" and "jose nunez" are treated alike. Spans
found on the transliterated text are mapped back to the original
characters before replacement.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass, field
from typing import ClassVar

import icu  # type: ignore[import-untyped]

from intake.compliance.exceptions import ScrubError
from intake.logging.logger import Log
from intake.processor.models import MedicalInfo


@dataclass(frozen=True)
class Redaction:
    kind: str
    placeholder: str


@dataclass
class ScrubResult:
    text: str
    redactions: list[Redaction] = field(default_factory=list)


class ComplianceScrubber:
    """Replaces known identifiers and sensitive number patterns with placeholders.

    Known identifiers come from the extracted ``MedicalInfo``; pattern rules
    catch SSNs, payment cards, email addresses and phone numbers.
    """

    _ICU_TRANSFORM: ClassVar[str] = "Any-Latin; Latin-ASCII; Lower"

    _PATTERN_RULES: ClassVar[list[tuple[str, re.Pattern[str]]]] = [
        ("SSN", re.compile(r"\b\d{3}-\d{2}-\d{4}\b")),
        ("CARD", re.compile(r"\b\d{4}[\s-]?\d{4}[\s-]?\d{4}[\s-]?\d{4}\b")),
        ("EMAIL", re.compile(r"[\w.\-+]+@[\w.\-]+\.\w{2,}")),
        ("PHONE", re.compile(r"(?<!\w)\+?\d[\d\s\-().]{5,18}\d(?!\w)")),
    ]

    def __init__(self) -> None:
        self._transliterator: icu.Transliterator = icu.Transliterator.createInstance(
            self._ICU_TRANSFORM
        )

    def scrub(self, text: str, medical_info: MedicalInfo | None = None) -> ScrubResult:
        """Return *text* with identifiers replaced by ``[KIND]`` placeholders.

        Raises:
            ScrubError: if transliteration or matching fails.
        """
        if not text:
            return ScrubResult(text="")
        try:
            return self._scrub(text, medical_info)
        except Exception as exc:
            raise ScrubError(f"Scrubbing failed: {exc}") from exc

    def _scrub(self, text: str, medical_info: MedicalInfo | None) -> ScrubResult:
        normalized = unicodedata.normalize("NFC", text)
        folded, folded_to_orig = self._fold(normalized)

        spans: list[tuple[str, int, int]] = []
        for kind, value in self._known_identifiers(medical_info):
            spans.extend(
                (kind, start, end) for start, end in _find_whole_words(folded, value)
            )
        for kind, pattern in self._PATTERN_RULES:
            spans.extend((kind, m.start(), m.end()) for m in pattern.finditer(folded))

        if not spans:
            return ScrubResult(text=normalized)

        merged = _merge(
            [
                (kind, folded_to_orig[start], folded_to_orig[end - 1] + 1)
                for kind, start, end in spans
            ]
        )

        redactions: list[Redaction] = []
        scrubbed = normalized
        for kind, start, end in reversed(merged):
            placeholder = f"[{kind}]"
            scrubbed = scrubbed[:start] + placeholder + scrubbed[end:]
            redactions.append(Redaction(kind=kind, placeholder=placeholder))
        redactions.reverse()

        Log.info(f"Scrubbed {len(redactions)} identifiers")
        return ScrubResult(text=scrubbed, redactions=redactions)

    def _fold(self, text: str) -> tuple[str, list[int]]:
        """Transliterate per character, recording which original index produced each output char."""
        parts: list[str] = []
        folded_to_orig: list[int] = []
        for index, ch in enumerate(text):
            folded = self._transliterator.transliterate(ch)
            parts.append(folded)
            folded_to_orig.extend([index] * len(folded))
        return "".join(parts), folded_to_orig

    def _known_identifiers(self, medical_info: MedicalInfo | None) -> list[tuple[str, str]]:
        if medical_info is None:
            return []
        identifiers: list[tuple[str, str]] = []
        if medical_info.patient_name:
            folded_name, _ = self._fold(medical_info.patient_name)
            identifiers.append(("PATIENT_NAME", folded_name.strip()))
            # Individual name parts also leak identity ("Mr. Smith").
            identifiers.extend(
                ("PATIENT_NAME", token)
                for token in folded_name.split()
                if len(token) > 2
            )
        if medical_info.patient_id:
            identifiers.append(("PATIENT_ID", self._fold(medical_info.patient_id)[0].strip()))
        if medical_info.date_of_birth:
            identifiers.append(("DOB", self._fold(medical_info.date_of_birth)[0].strip()))
        return [(kind, value) for kind, value in identifiers if value]


def _find_whole_words(haystack: str, needle: str) -> list[tuple[int, int]]:
    matches: list[tuple[int, int]] = []
    start = 0
    while True:
        index = haystack.find(needle, start)
        if index == -1:
            return matches
        end = index + len(needle)
        before_ok = index == 0 or not haystack[index - 1].isalnum()
        after_ok = end == len(haystack) or not haystack[end].isalnum()
        if before_ok and after_ok:
            matches.append((index, end))
        start = index + 1


def _merge(spans: list[tuple[str, int, int]]) -> list[tuple[str, int, int]]:
    """Sort spans and collapse overlaps, keeping the first-seen kind."""
    spans.sort(key=lambda span: (span[1], -span[2]))
    merged: list[tuple[str, int, int]] = []
    for kind, start, end in spans:
        if merged and start < merged[-1][2]:
            prev_kind, prev_start, prev_end = merged[-1]
            merged[-1] = (prev_kind, prev_start, max(prev_end, end))
        else:
            merged.append((kind, start, end))
    return merged
