"""Sentence and paragraph segmentation with lossless reassembly."""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from detox_agent.types import Segment

_SENTENCE_END = re.compile(r"[.!?。！？…]+[\"'”’»)\]]*(?=\s)")
_PARAGRAPH_BREAK = re.compile(r"\r?\n[ \t]*\r?\n")


@dataclass(frozen=True, slots=True)
class SegmentedDocument:
    """Ordered segments of one document plus the whitespace after the last one.

    Iterating is restartable: the segments are stored eagerly, so every
    pass yields the same sequence.
    """

    segments: tuple[Segment, ...]
    trailing_separator: str = ""

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def reassemble(self, replacements: Sequence[str] | None = None) -> str:
        """Concatenate separators and segment texts in index order.

        Args:
            replacements: Text to emit for each segment, aligned by index.
                `None` emits the original segment texts.
        """

        if replacements is None:
            replacements = [segment.text for segment in self.segments]
        if len(replacements) != len(self.segments):
            raise ValueError("replacements must align with segments")

        parts: list[str] = []
        for segment, replacement in zip(self.segments, replacements, strict=True):
            parts.append(segment.leading_separator)
            parts.append(replacement)
        parts.append(self.trailing_separator)
        return "".join(parts)


class Segmenter:
    """Splits a document into sentence-level segments.

    A boundary is placed after a run of sentence-ending punctuation (with any
    closing quotes or brackets) that is followed by whitespace, and at the
    start of every blank-line paragraph break. Whitespace on either side of a
    segment is moved into separators, so segment texts never start or end
    with whitespace and the original document is always recoverable from
    `SegmentedDocument.reassemble()`.
    """

    def segment(self, text: str) -> SegmentedDocument:
        segments: list[Segment] = []
        pending = ""

        for piece in self._split_pieces(text):
            body = piece.strip()
            if not body:
                pending += piece
                continue

            lead_length = len(piece) - len(piece.lstrip())
            body_end = len(piece.rstrip())
            segments.append(
                Segment(
                    index=len(segments),
                    text=piece[lead_length:body_end],
                    leading_separator=pending + piece[:lead_length],
                )
            )
            pending = piece[body_end:]

        return SegmentedDocument(segments=tuple(segments), trailing_separator=pending)

    @staticmethod
    def _split_pieces(text: str) -> list[str]:
        cuts = {match.end() for match in _SENTENCE_END.finditer(text)}
        cuts |= {match.start() for match in _PARAGRAPH_BREAK.finditer(text)}

        pieces: list[str] = []
        start = 0
        for cut in sorted(cuts):
            if cut > start:
                pieces.append(text[start:cut])
                start = cut
        pieces.append(text[start:])
        return pieces
