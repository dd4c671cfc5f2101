from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from typing import Sequence

from app.services.questionnaires.import_rows import RATING_SLOT_COUNT, REQUIRED_HEADERS

_FIVE_POINT_SCALE: tuple[tuple[str, int], ...] = (
    ("Outstanding performance, exceeds expectations", 5),
    ("Good performance, meets expectations", 4),
    ("Adequate performance, meets basic requirements", 3),
    ("Below average performance, needs improvement", 2),
    ("Unacceptable performance, immediate action required", 1),
)

_SAMPLE_QUESTIONS: tuple[tuple[str, int, str, int, str, str, str, int], ...] = (
    (
        "Leadership and Management",
        1,
        "Strategic Planning",
        1,
        "Vision and Mission",
        "How effectively does the organization communicate its vision and mission?",
        "Evaluate the clarity and communication of organizational direction",
        1,
    ),
    (
        "Leadership and Management",
        1,
        "Strategic Planning",
        1,
        "Goal Setting",
        "How well does the organization set and track strategic goals?",
        "Assess the goal-setting process and monitoring mechanisms",
        2,
    ),
    (
        "Operations and Processes",
        2,
        "Process Management",
        1,
        "Standard Operating Procedures",
        "How well are standard operating procedures documented and followed?",
        "Evaluate the documentation and adherence to SOPs",
        1,
    ),
)


@dataclass(frozen=True)
class TemplateResult:
    filename: str
    content: bytes


class TemplateExporter:
    """Build the downloadable example CSV for questionnaire imports."""

    FILE_MEDIA_TYPE = "text/csv"
    FILENAME = "questionnaire_import_template.csv"

    def build(self) -> TemplateResult:
        stream = io.StringIO(newline="")
        writer = csv.writer(stream, lineterminator="\n")
        writer.writerow(REQUIRED_HEADERS)
        for question in _SAMPLE_QUESTIONS:
            writer.writerow(self._row(question, _FIVE_POINT_SCALE))
        return TemplateResult(filename=self.FILENAME, content=stream.getvalue().encode("utf-8"))

    def _row(self, question: Sequence[object], ratings: Sequence[tuple[str, int]]) -> list[str]:
        cells = [str(value) for value in question]
        for index in range(RATING_SLOT_COUNT):
            if index < len(ratings):
                description, value = ratings[index]
                cells.extend([description, str(value)])
            else:
                cells.extend(["", ""])
        return cells


__all__ = ["TemplateExporter", "TemplateResult"]
