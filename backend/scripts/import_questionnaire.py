"""Import a questionnaire CSV from the command line.

Usage:
    python scripts/import_questionnaire.py <csv_path> --admin-id 1 [--name "Name"] [--dry-run]
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

from app.db.session import SessionLocal
from app.models.admin_user import AdminUser
from app.services.questionnaires.csv_importer import (
    QuestionnaireCsvImporter,
    QuestionnaireImportError,
)
from app.services.questionnaires.graph import QuestionnaireMetadata


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import a questionnaire from a CSV file")
    parser.add_argument("csv_path", type=Path, help="Path to the questionnaire CSV")
    parser.add_argument("--admin-id", dest="admin_id", type=int, help="Admin user recorded as the creator")
    parser.add_argument("--name", default=None, help="Questionnaire name (defaults to the file name)")
    parser.add_argument("--description", default=None)
    parser.add_argument("--guidelines", default=None)
    parser.add_argument("--company-id", dest="company_id", default=None)
    parser.add_argument("--dry-run", action="store_true", help="Validate and summarise without writing")
    return parser.parse_args(argv)


def _print_import_error(exc: QuestionnaireImportError) -> None:
    print(f"[ERROR] {exc.detail or exc.error_code.message}", file=sys.stderr)
    for message in exc.errors:
        print(f"  - {message}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        content = args.csv_path.read_bytes()
    except OSError as exc:
        print(f"[ERROR] Cannot read {args.csv_path}: {exc}", file=sys.stderr)
        return 1

    if args.dry_run:
        try:
            result = QuestionnaireCsvImporter().prepare(content)
        except QuestionnaireImportError as exc:
            _print_import_error(exc)
            return 1
        for warning in result.warnings:
            print(f"[WARN] {warning}")
        if result.errors or result.graph is None:
            print("[ERROR] CSV validation failed", file=sys.stderr)
            for message in result.errors:
                print(f"  - {message}", file=sys.stderr)
            return 1
        print(json.dumps(result.graph.summary(), indent=2))
        return 0

    if args.admin_id is None:
        print("[ERROR] --admin-id is required unless --dry-run is given", file=sys.stderr)
        return 1

    metadata = QuestionnaireMetadata(
        name=(args.name or args.csv_path.stem).strip(),
        description=args.description,
        guidelines=args.guidelines,
        company_id=args.company_id,
    )

    with SessionLocal() as session:
        if session.get(AdminUser, args.admin_id) is None:
            print(f"[ERROR] admin user id={args.admin_id} does not exist", file=sys.stderr)
            return 1

        importer = QuestionnaireCsvImporter(session)
        try:
            summary = importer.import_questionnaire(
                metadata=metadata,
                admin_id=args.admin_id,
                content=content,
            )
            session.commit()
        except QuestionnaireImportError as exc:
            session.rollback()
            _print_import_error(exc)
            return 1
        except SQLAlchemyError as exc:
            session.rollback()
            print(f"[ERROR] Failed to save questionnaire: {exc}", file=sys.stderr)
            return 1

    for warning in summary.warnings:
        print(f"[WARN] {warning}")
    print(
        f"[OK] Imported questionnaire '{summary.name}' (id={summary.questionnaire_id}): "
        f"{summary.sections_imported} sections, {summary.steps_imported} steps, "
        f"{summary.questions_imported} questions, {summary.rating_scales_imported} rating scales"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
