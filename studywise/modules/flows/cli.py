from __future__ import annotations

import argparse
import base64
import json
import sys
from pathlib import Path

from studywise.core.errors import StudyWiseError
from studywise.modules.flows.main import StudyAssistant


def _load_text(value: str | None, path: str | None, *, name: str) -> str:
    if value and path:
        raise SystemExit(f"Provide either --{name} or --{name}-file, not both")
    if path:
        return Path(path).read_text(encoding="utf-8")
    if value:
        return value
    raise SystemExit(f"--{name} or --{name}-file is required")


def _load_json(raw: str, *, name: str):
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SystemExit(f"--{name} must be valid JSON: {exc}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="studywise", description="Study assistant flows CLI"
    )
    parser.add_argument(
        "--timeout", type=float, default=None, help="Per-call model timeout (seconds)"
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("schedule", help="Generate a study schedule up to an exam")
    s.add_argument("--subject", "-s", action="append", required=True, dest="subjects")
    s.add_argument("--exam-date", required=True, help="YYYY-MM-DD")
    s.add_argument("--hours", type=float, required=True, help="Free hours per day")

    e = sub.add_parser("explain", help="Explain a concept")
    e.add_argument("concept")

    w = sub.add_parser("weaknesses", help="Analyze weak areas from quiz data")
    w.add_argument(
        "--quiz-results",
        required=True,
        help='JSON array, e.g. \'[{"topic": "Algebra", "isCorrect": false}]\'',
    )
    w.add_argument(
        "--time-spent", required=True, help='JSON object, e.g. \'{"Math": 120}\''
    )
    w.add_argument("--mistakes", default="", help="Observed mistake patterns")

    n = sub.add_parser("notes", help="Summarize notes into flashcards and a quiz")
    n.add_argument("--notes", "-n", help="Notes text")
    n.add_argument("--notes-file", help="Path to a file containing the notes")
    n.add_argument("--context", help="Subject area of the notes")

    m = sub.add_parser("motivate", help="Generate a motivational message")
    m.add_argument("--subject", "-s", action="append", default=[], dest="subjects")
    m.add_argument("--streak", type=int, default=0)

    sp = sub.add_parser("speak", help="Convert text to speech")
    sp.add_argument("--text", "-t", help="Text to read")
    sp.add_argument("--text-file", help="Path to a file containing the text")
    sp.add_argument("--voice", default="Algenib", help="Algenib | Achernar | Cygnus")
    sp.add_argument("--out", help="Write the WAV file here instead of printing JSON")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    svc = StudyAssistant(timeout=args.timeout)

    if args.cmd == "schedule":
        flow, data = "study_schedule", {
            "subjects": args.subjects,
            "examDate": args.exam_date,
            "dailyFreeTime": args.hours,
        }
    elif args.cmd == "explain":
        flow, data = "explain_concept", {"concept": args.concept}
    elif args.cmd == "weaknesses":
        flow, data = "analyze_weaknesses", {
            "quizResults": _load_json(args.quiz_results, name="quiz-results"),
            "timeSpentPerSubject": _load_json(args.time_spent, name="time-spent"),
            "mistakePatterns": args.mistakes,
        }
    elif args.cmd == "notes":
        flow, data = "process_notes", {
            "notesContent": _load_text(args.notes, args.notes_file, name="notes"),
            "context": args.context,
        }
    elif args.cmd == "motivate":
        flow, data = "generate_motivation", {
            "subjects": args.subjects,
            "streak": args.streak,
        }
    elif args.cmd == "speak":
        flow, data = "text_to_speech", {
            "text": _load_text(args.text, args.text_file, name="text"),
            "voice": args.voice,
        }
    else:
        parser.print_help()
        return 2

    try:
        result = svc.run_sync(flow, data)
    except StudyWiseError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.cmd == "speak" and args.out:
        payload = result.audio_data_uri.split(",", 1)[1]
        Path(args.out).write_bytes(base64.b64decode(payload))
        print(args.out)
        return 0

    print(json.dumps(result.to_wire(), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
