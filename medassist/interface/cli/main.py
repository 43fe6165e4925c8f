"""Command-line interface: thin wrapper over the composition root."""

import argparse
import asyncio
import sys

from medassist.application.use_cases.chat_session import route_query
from medassist.config.composition import build_answer_use_case, build_chat_session
from medassist.config.logging_setup import configure_logging
from medassist.config.settings import AppSettings
from medassist.domain.errors import ConfigurationError, ValidationError
from medassist.domain.models import GeneratedAnswer
from medassist.domain.services.dosage import DosageRequest, calculate_dosage


def _print_answer(answer: GeneratedAnswer) -> None:
    print("\n" + "=" * 80)
    print("ANSWER:")
    print("=" * 80)
    print(answer.response)
    if not answer.citations:
        return
    print("\n" + "=" * 80)
    print("CITATIONS:")
    print("=" * 80)
    for i, c in enumerate(answer.citations, 1):
        page = f", p. {c.page}" if c.page is not None else ""
        print(f"[{i}] {c.source}{page} (relevance={c.relevance:.3f})")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="medassist", description="Pediatric reference assistant")
    sub = parser.add_subparsers(dest="command", required=True)

    ask = sub.add_parser("ask", help="Answer one question with citations")
    ask.add_argument("question")

    dosage = sub.add_parser("dosage", help="Weight-based dose calculation (no LLM)")
    dosage.add_argument("--drug", required=True)
    dosage.add_argument("--dose-per-kg", type=float, required=True, help="mg per kg")
    dosage.add_argument("--weight", type=float, required=True, help="patient weight in kg")
    dosage.add_argument("--max-dose", type=float, default=None, help="cap in mg")
    dosage.add_argument("--frequency", required=True, help='e.g. "twice daily"')

    sub.add_parser("chat", help="Interactive chat session (empty line or 'exit' quits)")
    return parser


def _run_chat(settings: AppSettings) -> None:
    session = build_chat_session(settings)
    thread = None
    while True:
        try:
            text = input("you> ")
        except EOFError:
            break
        if not text.strip() or text.strip().lower() == "exit":
            break
        thread = asyncio.run(session.send(thread, text))
        if thread is not None and thread.turns:
            last = thread.turns[-1]
            _print_answer(GeneratedAnswer(response=last.content, citations=last.citations))


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = AppSettings()
    configure_logging(settings.log_level)

    if args.command == "dosage":
        req = DosageRequest(
            drug_name=args.drug,
            dose_per_kg=args.dose_per_kg,
            weight_kg=args.weight,
            max_dose=args.max_dose,
            frequency=args.frequency,
        )
        try:
            print(calculate_dosage(req).text)
        except ValidationError as err:
            print(f"[ERROR] {err}")
            return 1
        return 0

    try:
        if args.command == "ask":
            uc = build_answer_use_case(settings)
            _print_answer(asyncio.run(route_query(uc, args.question)))
        else:
            _run_chat(settings)
    except ConfigurationError as err:
        print(f"[CONFIG ERROR] {err}")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
