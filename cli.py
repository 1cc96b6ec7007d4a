import argparse
import time

from core.config import (
    DEFAULT_QUESTION_COUNT,
    QUESTION_API_BASE_URL,
    QUESTION_SOURCE,
    SOURCE_REMOTE,
    SOURCE_STATIC,
)
from core.logging_setup import setup_console_logging
from models import QuizState, ResultsState, SessionConfig, SetupState
from question_source import make_question_source
from scoring import feedback_message
from serialization import format_countdown
from session_controller import SessionController


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a timed study session and quiz")
    parser.add_argument("--minutes", type=int, required=True, help="Study time (1-120)")
    parser.add_argument("--subject", default="", help="Subject, e.g. History")
    parser.add_argument("--content", default="", help="Topic you are going to study")
    parser.add_argument(
        "--count",
        type=int,
        default=DEFAULT_QUESTION_COUNT,
        help="Number of questions (1-50)",
    )
    parser.add_argument(
        "--source",
        choices=[SOURCE_REMOTE, SOURCE_STATIC],
        default=QUESTION_SOURCE if QUESTION_SOURCE in (SOURCE_REMOTE, SOURCE_STATIC) else SOURCE_REMOTE,
    )
    parser.add_argument("--base-url", default=QUESTION_API_BASE_URL)
    parser.add_argument(
        "--skip",
        action="store_true",
        help="Skip the countdown and go straight to the questions",
    )
    return parser.parse_args(argv)


def run_countdown(controller: SessionController, skip: bool = False) -> None:
    """Tick once per second until the questions are ready; Ctrl+C skips."""
    ticket = controller.skip() if skip else None
    try:
        while ticket is None and controller.is_counting():
            state = controller.state
            print(f"\rTime left: {format_countdown(state.remaining_seconds)}", end="", flush=True)
            time.sleep(1)
            ticket = controller.tick()
    except KeyboardInterrupt:
        ticket = controller.skip()
    print()
    if ticket is not None:
        print("Generating questions...")
        controller.run_acquisition(ticket)


def ask_answers(controller: SessionController) -> None:
    state = controller.state
    for index, question in enumerate(state.questions, start=1):
        alternatives = question.sorted_alternatives()
        print(f"\n{index}. {question.statement}")
        for number, alternative in enumerate(alternatives, start=1):
            print(f"   {number}) {alternative.text}")
        while True:
            raw = input(f"Answer (1-{len(alternatives)}): ").strip()
            if raw.isdigit() and 1 <= int(raw) <= len(alternatives):
                controller.record_answer(question.id, alternatives[int(raw) - 1].id)
                break
            print("Invalid choice.")


def main(argv: list[str] | None = None) -> int:
    setup_console_logging()
    args = parse_args(argv)
    source = make_question_source(args.source, args.base_url)
    controller = SessionController(source)

    config = SessionConfig(
        subject=args.subject.strip(),
        content=args.content.strip(),
        question_count=args.count,
        study_minutes=args.minutes,
    )
    errors = controller.validate(config)
    if errors:
        for error in errors:
            print(f"Error: {error}")
        return 2

    controller.start_study(config)
    if config.subject:
        print(f"Time to study! {config.subject} - {config.content}")
    run_countdown(controller, skip=args.skip)

    state = controller.state
    if isinstance(state, SetupState):
        print(f"Error generating questions: {state.error}")
        return 1
    if not isinstance(state, QuizState):
        return 1

    ask_answers(controller)
    controller.submit()
    state = controller.state
    if not isinstance(state, ResultsState):
        return 1

    results = state.results
    print(f"\n{feedback_message(results)}")
    print(f"Correct: {results.correct}")
    print(f"Incorrect: {results.incorrect}")
    controller.restart()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
