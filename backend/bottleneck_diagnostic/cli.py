"""
Terminal client for the bottleneck diagnostic

Commands:
    serve   Run the API server
    quiz    Answer the diagnostic in the terminal
    chat    Talk to the AI assistant about a result
"""

import argparse
import asyncio
import sys
from typing import Optional

from .config import settings
from .core.models import Category
from .core.scoring import describe_result, parse_category
from .core.session import DiagnosticSession, InMemoryStore, JsonFileStore
from .assistant.chat import ChatSession, HttpAssistantTransport


def _print_result(result: Category) -> None:
    print()
    print("Diagnostic Complete")
    print("=" * 60)
    print(result.value)
    print()
    print(describe_result(result))
    print()
    print(f"Book a Strategy Call: {settings.BOOKING_URL}")


def run_quiz(state_file: Optional[str] = None) -> Category:
    store = JsonFileStore(state_file) if state_file else InMemoryStore()
    session = DiagnosticSession(store=store)

    if session.is_completed:
        print(f"Resuming your completed {settings.DIAGNOSTIC_TITLE}.")
        _print_result(session.result)
        return session.result

    print(settings.DIAGNOSTIC_TITLE)
    print("Take this 1-minute diagnostic to uncover your primary operational bottleneck.")
    session.start()

    question = session.current_question
    while question is not None:
        number, total, percent = session.progress()
        print()
        print(f"Question {number} of {total} ({percent}%)")
        print(question.text)
        for index, option in enumerate(question.options, start=1):
            print(f"  {index}. {option.text}")

        choice = input("Your answer: ").strip()
        if not choice.isdigit() or not 1 <= int(choice) <= len(question.options):
            print(f"Please enter a number between 1 and {len(question.options)}.")
            continue

        question = session.answer(question.options[int(choice) - 1].id)

    _print_result(session.result)
    return session.result


async def run_chat(result: Category, url: str) -> None:
    chat = ChatSession(result, HttpAssistantTransport(base_url=url))
    print(f"{settings.BRAND_NAME} Assistant (empty line or Ctrl-D to leave)")
    print()
    print(chat.messages[0].text)

    while True:
        try:
            text = input("\n> ")
        except EOFError:
            break
        if not text.strip():
            break
        turn = await chat.send(text)
        if turn is not None:
            print()
            print(turn.text)


def serve() -> None:
    import uvicorn

    uvicorn.run(
        "bottleneck_diagnostic.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD and settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bottleneck-diagnostic",
        description=settings.DIAGNOSTIC_TITLE,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("serve", help="Run the API server")

    quiz = subparsers.add_parser("quiz", help="Answer the diagnostic in the terminal")
    quiz.add_argument("--state-file", help="Remember a completed result in this JSON file")

    chat = subparsers.add_parser("chat", help="Chat with the AI assistant about a result")
    chat.add_argument(
        "--result",
        required=True,
        help="Result category: PROCESS, ROLE, VISIBILITY or its full name",
    )
    chat.add_argument("--url", default=f"http://localhost:{settings.PORT}", help="Server base URL")

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        serve()
    elif args.command == "quiz":
        try:
            run_quiz(args.state_file)
        except (KeyboardInterrupt, EOFError):
            print()
            return 1
    elif args.command == "chat":
        result = parse_category(args.result)
        if result is None:
            print(f"Unknown result category: {args.result}", file=sys.stderr)
            return 2
        try:
            asyncio.run(run_chat(result, args.url))
        except KeyboardInterrupt:
            print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
