#!/usr/bin/env python3
"""Main entry point for the AI debate arena."""

import asyncio
import logging
import os
import sys
from collections.abc import Mapping
from typing import Any


def setup_logging(level: str = "INFO"):
    """Configure logging for the arena."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    # Suppress noisy third-party loggers
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def print_usage():
    """Print usage information for local development."""
    print("AI Debate Arena")
    print("=" * 40)
    print("Web Server (API + WebSocket):")
    print("   python main.py --web")
    print()
    print("Console debate:")
    print('   python main.py --topic "Remote work is better than office work" [--minutes 2]')
    print('   python main.py --console [--minutes 2]   (topic from debate_config.json)')
    print()
    print("Models and API keys are read from debate_config.json")
    print("(GEMINI_API_KEY / GROQ_API_KEY are used when no key is configured).")
    print()


def start_web_server():
    """Start the FastAPI web server."""
    setup_logging()

    import uvicorn
    from web.api import app

    port = int(os.environ.get("PORT", 8000))

    print("Starting AI Debate Arena Web Server...")
    print(f"API Documentation: http://localhost:{port}/docs")
    print(f"WebSocket: ws://localhost:{port}/ws/debate/{{id}}")

    uvicorn.run(app, host="0.0.0.0", port=port, log_level="info", access_log=True)


def get_arg(name: str) -> str | None:
    if name in sys.argv:
        index = sys.argv.index(name)
        if index + 1 < len(sys.argv):
            return sys.argv[index + 1]
    return None


async def run_console_debate(topic: str | None = None, minutes: int | None = None) -> None:
    """Run one debate in the terminal, printing each turn as it arrives.

    Without ``topic`` the ``debate.topic`` from the config file is used.
    """
    from config.settings import get_default_config
    from debate_engine.core import DebateEngine
    from debate_engine.generator import build_model_generator
    from debate_engine.transcript import TranscriptManager

    config = get_default_config()
    setup_logging(config.system.log_level)

    async def print_event(event_type: str, data: Mapping[str, Any]) -> None:
        if event_type == "debate_started":
            stances = ", ".join(f"{pid}: {stance}" for pid, stance in data["stances"].items())
            print(f"\nTopic: {data['topic']} ({data['duration_seconds']}s)")
            print(f"Stances: {stances}\n")
        elif event_type == "new_message":
            label = f"{data['participant'].upper()} ({data['stance']})"
            suffix = f"+{data['score']}" if data["counted"] else "not scored"
            print(f"[{label}] {data['content']}\n    -> {suffix}\n")
        elif event_type == "turn_failed":
            print(f"!! {data['participant']} failed: {data['exception_message']}\n")
        elif event_type == "debate_completed":
            print("=" * 60)
            print(data["feedback"])

    engine = DebateEngine(config, build_model_generator(config), event_callback=print_event)
    if minutes is not None:
        engine.change_duration(minutes)

    await engine.start(topic or config.debate.topic)
    try:
        await engine.wait()
    finally:
        await engine.close()

    if config.system.save_transcripts and engine.session is not None:
        manager = TranscriptManager.in_directory(config.system.transcript_dir)
        transcript_id = manager.save_session(engine.session)
        print(f"Transcript saved with ID {transcript_id}")


def main():
    """Main entry point."""
    from debate_engine.exceptions import DebateError

    is_production = any([
        "RAILWAY_ENVIRONMENT" in os.environ,
        "PORT" in os.environ,
        os.environ.get("ENVIRONMENT") == "production",
    ])

    topic = get_arg("--topic")
    minutes_arg = get_arg("--minutes")

    if "--help" in sys.argv or "-h" in sys.argv:
        print_usage()
    elif is_production or "--web" in sys.argv:
        start_web_server()
    elif topic or "--console" in sys.argv:
        try:
            minutes = int(minutes_arg) if minutes_arg else None
        except ValueError:
            print(f"Error: --minutes expects a whole number, got '{minutes_arg}'\n")
            print_usage()
            return

        try:
            asyncio.run(run_console_debate(topic, minutes))
        except (DebateError, ValueError) as e:
            print(f"Error: {e}\n")
            print_usage()
        except KeyboardInterrupt:
            print("\nDebate interrupted")
    else:
        print_usage()
        print("Tip: Use 'python main.py --web' to start the server")


if __name__ == "__main__":
    main()
