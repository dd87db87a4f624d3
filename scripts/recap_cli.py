#!/usr/bin/env python3
"""Command-line client for the meeting recap server.

Usage:
    uv run python scripts/recap_cli.py generate meeting.txt --mode notes+audio --language sv
    cat meeting.md | uv run python scripts/recap_cli.py generate - --zip out/
    uv run python scripts/recap_cli.py history
    uv run python scripts/recap_cli.py theme --toggle

Reads RECAP_API_URL and RECAP_CLIENT_STORAGE_PATH from environment or .env file.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys

# Ensure project root is on sys.path so we can import src.recap
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dotenv import load_dotenv  # noqa: E402

# Load .env from project root
load_dotenv(os.path.join(os.path.dirname(__file__), "..", ".env"))


def _build_workspace():
    from src.recap.client.api_client import RecapApiClient
    from src.recap.client.history import HistoryStore
    from src.recap.client.storage import LocalStorage
    from src.recap.client.workspace import RecapWorkspace
    from src.recap.config import get_settings

    settings = get_settings()
    storage = LocalStorage(settings.RECAP_CLIENT_STORAGE_PATH)
    return RecapWorkspace(RecapApiClient(settings.RECAP_API_URL), HistoryStore(storage))


async def generate(args: argparse.Namespace) -> int:
    from src.recap.client.transcripts import load_transcript_file
    from src.recap.errors import RecapError

    workspace = _build_workspace()
    try:
        transcript = sys.stdin.read() if args.transcript == "-" else load_transcript_file(args.transcript)
        await workspace.generate(transcript, args.mode, args.language)
    except RecapError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1

    print(workspace.notes)

    if args.audio_out and workspace.audio:
        with open(args.audio_out, "wb") as handle:
            handle.write(workspace.audio)
        print(f"Audio written to {args.audio_out}", file=sys.stderr)

    if args.zip:
        path = workspace.save_bundle(args.zip)
        print(f"Bundle written to {path}", file=sys.stderr)
    return 0


def show_history() -> int:
    from src.recap.client.history import HistoryStore
    from src.recap.client.storage import LocalStorage
    from src.recap.config import get_settings

    store = HistoryStore(LocalStorage(get_settings().RECAP_CLIENT_STORAGE_PATH))
    if not store.entries:
        print("No previous recaps yet.")
        return 0
    for entry in store.entries:
        label = "Notes" if entry.mode.value == "notes" else "Notes + audio"
        print(f"{entry.created_at.isoformat()}  {label} · {entry.language.value.upper()}")
        print(f"    {entry.notes_snippet}...")
    return 0


def theme(args: argparse.Namespace) -> int:
    from src.recap.client.storage import LocalStorage
    from src.recap.client.theme import ThemePreference
    from src.recap.config import get_settings

    preference = ThemePreference(LocalStorage(get_settings().RECAP_CLIENT_STORAGE_PATH))
    if args.toggle:
        preference.toggle()
    print(preference.theme)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Meeting recap client")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate notes (and optionally audio) from a transcript")
    gen.add_argument("transcript", help="Path to a .txt/.md transcript, or '-' for stdin")
    gen.add_argument("--mode", choices=["notes", "notes+audio"], default="notes")
    gen.add_argument("--language", choices=["en", "sv"], default="en")
    gen.add_argument("--audio-out", default=None, help="Write the MP3 recap to this path")
    gen.add_argument("--zip", default=None, help="Write meeting_recap_bundle.zip into this directory")

    sub.add_parser("history", help="List recent recaps stored locally")

    th = sub.add_parser("theme", help="Show or toggle the display theme preference")
    th.add_argument("--toggle", action="store_true")

    args = parser.parse_args()

    if args.command == "generate":
        code = asyncio.run(generate(args))
    elif args.command == "history":
        code = show_history()
    else:
        code = theme(args)
    sys.exit(code)


if __name__ == "__main__":
    main()
