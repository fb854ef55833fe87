#!/usr/bin/env python3
"""
Demo script for simpleflash.

Asks Gemini on Vertex AI for a haiku twice (the second answer comes from
the cache) and counts the tokens of the prompt.

Requires PROJECT_ID and Application Default Credentials.
"""

import asyncio
import logging
import os
import sys
import time

from simpleflash import ClientSession, InferenceFailed, SimpleFlashError

TEXT_MODEL = "gemini-1.5-flash"
MULTIMODAL_MODEL = "gemini-1.0-pro-vision"
PROMPT = "Write a haiku about the color of cows."


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def demo_cached_query(session: ClientSession) -> None:
    """Demonstrate a cache miss followed by a cache hit."""
    print_section("Cached Query")

    for attempt in ("first (remote call)", "second (cache)"):
        start = time.time()
        output = await session.query(PROMPT)
        duration = (time.time() - start) * 1000
        print(f"\n  {attempt}: {duration:.2f}ms")
        print(f"  {output}")


async def demo_count_tokens(session: ClientSession) -> None:
    """Demonstrate token counting (never cached)."""
    print_section("Token Count")

    count = await session.count_tokens(PROMPT)
    print(f"\n  '{PROMPT}'")
    print(f"  Tokens: {count}")


async def main() -> int:
    """Run all demos."""
    project_location = os.getenv("PROJECT_LOCATION", "europe-west4")
    project_id = os.getenv("PROJECT_ID", "")
    if not project_id:
        print("Error: PROJECT_ID environment variable is not set.", file=sys.stderr)
        return 1

    logging.basicConfig(level=logging.DEBUG if os.getenv("VERBOSE", "false").lower() == "true" else logging.WARNING)

    try:
        session = ClientSession.create(TEXT_MODEL, MULTIMODAL_MODEL, project_location, project_id, True)
    except SimpleFlashError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    session.set_timeout(10)

    async with session:
        try:
            await demo_cached_query(session)
            await demo_count_tokens(session)
        except InferenceFailed as e:
            print(f"\nError: {e}", file=sys.stderr)
            return 1

        print_section("Session Stats")
        for name, value in session.get_stats()["metrics"].items():
            print(f"  {name}: {value}")

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
