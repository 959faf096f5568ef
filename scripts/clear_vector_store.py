#!/usr/bin/env python
"""Delete every resume vector from the configured vector store."""

import argparse
import asyncio
import sys

from hireflow.config import get_settings
from hireflow.retrieval.vector_store import build_vector_store


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Remove all resume embeddings from the vector store")
    p.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    return p


async def clear_vector_store() -> int:
    store = build_vector_store(get_settings())
    try:
        before = await store.count()
        await store.clear()
        return before
    finally:
        await store.close()


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    if not args.yes:
        answer = input(
            f"Delete all vectors from '{settings.vector_collection}' ({settings.vector_store_backend})? [y/N] "
        )
        if answer.strip().lower() not in ("y", "yes"):
            print("Aborted.")
            sys.exit(1)

    try:
        removed = asyncio.run(clear_vector_store())
    except Exception as e:
        print(f"Error clearing vector store: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Removed {removed} vectors. The store is now empty.")


if __name__ == "__main__":
    main()
