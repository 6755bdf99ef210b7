#!/usr/bin/env python3
"""
Command-line search against the configured MongoDB database.

Usage:
    python -m scripts.search_cli "female UX designers in Bengaluru" --collection users
    python -m scripts.search_cli "tech meetup bengaluru" --collection events --limit 5
    python -m scripts.search_cli "datings in december" --collection all --populate
    python -m scripts.search_cli "events in november" --parse-only
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.api.dependencies import get_query_parser, get_search_service, get_store, get_translator
from app.config import SEARCHABLE_COLLECTIONS
from app.mappers import QueryMapper

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


async def run(args: argparse.Namespace) -> Dict[str, Any]:
    """Run one search (or translation) and return the JSON-ready result."""
    collection = args.collection or QueryMapper.detect_collection(args.query)

    if args.parse_only:
        parser = get_query_parser()
        target = collection if collection != "all" else "events"
        return {"search_type": target, "query": await parser.parse(args.query, target)}

    service = get_search_service()
    if collection == "all":
        return await service.search_all(args.query, limit=args.limit, populate=args.populate)

    populate = args.populate if args.populate is not None else True
    raw_query, result = await service.search_detailed(
        collection, args.query, limit=args.limit, populate=populate
    )
    return {"search_type": collection, "query": raw_query, **result}


async def main_async(args: argparse.Namespace) -> int:
    try:
        result = await run(args)
    except Exception as e:
        logger.error(f"Search failed: {e}")
        return 1
    finally:
        translator = get_translator()
        if translator is not None:
            await translator.close()
        await get_store().close()

    print(json.dumps(result, indent=2, default=str))
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Natural-language MongoDB search")
    parser.add_argument("query", help="Plain English search query")
    parser.add_argument(
        "--collection",
        choices=[*SEARCHABLE_COLLECTIONS, "all"],
        default=None,
        help="Target collection (detected from the query when omitted)",
    )
    parser.add_argument("--limit", type=int, default=None, help="Maximum results")
    parser.add_argument(
        "--populate",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Resolve participant / partner user documents",
    )
    parser.add_argument("--parse-only", action="store_true", help="Only print the translated query")
    args = parser.parse_args()

    if args.collection == "all" and args.populate is None:
        args.populate = False

    return asyncio.run(main_async(args))


if __name__ == "__main__":
    sys.exit(main())
