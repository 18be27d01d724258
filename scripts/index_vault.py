"""
Vault indexing script

Re-index every session file in the vault, then optionally run a search.
Usage: python scripts/index_vault.py [--vault ~/JournalAI] [--query "sleep"]
"""

import argparse
import asyncio
import sys
import logging
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from journal_ai.config import settings
from journal_ai.services.journal_service import index_session_file, open_rag
from journal_ai.services.vault import VaultManager
from journal_ai.utils.logger import setup_logging

setup_logging()
logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Index journal sessions for retrieval")
    parser.add_argument(
        "--vault",
        "-v",
        default=str(settings.vault_dir),
        help="Vault path (default: VAULT_PATH)",
    )
    parser.add_argument(
        "--query",
        "-q",
        default=None,
        help="Search the index after indexing",
    )
    parser.add_argument(
        "--k",
        type=int,
        default=None,
        help="Number of search results (default: vault settings)",
    )
    return parser.parse_args()


async def run(vault_path: str, query: str = None, k: int = None) -> int:
    vault = VaultManager(vault_path)
    vault.initialize()
    journal_settings = vault.load_settings()

    files = vault.iter_session_files()
    logger.info(f"Indexing {len(files)} session files from {vault.vault_path}")
    logger.info("-" * 60)

    failed = []
    async with await open_rag(vault, journal_settings) as rag:
        for i, filepath in enumerate(files, 1):
            logger.info(f"[{i}/{len(files)}] {filepath.name}")
            try:
                await index_session_file(rag, vault, filepath)
            except Exception as e:
                logger.error(f"  ✗ Failed to index {filepath}: {e}")
                failed.append(filepath)

        logger.info("=" * 60)
        logger.info(f"✓ Indexed {len(files) - len(failed)}/{len(files)} sessions")
        logger.info(f"✓ Documents: {await rag.store.count_documents()}, chunks: {await rag.store.count_chunks()}")

        if query:
            results = await rag.search(query, k=k)
            logger.info(f"\nTop {len(results)} results for: {query}")
            for j, chunk in enumerate(results, 1):
                logger.info(f"  {j}. [{chunk.date} - {chunk.heading}] {chunk.text[:80]}")

    return 1 if failed else 0


def main():
    args = parse_args()
    sys.exit(asyncio.run(run(args.vault, args.query, args.k)))


if __name__ == "__main__":
    main()
