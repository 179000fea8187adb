"""Index runner entry point.

Reads text files from the given paths, builds a fresh VectorIndex and saves
it to RAG_INDEX_PATH, replacing the previous one.

Usage:
    python -m services.rag_index.index_runner docs/ notes.md
    python -m services.rag_index.index_runner --clear
"""

import argparse
import asyncio
import os

from services.rag_index.IndexBuilder import IndexBuilder
from shared.clients.embed.EmbedClientManager import EmbedClientManager
from shared.clients.embed.EmbeddingClient import EmbeddingClient
from shared.clients.embed.EmbedWorker import EmbedWorker
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import setup_logging
from shared.models.config import ChunkSettings
from shared.store.IndexStoreFile import IndexStoreFile

INCLUDE_EXTS = (".ts", ".tsx", ".js", ".jsx", ".py", ".java", ".go", ".rs", ".md", ".txt", ".json", ".yaml", ".yml")
IGNORE_DIRS = ("node_modules", "dist", "build", ".git", ".next", "coverage", "__pycache__", "vendor", "target", ".gradle", "out")
MAX_FILE_BYTES = 100 * 1024


def collect_sources(paths: list[str], logger) -> tuple[list[str], list[dict]]:
    """Read every eligible file below the given paths.

    Returns:
        tuple[list[str], list[dict]]: Texts and matching metadata records
            (``source`` is the file path relative to the scanned root).
    """
    texts: list[str] = []
    metadatas: list[dict] = []

    def add_file(file_path: str, source: str) -> None:
        if not file_path.endswith(INCLUDE_EXTS):
            return
        try:
            if os.path.getsize(file_path) > MAX_FILE_BYTES:
                logger.warning("Skipping %s: larger than %d bytes.", file_path, MAX_FILE_BYTES)
                return
            with open(file_path, "r", encoding="utf-8") as handle:
                texts.append(handle.read())
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping %s: %s", file_path, exc)
            return
        metadatas.append({"source": source, "type": "file"})

    for path in paths:
        if os.path.isfile(path):
            add_file(path, os.path.basename(path))
            continue
        for root, dirs, files in os.walk(path):
            dirs[:] = sorted(d for d in dirs if d not in IGNORE_DIRS)
            for name in sorted(files):
                file_path = os.path.join(root, name)
                add_file(file_path, os.path.relpath(file_path, path))
    return texts, metadatas


async def main(argv: list[str] | None = None) -> int:
    """Build (or clear) the persisted index. Returns a process exit code."""
    parser = argparse.ArgumentParser(description="Build the hybrid retrieval index from local files.")
    parser.add_argument("paths", nargs="*", help="Files or directories to index")
    parser.add_argument("--clear", action="store_true", help="Remove the stored index and exit")
    args = parser.parse_args(argv)

    logger = setup_logging()
    config = HelperConfig(logger=logger)
    store = IndexStoreFile(helper_config=config)

    if args.clear:
        store.clear()
        return 0
    if not args.paths:
        parser.error("at least one path is required unless --clear is given")

    texts, metadatas = collect_sources(args.paths, logger)
    if not texts:
        logger.error("No indexable files found in %s.", ", ".join(args.paths))
        return 1
    logger.info("Indexing %d files...", len(texts))

    embed_backend = EmbedClientManager(helper_config=config).get_client()
    worker = EmbedWorker(helper_config=config, backend=embed_backend)
    await worker.start()
    try:
        builder = IndexBuilder(
            helper_config=config,
            embedding_client=EmbeddingClient(helper_config=config, worker=worker),
            settings=ChunkSettings.from_helper_config(config),
        )
        try:
            index = await builder.build_index(texts, metadatas, on_progress=lambda status: logger.info(status))
        except Exception as exc:
            logger.error("Index build failed: %s. Keeping the previous index.", exc)
            return 1
        store.save(index)
        logger.info("Index ready: %d documents, %d chunks.", len(index.documents), len(index.chunks), color="green")
    finally:
        await worker.stop()
    return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
