"""Load a solution-map dataset and build its search index."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import requests
from loguru import logger

from solution_map.config import HTTP_TIMEOUT
from solution_map.core.importer.json_reader import parse_tree
from solution_map.core.search.documents import extract_documents
from solution_map.core.search.index import FtsTextIndex
from solution_map.core.tree.summary import count_nodes
from solution_map.models.node import Document, Node


@dataclass
class Dataset:
    """A loaded tree with its documents and text index."""

    source: str
    root: Node
    documents: list[Document]
    index: FtsTextIndex

    def close(self) -> None:
        self.index.close()


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def read_raw_dataset(source: str | Path, *, session: requests.Session | None = None) -> Any:
    """Read raw dataset JSON from a local file or an http(s) URL."""
    source_str = str(source)
    if _is_url(source_str):
        logger.debug("Fetching dataset {}", source_str)
        sess = session or requests.Session()
        r = sess.get(source_str, timeout=HTTP_TIMEOUT)
        r.raise_for_status()
        return r.json()

    path = Path(source_str).expanduser()
    if not path.is_file():
        msg = f"Dataset file not found: {path}"
        raise FileNotFoundError(msg)
    return json.loads(path.read_text(encoding="utf-8"))


def build_dataset(data: Any, *, source: str = "<memory>") -> Dataset:
    """Parse raw data and build the search index once."""
    root = parse_tree(data)
    documents = extract_documents(root)
    index = FtsTextIndex(documents)
    logger.info(
        "Loaded {}: {} nodes, {} searchable documents",
        source, count_nodes(root), len(documents),
    )
    return Dataset(source=source, root=root, documents=documents, index=index)


def load_dataset(source: str | Path, *, session: requests.Session | None = None) -> Dataset:
    """Load a dataset from a file path or URL.

    Raises:
        FileNotFoundError: The local file does not exist.
        requests.HTTPError: The download failed.
        ValueError: The data is not valid JSON or not a solution tree.
    """
    data = read_raw_dataset(source, session=session)
    return build_dataset(data, source=str(source))
