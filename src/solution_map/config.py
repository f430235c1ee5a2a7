"""Configuration constants for the solution map."""

import os
from pathlib import Path

# Facet value meaning "facet inactive".
ALL = "all"

# Dataset location. SOLUTION_MAP_DATA wins, otherwise the first file found is used.
DATASET_ENV_VAR = "SOLUTION_MAP_DATA"
DATASET_FILES: list[Path] = [
    Path("db/latest/CD_Solution_map_2_content.json"),
    Path("~/.local/share/solution-map/solutions.json").expanduser(),
    Path("~/.config/solution-map/solutions.json").expanduser(),
]

# Seconds to wait when fetching a dataset over HTTP.
HTTP_TIMEOUT: int = 30

# Breadcrumb separator used in Document.path_string.
PATH_SEPARATOR = " > "

# Fuzziness is a fraction of the term length, capped at MAX_FUZZY_EDITS.
FUZZY_LOOSE: float = 0.2
FUZZY_PHRASE: float = 0.1
MAX_FUZZY_EDITS: int = 6

# bm25 column weights for the text index, in FTS column order.
FIELD_BOOSTS: dict[str, float] = {
    "name": 3.0,
    "aggregated_text": 1.5,
    "type": 2.0,
    "tags": 1.2,
    "path_string": 1.8,
}


def resolve_dataset_source() -> str | None:
    """Return the dataset path or URL to load, or None if nothing is configured."""
    from_env = os.environ.get(DATASET_ENV_VAR)
    if from_env:
        return from_env
    for candidate in DATASET_FILES:
        if candidate.is_file():
            return str(candidate)
    return None
