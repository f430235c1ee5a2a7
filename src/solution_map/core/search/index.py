"""In-memory SQLite FTS5 text index over extracted documents."""

import re
import sqlite3
from collections.abc import Iterable

from loguru import logger
from rapidfuzz import process
from rapidfuzz.distance import Levenshtein

from solution_map.config import FIELD_BOOSTS, MAX_FUZZY_EDITS
from solution_map.models.node import Document, SearchMatch

_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS documents (
    id INTEGER PRIMARY KEY,
    node_id TEXT NOT NULL,
    name TEXT NOT NULL,
    aggregated_text TEXT NOT NULL DEFAULT '',
    type TEXT NOT NULL DEFAULT '',
    tags TEXT NOT NULL DEFAULT '',
    path_string TEXT NOT NULL DEFAULT ''
);

CREATE VIRTUAL TABLE IF NOT EXISTS documents_fts USING fts5(
    name, aggregated_text, type, tags, path_string,
    content='documents',
    content_rowid='id',
    tokenize='unicode61 remove_diacritics 2'
);

CREATE VIRTUAL TABLE IF NOT EXISTS documents_vocab USING fts5vocab(documents_fts, 'row');
"""

_FTS_TRIGGERS_SQL = """\
CREATE TRIGGER IF NOT EXISTS documents_ai AFTER INSERT ON documents BEGIN
    INSERT INTO documents_fts(rowid, name, aggregated_text, type, tags, path_string)
    VALUES (new.id, new.name, new.aggregated_text, new.type, new.tags, new.path_string);
END;
"""

# bm25() takes one weight per FTS column, in declaration order.
_BM25_WEIGHTS = ", ".join(str(weight) for weight in FIELD_BOOSTS.values())

_SEARCH_SQL = f"""
    SELECT d.id, d.node_id, d.name, -bm25(documents_fts, {_BM25_WEIGHTS}) AS score
    FROM documents_fts
    JOIN documents d ON d.id = documents_fts.rowid
    WHERE documents_fts MATCH ?
    ORDER BY score DESC, d.id
"""

# Same token boundaries as the unicode61 tokenizer: letters and digits only.
_TOKEN_RE = re.compile(r"[^\W_]+")


def tokenize(text: str) -> list[str]:
    """Split text into lower-cased index tokens."""
    return _TOKEN_RE.findall(text.lower())


def max_edits(token: str, fuzzy: float) -> int:
    """Edit distance allowed for a token.

    A fuzzy value below 1 is a fraction of the token length, rounded half up.
    Larger values are an absolute distance. Both are capped at MAX_FUZZY_EDITS.
    """
    if fuzzy <= 0:
        return 0
    if fuzzy >= 1:
        return min(int(fuzzy), MAX_FUZZY_EDITS)
    return min(int(len(token) * fuzzy + 0.5), MAX_FUZZY_EDITS)


def _quote(term: str) -> str:
    return '"' + term.replace('"', '""') + '"'


def create_index_schema(conn: sqlite3.Connection) -> None:
    """Create the document table, the FTS5 index and its vocabulary view."""
    conn.executescript(_SCHEMA_SQL)
    conn.executescript(_FTS_TRIGGERS_SQL)


def insert_documents(conn: sqlite3.Connection, documents: Iterable[Document]) -> int:
    """Insert documents; triggers keep the FTS index in sync. Returns the row count."""
    rows = [
        (d.id, d.node_id, d.name, d.aggregated_text, d.type, d.tags, d.path_string)
        for d in documents
    ]
    conn.executemany(
        """INSERT INTO documents
           (id, node_id, name, aggregated_text, type, tags, path_string)
           VALUES (?, ?, ?, ?, ?, ?, ?)""",
        rows,
    )
    conn.commit()
    return len(rows)


class FtsTextIndex:
    """Text index built once per dataset load.

    Every query token matches exactly, by prefix when requested, or by any
    indexed term within the allowed edit distance. Phrase mode matches the
    tokens as one contiguous phrase with no expansion.
    """

    def __init__(self, documents: Iterable[Document]) -> None:
        self.conn = sqlite3.connect(":memory:")
        create_index_schema(self.conn)
        count = insert_documents(self.conn, documents)
        self._vocabulary: list[str] = [
            row[0] for row in self.conn.execute("SELECT term FROM documents_vocab")
        ]
        logger.info(
            "Search index built with {} documents ({} terms)", count, len(self._vocabulary)
        )

    def close(self) -> None:
        self.conn.close()

    def _similar_terms(self, token: str, distance: int) -> list[str]:
        if distance <= 0 or not self._vocabulary:
            return []
        hits = process.extract(
            token,
            self._vocabulary,
            scorer=Levenshtein.distance,
            score_cutoff=distance,
            limit=None,
        )
        return [choice for choice, _score, _key in hits if choice != token]

    def prepare_match_query(
        self,
        term: str,
        *,
        prefix: bool,
        fuzzy: float,
        combine_with: str = "AND",
        phrase_mode: bool = False,
    ) -> str:
        """Convert a user term to an FTS5 MATCH expression ("" when nothing is searchable)."""
        tokens = tokenize(term)
        if not tokens:
            return ""
        if phrase_mode:
            return _quote(" ".join(tokens))

        groups: list[str] = []
        for token in tokens:
            alternatives = [_quote(token) + ("*" if prefix else "")]
            alternatives.extend(
                _quote(similar) for similar in self._similar_terms(token, max_edits(token, fuzzy))
            )
            if len(alternatives) == 1:
                groups.append(alternatives[0])
            else:
                groups.append("(" + " OR ".join(alternatives) + ")")

        operator = combine_with.upper()
        if operator not in ("AND", "OR"):
            msg = f"combine_with must be 'AND' or 'OR', got {combine_with!r}"
            raise ValueError(msg)
        return f" {operator} ".join(groups)

    def search(
        self,
        term: str,
        *,
        prefix: bool,
        fuzzy: float,
        combine_with: str = "AND",
        phrase_mode: bool = False,
    ) -> list[SearchMatch]:
        """Search the index, returning matches ranked by weighted bm25.

        Never raises; an unsupported combine_with yields no matches.
        """
        try:
            match_query = self.prepare_match_query(
                term,
                prefix=prefix,
                fuzzy=fuzzy,
                combine_with=combine_with,
                phrase_mode=phrase_mode,
            )
        except ValueError as e:
            logger.warning("Cannot search {!r}: {}", term, e)
            return []
        if not match_query:
            return []

        try:
            rows = self.conn.execute(_SEARCH_SQL, (match_query,)).fetchall()
        except sqlite3.Error:
            logger.opt(exception=True).warning("Index rejected query {!r}", match_query)
            return []

        return [
            SearchMatch(document_id=row[0], node_id=row[1], name=row[2], score=row[3])
            for row in rows
        ]

    def all_documents(self) -> list[SearchMatch]:
        rows = self.conn.execute("SELECT id, node_id, name FROM documents ORDER BY id").fetchall()
        return [SearchMatch(document_id=row[0], node_id=row[1], name=row[2]) for row in rows]
