"""Protocols for the text index collaborator."""

from typing import Protocol, runtime_checkable

from solution_map.models.node import SearchMatch


@runtime_checkable
class TextIndex(Protocol):
    """Protocol for full-text indexes built from extracted documents."""

    def search(
        self,
        term: str,
        *,
        prefix: bool,
        fuzzy: float,
        combine_with: str = "AND",
        phrase_mode: bool = False,
    ) -> list[SearchMatch]:
        """Return ranked matches for a term, or [] for an empty or unparsable term.

        With combine_with="AND", every token of the term must match some
        field of a document for that document to be returned.
        """
        ...

    def all_documents(self) -> list[SearchMatch]:
        """Return every indexed document with a zero score."""
        ...
