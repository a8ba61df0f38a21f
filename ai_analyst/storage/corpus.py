"""Read-only, in-memory document corpus."""

from __future__ import annotations

import datetime
import json
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from ..models import Document, DocumentMetadata


def _parse_date(value: Any) -> Optional[datetime.date]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime.date):
        return value
    return datetime.date.fromisoformat(str(value))


def document_from_record(record: Mapping[str, Any]) -> Document:
    """Build a :class:`Document` from its JSON representation."""

    try:
        metadata = record.get("metadata") or {}
        return Document(
            id=str(record["id"]),
            title=str(record["title"]),
            content=str(record["content"]),
            metadata=DocumentMetadata(
                source=str(metadata.get("source", "")),
                date=_parse_date(metadata.get("date")),
                tags=frozenset(str(tag).lower() for tag in metadata.get("tags", ())),
            ),
        )
    except KeyError as exc:
        raise ValueError(f"Document record is missing field {exc}") from exc


def document_to_record(document: Document) -> Dict[str, Any]:
    metadata = document.metadata
    return {
        "id": document.id,
        "title": document.title,
        "content": document.content,
        "metadata": {
            "date": metadata.date.isoformat() if metadata.date else None,
            "source": metadata.source,
            "tags": sorted(metadata.tags),
        },
    }


class Corpus(Sequence[Document]):
    """An ordered, immutable collection of documents.

    The corpus is built once and then shared by every retrieval call.
    Insertion order is kept because it breaks ties between equally
    relevant documents.
    """

    def __init__(self, documents: Iterable[Document] = ()) -> None:
        docs: Tuple[Document, ...] = tuple(documents)
        index: Dict[str, Document] = {}
        for document in docs:
            if document.id in index:
                raise ValueError(f"Duplicate document id: {document.id}")
            index[document.id] = document
        self._documents = docs
        self._index = index

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "Corpus":
        return cls(document_from_record(record) for record in records)

    def to_records(self) -> List[Dict[str, Any]]:
        return [document_to_record(document) for document in self._documents]

    # ------------------------------------------------------------------
    # Sequence protocol
    # ------------------------------------------------------------------
    def __getitem__(self, item):  # type: ignore[override]
        return self._documents[item]

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)

    # ------------------------------------------------------------------
    def get(self, document_id: str) -> Optional[Document]:
        return self._index.get(document_id)

    def save(self, path: str | Path) -> None:
        """Write the corpus as a JSON array."""

        file_path = Path(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with file_path.open("w", encoding="utf-8") as fh:
            json.dump(self.to_records(), fh, indent=2)
