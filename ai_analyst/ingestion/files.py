"""Utilities for loading a corpus exported to disk."""

from __future__ import annotations

import json
from pathlib import Path

from ..storage.corpus import Corpus


def load_corpus_file(path: str | Path) -> Corpus:
    """Load a corpus from a JSON array or a JSON Lines file.

    Files ending in ``.jsonl`` are read one record per line, blank lines
    are skipped. Any other file must contain a single JSON array of
    document records.
    """

    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Corpus file not found: {file_path}")

    text = file_path.read_text(encoding="utf-8")
    if file_path.suffix == ".jsonl":
        records = [json.loads(line) for line in text.splitlines() if line.strip()]
    else:
        records = json.loads(text)
        if not isinstance(records, list):
            raise ValueError(f"Corpus file must contain a JSON array: {file_path}")

    return Corpus.from_records(records)
