"""
Lexicon Seeding

Bulk import of curated word profiles from JSON files of the form::

    {"words": [{"word": "happy", "stats": {"emotion_probs": {...},
                "vad": {...}, "sentiment": {...}, "pos": [...],
                "social_axes": {...}, "toxicity": 0.0, "dynamics": {...}}}]}

Entries are inserted only when absent, so re-running a seed never replaces
existing rows.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Union

import structlog

from .base import EmotionalProfile, ProfileValidationError, uniform_distribution
from .lexicon import normalize_word, profile_from_payload
from .stores import ProfileStore


logger = structlog.get_logger(__name__)


@dataclass
class SeedReport:
    """Outcome of a seeding run."""

    files: int = 0
    total: int = 0
    inserted: int = 0
    skipped: int = 0
    errors: int = 0
    error_messages: List[str] = field(default_factory=list)

    def merge(self, other: "SeedReport") -> None:
        self.files += other.files
        self.total += other.total
        self.inserted += other.inserted
        self.skipped += other.skipped
        self.errors += other.errors
        self.error_messages.extend(other.error_messages)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "files": self.files,
            "total": self.total,
            "inserted": self.inserted,
            "skipped": self.skipped,
            "errors": self.errors,
        }


def profile_from_seed_stats(stats: Mapping[str, Any]) -> EmotionalProfile:
    """Seed entries without a category block are treated as uniform."""
    if "emotion_probs" not in stats and "emotions" not in stats:
        stats = dict(stats, emotion_probs=uniform_distribution())
    return profile_from_payload(stats)


async def seed_entries(
    store: ProfileStore,
    entries: Iterable[Any],
) -> SeedReport:
    """Insert seed entries that are not already stored."""
    report = SeedReport()

    for entry in entries:
        report.total += 1

        if not isinstance(entry, Mapping) or not entry.get("word") or not isinstance(entry.get("stats"), Mapping):
            report.skipped += 1
            continue

        word = normalize_word(str(entry["word"]))
        if not word:
            report.skipped += 1
            continue

        try:
            profile = profile_from_seed_stats(entry["stats"])
        except ProfileValidationError as e:
            report.errors += 1
            report.error_messages.append(f"{word}: {e}")
            continue

        if await store.upsert_word(word, profile, overwrite=False):
            report.inserted += 1
        else:
            report.skipped += 1

    return report


async def seed_from_data(store: ProfileStore, data: Any) -> SeedReport:
    """Seed from an already-parsed ``{"words": [...]}`` document."""
    if not isinstance(data, Mapping) or not isinstance(data.get("words"), list):
        report = SeedReport(errors=1)
        report.error_messages.append("document has no 'words' array")
        return report
    return await seed_entries(store, data["words"])


async def seed_from_json(
    store: ProfileStore,
    path: Union[str, Path],
) -> SeedReport:
    """Seed from one JSON file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.error("seed_file_unreadable", path=str(path), error=str(e))
        report = SeedReport(errors=1)
        report.error_messages.append(f"{path}: {e}")
        return report

    report = await seed_from_data(store, data)
    report.files = 1

    logger.info("seed_file_imported", path=str(path), **report.to_dict())
    return report


def discover_seed_files(paths: Iterable[Union[str, Path]]) -> List[Path]:
    """Expand directories to the ``*.json`` files they contain."""
    files: List[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            files.extend(sorted(path.glob("*.json")))
        else:
            files.append(path)
    return files


async def seed_from_paths(
    store: ProfileStore,
    paths: Iterable[Union[str, Path]],
) -> SeedReport:
    """Seed from files and directories, in order."""
    report = SeedReport()
    for path in discover_seed_files(paths):
        report.merge(await seed_from_json(store, path))
    return report


__all__ = [
    "SeedReport",
    "profile_from_seed_stats",
    "seed_entries",
    "seed_from_data",
    "seed_from_json",
    "discover_seed_files",
    "seed_from_paths",
]
