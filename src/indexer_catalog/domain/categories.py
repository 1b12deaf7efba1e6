from __future__ import annotations

from typing import List, Sequence, Tuple

from ..logging import get_logger

LOG = get_logger("categories")


DEFAULT_VOCABULARY: Tuple[str, ...] = (
    "Console",
    "Movies",
    "Audio",
    "Books",
    "Other",
    "PC",
    "TV",
    "XXX",
)

# Literal marker used by listings for "no categories"; compared case-sensitively.
NO_CATEGORIES_SENTINEL = "None"

ORDER_BY_LENGTH = "length"
ORDER_BY_POSITION = "position"
ORDER_CHOICES: Tuple[str, ...] = (ORDER_BY_LENGTH, ORDER_BY_POSITION)


class CategoryDecompositionError(ValueError):
    """Raised by strict extraction when a blob leaves unmatched characters."""

    def __init__(self, blob: str, residue: str) -> None:
        super().__init__(f"category blob {blob!r} has unmatched residue {residue!r}")
        self.blob = blob
        self.residue = residue


def _check_vocabulary(vocabulary: Sequence[str]) -> List[str]:
    labels = list(vocabulary)
    if not labels:
        raise ValueError("vocabulary must contain at least one label")
    if len(set(labels)) != len(labels):
        raise ValueError(f"vocabulary contains duplicate labels: {labels}")
    if any(not label for label in labels):
        raise ValueError("vocabulary labels must be non-empty strings")
    return labels


def _scan(blob: str, vocabulary: Sequence[str]) -> Tuple[List[str], str]:
    """Greedy longest-first pass. Returns (matched labels, leftover text)."""
    labels = _check_vocabulary(vocabulary)
    if not blob or blob == NO_CATEGORIES_SENTINEL:
        return [], ""

    found: List[str] = []
    remaining = blob
    # sorted() is stable, so equal-length labels keep their vocabulary order
    for label in sorted(labels, key=len, reverse=True):
        if label in remaining:
            found.append(label)
            remaining = remaining.replace(label, "", 1)
    return found, remaining


def extract_categories(
    blob: str,
    vocabulary: Sequence[str] = DEFAULT_VOCABULARY,
    *,
    order: str = ORDER_BY_LENGTH,
) -> List[str]:
    """Recover the category labels packed into an undelimited blob.

    Labels are tested longest first; each hit removes its first occurrence
    from a working copy of the blob. The result is in match order
    (descending length, ties by vocabulary order), e.g. ``"TVMovies"`` gives
    ``["Movies", "TV"]``. With ``order="position"`` the same labels are
    returned in the order they appear in the blob.

    Characters that do not belong to any label are ignored. Use
    :func:`extract_categories_strict` to reject such blobs.
    """
    if order not in ORDER_CHOICES:
        raise ValueError(f"order must be one of {ORDER_CHOICES}, got {order!r}")
    found, _ = _scan(blob, vocabulary)
    if order == ORDER_BY_POSITION:
        found.sort(key=blob.find)
    return found


def residue(blob: str, vocabulary: Sequence[str] = DEFAULT_VOCABULARY) -> str:
    """Return the characters left over after extraction."""
    _, remaining = _scan(blob, vocabulary)
    return remaining


def extract_categories_strict(
    blob: str,
    vocabulary: Sequence[str] = DEFAULT_VOCABULARY,
    *,
    order: str = ORDER_BY_LENGTH,
) -> List[str]:
    """Like :func:`extract_categories` but the blob must decompose fully."""
    found = extract_categories(blob, vocabulary, order=order)
    leftover = residue(blob, vocabulary)
    if leftover:
        raise CategoryDecompositionError(blob, leftover)
    return found


def find_label_collisions(vocabulary: Sequence[str]) -> List[Tuple[str, str]]:
    """Return (shorter, longer) pairs where one label occurs inside another.

    With collisions the greedy pass is no longer guaranteed to be
    collision-free and may over-match the shorter label.
    """
    labels = _check_vocabulary(vocabulary)
    collisions: List[Tuple[str, str]] = []
    for short in labels:
        for long in labels:
            if len(short) < len(long) and short in long:
                collisions.append((short, long))
    if collisions:
        LOG.debug("Vocabulary label collisions: %s", collisions)
    return collisions
