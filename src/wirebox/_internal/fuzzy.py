from __future__ import annotations

from collections.abc import Callable, Iterable

MAX_SUGGESTIONS = 3
SIMILARITY_THRESHOLD = 0.6


def find_similar(
    target: str,
    candidates: Iterable[str],
    key: Callable[[str], str] | None = None,
) -> list[str]:
    """Return up to three candidates that look like ``target``, best first.

    Similarity is ``1 - levenshtein(a, b) / max(len(a), len(b))``; candidates
    below ``SIMILARITY_THRESHOLD`` are dropped. Ties keep candidate order.
    When ``key`` is given, ``target`` is compared with ``key(candidate)`` while
    the candidate itself is returned.
    """
    compare = key or (lambda candidate: candidate)
    scored = [
        (similarity(target, compare(candidate)), candidate) for candidate in dict.fromkeys(candidates)
    ]
    scored.sort(key=lambda item: item[0], reverse=True)
    return [name for score, name in scored if score >= SIMILARITY_THRESHOLD][:MAX_SUGGESTIONS]


def similarity(a: str, b: str) -> float:
    max_length = max(len(a), len(b))
    if max_length == 0:
        return 1.0
    return 1.0 - levenshtein(a, b) / max_length


def levenshtein(a: str, b: str) -> int:
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (char_a != char_b),
                ),
            )
        previous = current
    return previous[-1]
