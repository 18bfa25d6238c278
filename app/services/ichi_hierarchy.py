"""Pure functions over ICHI codes and entry collections.

The parent/child relation is never materialized; every helper recomputes it
from the entries it is given, so a code rewrite can never leave a stale graph
behind.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Iterable, Protocol, Sequence

FLAT_CODE_RE = re.compile(r"^[A-Z]+\d*$")
SEGMENT_SEPARATOR = "."


class CodedEntry(Protocol):
    id: int
    code: str
    block_id: str | None
    title: str
    depth_in_kind: int


def is_flat_code(code: str) -> bool:
    return bool(code) and FLAT_CODE_RE.fullmatch(code) is not None


def code_segments(code: str) -> list[str]:
    return code.split(SEGMENT_SEPARATOR)


def truncate_code(code: str, levels: int = 2) -> str:
    return SEGMENT_SEPARATOR.join(code_segments(code)[:levels])


def is_segment_prefix(prefix: str, code: str) -> bool:
    """``IAA.BA`` is a segment prefix of ``IAA.BA.BC`` but ``IAA.B`` is not."""
    if prefix == code:
        return False
    return code.startswith(prefix + SEGMENT_SEPARATOR)


def is_ancestor(parent: CodedEntry, child: CodedEntry) -> bool:
    return is_segment_prefix(parent.code, child.code) and parent.depth_in_kind < child.depth_in_kind


def broken_chains(entries: Sequence[CodedEntry]) -> list[tuple[str, str]]:
    """Pairs ``(prefix, code)`` in one block whose ``DepthInKind`` does not increase along the chain."""
    broken = []
    for parent in entries:
        for child in entries:
            if parent.block_id != child.block_id or not is_segment_prefix(parent.code, child.code):
                continue
            if not is_ancestor(parent, child):
                broken.append((parent.code, child.code))
    return sorted(broken)


def duplicate_codes(entries: Iterable[CodedEntry]) -> list[str]:
    counts = Counter(e.code for e in entries)
    return sorted(code for code, n in counts.items() if n > 1)


def is_parent_candidate(parent: CodedEntry, candidate: CodedEntry) -> bool:
    return (
        candidate.title in parent.title
        and parent.code.startswith(candidate.code)
        and parent.code != candidate.code
    )


def parent_sort_key(parent: CodedEntry) -> tuple[int, str, int]:
    # Closest ancestor first, then a stable lexical order.
    return (len(parent.code), parent.code, parent.id)


def find_repair_parent(candidate: CodedEntry, entries: Sequence[CodedEntry]) -> CodedEntry | None:
    matches = [e for e in entries if e is not candidate and is_parent_candidate(e, candidate)]
    if not matches:
        return None
    return min(matches, key=parent_sort_key)


def derive_corrected_code(parent_code: str) -> str:
    return truncate_code(parent_code, levels=2)
