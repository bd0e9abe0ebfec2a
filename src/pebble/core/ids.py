"""Issue identifier generation and resolution."""

import re
import secrets
from collections.abc import Iterable

from pebble.core.errors import AmbiguousIdError, IssueNotFoundError

ID_CHARS = "abcdefghijklmnopqrstuvwxyz0123456789"
SUFFIX_LENGTH = 6
PREFIX_LENGTH = 4

_ID_PATTERN = re.compile(r"^([A-Z0-9]{4})-[a-z0-9]{6}$")


def _random_suffix(length: int) -> str:
    return "".join(secrets.choice(ID_CHARS) for _ in range(length))


def generate_id(prefix: str) -> str:
    """Generate a new issue id of the form PREFIX-xxxxxx.

    No collision check is made against existing ids.
    """
    return f"{prefix}-{_random_suffix(SUFFIX_LENGTH)}"


def derive_prefix(folder_name: str) -> str:
    """Derive a 4-character id prefix from a folder name.

    Takes the first four alphanumeric characters, uppercased, padded with 'X'.

    Example:
        >>> derive_prefix("my-app")
        'MYAP'
        >>> derive_prefix("ab")
        'ABXX'
    """
    clean = re.sub(r"[^a-zA-Z0-9]", "", folder_name)
    return clean[:PREFIX_LENGTH].upper().ljust(PREFIX_LENGTH, "X")


def is_valid_id(issue_id: str) -> bool:
    return _ID_PATTERN.match(issue_id) is not None


def extract_prefix(issue_id: str) -> str | None:
    match = _ID_PATTERN.match(issue_id)
    if match is None:
        return None
    return match.group(1)


def _suffix_of(issue_id: str) -> str | None:
    if "-" not in issue_id:
        return None
    return issue_id.split("-", 1)[1]


def resolve_id(partial: str, ids: Iterable[str]) -> str:
    """Resolve a partial identifier to exactly one full id.

    Matching is case-insensitive and tried in tiers; the first tier with any
    candidate decides the outcome:

    1. Exact match against full ids
    2. Prefix match against full ids
    3. Match of the whole suffix (the part after the first '-')

    Args:
        partial: User-supplied reference (e.g., "PEBL-a1b2c3", "pebl-a1", "a1b2c3")
        ids: Known issue ids, typically the keys of a snapshot

    Returns:
        The matching full id

    Raises:
        AmbiguousIdError: If a tier yields more than one candidate
        IssueNotFoundError: If no tier yields a candidate
    """
    all_ids = list(ids)
    needle = partial.lower()

    for issue_id in all_ids:
        if issue_id.lower() == needle:
            return issue_id

    prefix_matches = [issue_id for issue_id in all_ids if issue_id.lower().startswith(needle)]
    if len(prefix_matches) == 1:
        return prefix_matches[0]
    if len(prefix_matches) > 1:
        raise AmbiguousIdError(partial, prefix_matches)

    suffix_matches = []
    for issue_id in all_ids:
        suffix = _suffix_of(issue_id)
        if suffix is not None and suffix.lower() == needle:
            suffix_matches.append(issue_id)
    if len(suffix_matches) == 1:
        return suffix_matches[0]
    if len(suffix_matches) > 1:
        raise AmbiguousIdError(partial, suffix_matches)

    raise IssueNotFoundError(partial)
