# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Parsing the operator's choice of pull requests to approve.

Accepted input is either ``all`` (any case, surrounding whitespace allowed) or
a comma separated list of candidate indices such as ``1, 3``.
"""

import re
from typing import Callable, Optional, Set

from dependabot_approve.classes import SelectionSet
from dependabot_approve.constants import MAX_SELECTION_ATTEMPTS, SELECT_ALL_TOKEN
from dependabot_approve.exceptions import SelectionError

_INDEX_PATTERN = re.compile(r'[0-9]+')


def parse_selection(raw: str, candidate_count: int) -> SelectionSet:
    """Parse one line of operator input into a SelectionSet.

    Raises:
        SelectionError: If the input is empty, holds a non-integer token, or
            references an index outside 1..candidate_count. Nothing is
            partially accepted.
    """
    text = (raw or '').strip()
    if not text:
        raise SelectionError('No selection entered.')

    if text.lower() == SELECT_ALL_TOKEN:
        return SelectionSet.everything(candidate_count)

    indices: Set[int] = set()
    for token in text.split(','):
        token = token.strip()
        if not _INDEX_PATTERN.fullmatch(token):
            raise SelectionError(f"'{token}' is not a valid PR number." if token else 'Empty entry in list.')
        index = int(token)
        if not 1 <= index <= candidate_count:
            raise SelectionError(f'{index} is out of range (choose 1-{candidate_count}).')
        indices.add(index)

    return SelectionSet(indices=frozenset(indices))


def prompt_for_selection(
    candidate_count: int,
    read_line: Callable[[], str],
    on_error: Optional[Callable[[str], None]] = None,
    max_attempts: int = MAX_SELECTION_ATTEMPTS,
) -> SelectionSet:
    """Read lines until one parses, giving up after ``max_attempts``.

    Raises:
        SelectionError: When every attempt was invalid
    """
    for attempt in range(1, max_attempts + 1):
        try:
            return parse_selection(read_line(), candidate_count)
        except SelectionError as e:
            if on_error is not None:
                on_error(f'{e} ({attempt}/{max_attempts})')

    raise SelectionError(f'Failed to parse input {max_attempts} times.')
