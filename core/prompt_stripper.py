"""Heuristic shell prompt stripping

The prompt is taken to end at the rightmost prompt delimiter that is
immediately followed by whitespace. This is a best-effort heuristic:
command text that itself contains a delimiter followed by whitespace
(`echo 50% done`, `cat a > b`) is cut at that point. General prompt
detection is not attempted.
"""

import re
from typing import Optional

PROMPT_DELIMITERS = '%$#>❯➜→»λ'

_PROMPT_END_RE = re.compile('[' + re.escape(PROMPT_DELIMITERS) + r']\s')


def find_prompt_end(line: str) -> Optional[int]:
    """Return the index just past the prompt, or None if no prompt is found"""
    last = None
    for last in _PROMPT_END_RE.finditer(line):
        pass
    return last.end() if last else None


def strip_prompt(line: Optional[str], keep_trailing: bool = False) -> Optional[str]:
    """Return the user-typed part of `line`, or None if nothing was typed

    Args:
        line: A logical line as read from the screen
        keep_trailing: Preserve trailing whitespace, used when the line was
            cut at the cursor so a just-typed space is not lost

    Returns:
        The command text, or None for a bare prompt or a blank line
    """
    if line is None:
        return None

    prompt_end = find_prompt_end(line)
    candidate = line if prompt_end is None else line[prompt_end:]

    if not candidate.strip():
        return None

    candidate = candidate.lstrip()
    return candidate if keep_trailing else candidate.rstrip()
