"""Parsing and rendering of ``Co-authored-by`` commit trailers.

A trailer is exactly one line of the form ``Co-authored-by: Name <email>``.
Lines that do not have this shape are not trailers and are left alone.
"""

import logging
import re
from collections.abc import Iterable
from typing import Optional

from ..models import Trailer

logger = logging.getLogger(__name__)

TRAILER_KEY = "Co-authored-by"

# Matched against a single stripped line. The key is case-insensitive per git
# convention; the email is everything between "<" and the ">" ending the line.
_CO_AUTHOR_RE = re.compile(
    r"Co-authored-by:\s*(?P<name>.*?\S)\s*<(?P<email>[^<>]+)>",
    re.IGNORECASE,
)

# git's cut line, e.g. "# ------------------------ >8 ------------------------"
_SCISSORS_RE = re.compile(r"# -+ >8 -+")


def parse_trailer_line(line: str) -> Optional[Trailer]:
    """Parse one line, returning ``None`` when it is not a trailer."""
    match = _CO_AUTHOR_RE.fullmatch(line.strip())
    if match is None:
        return None
    return Trailer(name=match.group("name"), email=match.group("email").strip())


def parse_trailers(message: str) -> list[Trailer]:
    """Extract every Co-authored-by trailer from a commit message.

    Args:
        message: Raw commit message text (may be multi-line)

    Returns:
        Trailers in order of appearance, duplicates included. Empty list when
        no trailers are present.

    Example::

        >>> parse_trailers("Fix bug\\n\\nCo-authored-by: Alice <alice@example.com>")
        [Trailer(name='Alice', email='alice@example.com')]
    """
    trailers = []
    for line in message.splitlines():
        trailer = parse_trailer_line(line)
        if trailer is not None:
            trailers.append(trailer)
    return trailers


def dedupe_trailers(trailers: Iterable[Trailer]) -> list[Trailer]:
    """Drop exact duplicates, keeping the first occurrence of each.

    Names and emails are compared as plain strings, not normalized.
    """
    seen: set[Trailer] = set()
    unique = []
    for trailer in trailers:
        if trailer in seen:
            continue
        seen.add(trailer)
        unique.append(trailer)
    return unique


def render_trailer(trailer: Trailer) -> str:
    return f"{TRAILER_KEY}: {trailer.name} <{trailer.email}>"


def render_trailers(trailers: Iterable[Trailer]) -> str:
    """Render trailers one per line, newline terminated, without duplicates."""
    return "".join(f"{render_trailer(trailer)}\n" for trailer in dedupe_trailers(trailers))


def split_scissors(message: str) -> tuple[str, str]:
    """Split a message file at git's scissors line.

    ``git commit -v`` appends the diff below the scissors line and discards
    everything from that line on.

    Returns:
        The part above the scissors line and the rest, verbatim. The rest is
        empty when there is no scissors line.
    """
    offset = 0
    for line in message.splitlines(keepends=True):
        if _SCISSORS_RE.fullmatch(line.rstrip("\r\n")):
            return message[:offset], message[offset:]
        offset += len(line)
    return message, ""


def merge_trailers(message: str, trailers: Iterable[Trailer]) -> str:
    """Append trailers to a commit message without duplicating existing ones.

    Existing trailer lines are pulled out of the message and re-rendered,
    together with the new ones, as a single block after the message body.
    Trailing ``#`` comment lines (as git writes them into the message file)
    stay at the end, and the scissors line with everything below it is kept
    as is. When the message has no body yet, the block is preceded by two
    empty lines like the commit template, leaving the subject line free.

    Args:
        message: Commit message text
        trailers: Trailers to add

    Returns:
        The merged message
    """
    head, cut = split_scissors(message)
    existing = parse_trailers(head)
    block = render_trailers([*existing, *trailers])
    if not block:
        return message

    body = [line for line in head.splitlines() if parse_trailer_line(line) is None]
    comments: list[str] = []
    while body and (body[-1].startswith("#") or not body[-1].strip()):
        comments.insert(0, body.pop())
    while comments and not comments[0].strip():
        comments.pop(0)

    logger.debug("Merging %d existing trailer(s) into message", len(existing))

    if body:
        merged = "\n".join(body) + "\n\n" + block
    else:
        merged = "\n\n" + block
    if comments:
        merged += "\n" + "\n".join(comments) + "\n"
    if cut:
        if not comments:
            merged += "\n"
        merged += cut
    return merged
