"""Bounded-lookahead line heuristics for marked declarations.

This is deliberately not a Java parser. A marker is resolved by looking
at the next few lines for one whose first token is a declaration
keyword; that line alone decides kind, name and signature. Anything the
heuristics cannot resolve is dropped by the caller.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from eli5docs.constants import (
    COMMENT_PREFIXES,
    DECLARATION_KEYWORDS,
    DECLARATION_LOOKAHEAD_LINES,
    MARKER,
    SIGNATURE_CONTINUATION_LINES,
    SIGNATURE_MODIFIERS,
    TYPE_KEYWORDS,
    UNKNOWN_NAME,
    ElementKind,
)

_MARKER_RE = re.compile(re.escape(MARKER) + r"(?!\w)")
_IDENTIFIER = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_LEADING_ANNOTATION = re.compile(r"^@[A-Za-z_][\w.]*(\s*\([^)]*\))?\s*")
_STRING_LITERAL = re.compile(r'"(?:[^"\\]|\\.)*"')
_PROMPT_ARG = re.compile(r'\bprompt\s*=\s*"((?:[^"\\]|\\.)*)"')
_INCLUDE_BODY_ARG = re.compile(r"\bincludeBody\s*=\s*(true|false)\b")
_HEADER_END = re.compile(r"[(={]")


@dataclass(frozen=True)
class MarkerArgs:
    """Arguments written on the marker annotation."""

    prompt: str | None = None
    include_body: bool = True


@dataclass(frozen=True)
class Declaration:
    """What the lookahead resolved a marker to."""

    kind: ElementKind
    name: str
    signature: str
    line_index: int  # 0-based


def find_marker(line: str) -> int:
    """Return the column of the marker in ``line``, or -1.

    Comment lines never count, so prose mentioning the annotation in
    Javadoc is not picked up.
    """
    if line.lstrip().startswith(COMMENT_PREFIXES):
        return -1
    match = _MARKER_RE.search(line)
    return match.start() if match else -1


def read_marker_args(lines: list[str], index: int) -> MarkerArgs:
    """Parse ``prompt`` and ``includeBody`` from the marker at ``index``.

    The argument list may continue on following lines until its closing
    parenthesis.
    """
    column = find_marker(lines[index])
    text = lines[index][column:] if column >= 0 else lines[index]
    last = index
    while (
        _open_parens(text) > 0
        and last + 1 < len(lines)
        and last - index < DECLARATION_LOOKAHEAD_LINES
    ):
        last += 1
        text += " " + lines[last].strip()

    prompt: str | None = None
    prompt_match = _PROMPT_ARG.search(text)
    if prompt_match:
        prompt = prompt_match.group(1).replace('\\"', '"').strip() or None

    include_body = True
    body_match = _INCLUDE_BODY_ARG.search(text)
    if body_match:
        include_body = body_match.group(1) == "true"

    return MarkerArgs(prompt=prompt, include_body=include_body)


def find_declaration(
    lines: list[str], marker_index: int
) -> Declaration | None:
    """Look at most DECLARATION_LOOKAHEAD_LINES ahead for a declaration."""
    end = min(marker_index + 1 + DECLARATION_LOOKAHEAD_LINES, len(lines))
    for i in range(marker_index + 1, end):
        text = strip_leading_annotations(lines[i].strip())
        tokens = text.split()
        if not tokens or tokens[0] not in DECLARATION_KEYWORDS:
            continue
        kind = classify_kind(text)
        if kind is ElementKind.METHOD:
            text = _join_continuation(lines, i, text)
        return Declaration(
            kind=kind,
            name=extract_name(text, kind),
            signature=build_signature(text, kind),
            line_index=i,
        )
    return None


def strip_leading_annotations(text: str) -> str:
    """Drop ``@Override``-style annotations in front of a declaration."""
    while text.startswith("@"):
        stripped = _LEADING_ANNOTATION.sub("", text, count=1)
        if stripped == text:
            break
        text = stripped
    return text


def classify_kind(text: str) -> ElementKind:
    """Decide the declaration family from keyword tokens."""
    header = _HEADER_END.split(text, maxsplit=1)[0]
    for word in _IDENTIFIER.findall(header):
        if word in TYPE_KEYWORDS:
            return TYPE_KEYWORDS[word]

    paren = text.find("(")
    equals = text.find("=")
    if paren >= 0 and (equals < 0 or paren < equals):
        return ElementKind.METHOD
    return ElementKind.FIELD


def extract_name(text: str, kind: ElementKind) -> str:
    """Pull the declared identifier out of a declaration line."""
    if kind in (ElementKind.CLASS, ElementKind.INTERFACE, ElementKind.ENUM):
        words = text.split()
        for i, word in enumerate(words[:-1]):
            if word in TYPE_KEYWORDS:
                # Generics and the opening brace fall outside the match
                match = _IDENTIFIER.match(words[i + 1])
                if match:
                    return match.group(0)
        return UNKNOWN_NAME

    if kind is ElementKind.METHOD:
        head = text[: text.find("(")]
    else:
        head = re.split(r"[=;]", text, maxsplit=1)[0]
    identifiers = _IDENTIFIER.findall(head)
    return identifiers[-1] if identifiers else UNKNOWN_NAME


def build_signature(text: str, kind: ElementKind) -> str:
    """Declaration text without modifiers, initializer or opening brace."""
    sig = text
    if kind is ElementKind.FIELD:
        sig = re.split(r"[=;]", sig, maxsplit=1)[0]
    else:
        brace = sig.find("{")
        if brace >= 0:
            sig = sig[:brace]
        sig = sig.rstrip().rstrip(";")

    words = sig.split()
    while words and words[0] in SIGNATURE_MODIFIERS:
        words.pop(0)
    return " ".join(words) or text.strip()


def _open_parens(text: str) -> int:
    bare = _STRING_LITERAL.sub('""', text)
    return bare.count("(") - bare.count(")")


def _join_continuation(lines: list[str], index: int, text: str) -> str:
    """Append lines to a method header whose parameter list wraps."""
    joined = text
    last = index
    while (
        _open_parens(joined) > 0
        and last + 1 < len(lines)
        and last - index < SIGNATURE_CONTINUATION_LINES
    ):
        last += 1
        joined += " " + lines[last].strip()
    return joined
