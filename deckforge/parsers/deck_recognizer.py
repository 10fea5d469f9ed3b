"""
Token Stream Recognizer.

Routes classified tokens to deck sections.

The "current section" is an explicit fold state: step() takes a state
and one token and returns the next state plus what to emit. recognize()
folds step() over the whole token sequence, left to right, with no
look-ahead. Output depends only on line order.

INVARIANTS:
- The cursor starts at Section.MAIN
- Only a SectionHeaderToken naming a known section moves the cursor
- Blank and comment tokens are dropped here
- Tokens are passed through unchanged; the section travels beside them
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from deckforge.models.deck import Diagnostic, DiagnosticKind
from deckforge.models.token import (
    BlankToken,
    CardToken,
    CommentToken,
    MetadataToken,
    Section,
    SectionHeaderToken,
    Token,
    UnrecognizedToken,
)
from deckforge.parsers.line_classifier import classify_text


@dataclass(frozen=True, slots=True)
class RecognizerState:
    """Fold state threaded through the recognizer."""

    section: Section = Section.MAIN


@dataclass(frozen=True, slots=True)
class RoutedToken:
    """A content-bearing token and the section active when it was read."""

    token: CardToken | MetadataToken
    section: Section


@dataclass
class RecognizedStream:
    """
    Output of a recognizer pass.

    Attributes:
        routed: Card and metadata tokens in input order
        diagnostics: Unrecognized lines and unknown headers
        final_section: Cursor after the last line
    """

    routed: list[RoutedToken] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    final_section: Section = Section.MAIN

    @property
    def cards(self) -> list[RoutedToken]:
        return [item for item in self.routed if isinstance(item.token, CardToken)]


@dataclass(frozen=True, slots=True)
class StepResult:
    state: RecognizerState
    emitted: RoutedToken | None = None
    diagnostic: Diagnostic | None = None


def step(state: RecognizerState, token: Token) -> StepResult:
    """
    Advance the recognizer by one token.

    Pure: the same state and token always give the same result.
    """
    if isinstance(token, (BlankToken, CommentToken)):
        return StepResult(state=state)

    if isinstance(token, SectionHeaderToken):
        if token.section is Section.UNKNOWN:
            return StepResult(
                state=state,
                diagnostic=Diagnostic(
                    line_number=token.line_number,
                    kind=DiagnosticKind.UNKNOWN_SECTION,
                    message=(
                        f"Unknown section header {token.text.strip()!r}; "
                        f"cards stay in {state.section.value}"
                    ),
                ),
            )
        return StepResult(state=RecognizerState(section=token.section))

    if isinstance(token, CardToken):
        section = token.section_override or state.section
        return StepResult(state=state, emitted=RoutedToken(token=token, section=section))

    if isinstance(token, MetadataToken):
        return StepResult(state=state, emitted=RoutedToken(token=token, section=state.section))

    if isinstance(token, UnrecognizedToken):
        return StepResult(
            state=state,
            diagnostic=Diagnostic(
                line_number=token.line_number,
                kind=DiagnosticKind.UNRECOGNIZED_LINE,
                message=f"Could not recognize line: {token.text.strip()!r}",
            ),
        )

    raise TypeError(f"Unsupported token type: {type(token).__name__}")


def recognize(
    tokens: Iterable[Token], initial: RecognizerState | None = None
) -> RecognizedStream:
    """
    Fold step() over a token sequence.

    Args:
        tokens: Classified tokens in line order
        initial: Starting state (defaults to the main section)

    Returns:
        RecognizedStream with routed tokens and diagnostics
    """
    state = initial or RecognizerState()
    stream = RecognizedStream()

    for token in tokens:
        result = step(state, token)
        state = result.state
        if result.emitted is not None:
            stream.routed.append(result.emitted)
        if result.diagnostic is not None:
            stream.diagnostics.append(result.diagnostic)

    stream.final_section = state.section
    return stream


def recognize_text(raw_input: str) -> RecognizedStream:
    """Classify and recognize deck text in one call."""
    return recognize(classify_text(raw_input))
