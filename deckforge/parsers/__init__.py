from deckforge.parsers.deck_recognizer import (
    RecognizedStream,
    RecognizerState,
    RoutedToken,
    recognize,
    recognize_text,
    step,
)
from deckforge.parsers.line_classifier import LineClassifier, classify_line, classify_text

__all__ = [
    "LineClassifier",
    "RecognizedStream",
    "RecognizerState",
    "RoutedToken",
    "classify_line",
    "classify_text",
    "recognize",
    "recognize_text",
    "step",
]
