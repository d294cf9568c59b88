"""
Human-readable rendering of MorphGNT part-of-speech and parsing codes.

The parsing code is eight characters wide, one slot per feature:
person, tense, voice, mood, case, number, gender, degree. A dash marks a
feature that does not apply, e.g. ``----NSM-`` for a nominative singular
masculine noun or ``3PAI-S--`` for a third person present active indicative
singular verb.
"""

from __future__ import annotations

import re
from typing import Dict, Tuple

PARSING_LENGTH = 8

TENSE = {"P": "Present", "I": "Imperfect", "F": "Future", "A": "Aorist", "X": "Perfect", "Y": "Pluperfect"}
VOICE = {"A": "Active", "M": "Middle", "P": "Passive"}
MOOD = {
    "I": "Indicative",
    "D": "Imperative",
    "S": "Subjunctive",
    "O": "Optative",
    "N": "Infinitive",
    "P": "Participle",
}
CASE = {"N": "Nominative", "G": "Genitive", "D": "Dative", "A": "Accusative", "V": "Vocative"}
NUMBER = {"S": "Singular", "P": "Plural"}
GENDER = {"M": "Masculine", "F": "Feminine", "N": "Neuter"}
PERSON = {"1": "1st", "2": "2nd", "3": "3rd"}

POS_LABEL: Dict[str, str] = {
    "N-": "Noun",
    "A-": "Adjective",
    "RA": "Article",
    "RP": "Personal Pronoun",
    "RR": "Relative Pronoun",
    "RD": "Demonstrative Pronoun",
    "RI": "Interrogative Pronoun",
    "RX": "Reflexive Pronoun",
    "V-": "Verb",
    "P-": "Preposition",
    "D-": "Adverb",
    "CC": "Conjunction",
    "CS": "Conjunction",
    "I-": "Interjection",
    "X-": "Particle",
}
NOMINAL_POS = {"N-", "A-", "RA", "RP", "RR", "RD", "RI", "RX"}

_WORD_PUNCT = re.compile(r"^(.*?)([,.:;·—?!]*)$", re.DOTALL)


def _join(*parts: str) -> str:
    return " ".join(part for part in parts if part)


def describe_parsing(pos: str, parsing: str) -> str:
    """Return a label such as ``"Noun — Nominative Singular Masculine"``."""
    label = POS_LABEL.get(pos, pos)
    if not parsing or len(parsing) < PARSING_LENGTH:
        return label

    person, tense, voice, mood, case, number, gender = parsing[:7]

    if pos == "V-":
        if mood == "N":
            return f"Verb — {_join(TENSE.get(tense, ''), VOICE.get(voice, ''), 'Infinitive')}"
        if mood == "P":
            features = _join(
                TENSE.get(tense, ""),
                VOICE.get(voice, ""),
                "Participle",
                CASE.get(case, ""),
                NUMBER.get(number, ""),
                GENDER.get(gender, ""),
            )
            return f"Verb — {features}"
        features = _join(
            PERSON.get(person, ""),
            TENSE.get(tense, ""),
            VOICE.get(voice, ""),
            MOOD.get(mood, ""),
            NUMBER.get(number, ""),
        )
        return f"Verb — {features}"

    if pos in NOMINAL_POS:
        features = _join(CASE.get(case, ""), NUMBER.get(number, ""), GENDER.get(gender, ""))
        return f"{label} — {features}" if features else label

    return label


def split_word_punct(text: str) -> Tuple[str, str]:
    """Split a surface form into the word and its trailing punctuation."""
    match = _WORD_PUNCT.match(text)
    if not match:
        return text, ""
    return match.group(1), match.group(2)


__all__ = ["describe_parsing", "split_word_punct", "POS_LABEL"]
