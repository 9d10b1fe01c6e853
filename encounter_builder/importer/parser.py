"""Markdown stat-block parsing for adversary and environment templates.

Each field is an independent pattern match against the whole document with a
documented fallback; a field that does not match is filled with its default,
never reported as an error. Only an unexpected exception (including record
validation) makes a parser return None.

Adversary layout:

    # ACID BURROWER

    ***Tier 1 Solo*** *A horse-sized insect with digging claws.*

    **Motives & Tactics:** Burrow, drag away, feed

    > **Difficulty:** 14 | **Thresholds:** 8/15 | **HP:** 8 | **Stress:** 3
    > **ATK:** +3 | **Claws:** Very Close | 1d12+2 phy
    > **Experience:** Tremor Sense +2, Keen Senses +3

    ## FEATURES

    ***Relentless (3) - Passive:*** The Burrower can be spotlighted up to
    three times per GM turn.

Environments share the heading and FEATURES grammar; their type comes from a
bold-italic marker containing Combat, Social, Traversal or Event.
"""

import logging
import re
from collections.abc import Callable
from pathlib import PurePosixPath
from typing import TypeVar

from encounter_builder.models import (
    AdversaryTemplate,
    EnvironmentTemplate,
    Feature,
    StandardAttack,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_NAME_RE = re.compile(r"^#[ \t]+(.+?)[ \t]*$", re.MULTILINE)
_TIER_TYPE_RE = re.compile(r"\*\*\*Tier[ \t]+(\d+)[ \t]+([A-Za-z][A-Za-z ]*?)\.?\*\*\*")
_ADVERSARY_DESCRIPTION_RE = re.compile(r"\*\*\*Tier[^\n]*?\*\*\*\s*\*(?!\*)([^*\n]+)\*")
_MOTIVES_RE = re.compile(r"\*\*Motives\s*&\s*Tactics:?\*\*:?[ \t]*(?:\n[ \t]*(?![>*]))?([^\n]+)")
_DIFFICULTY_RE = re.compile(r"\*\*Difficulty:?\*\*:?\s*(\d+)")
_THRESHOLDS_RE = re.compile(r"\*\*Thresholds:?\*\*:?\s*(\d+)\s*/\s*(\d+)")
_HP_RE = re.compile(r"\*\*HP:?\*\*:?\s*(\d+)")
_STRESS_RE = re.compile(r"\*\*Stress:?\*\*:?\s*(\d+)")
_ATTACK_MODIFIER_RE = re.compile(r"\*\*ATK:?\*\*:?\s*([+\-−]?[ \t]*\d+)")
_STANDARD_ATTACK_RE = re.compile(
    r"\*\*ATK:?\*\*:?[^|\n]*\|\s*\*\*([^*\n]+?):?\*\*:?\s*([^|\n]+?)\s*\|\s*([^\n]+)"
)
_EXPERIENCE_RE = re.compile(r"\*\*Experience:?\*\*:?[ \t]*([^\n]+)")

_ENVIRONMENT_TYPE_RE = re.compile(
    r"\*\*\*[^*\n]*?\b(Combat|Social|Traversal|Event)\b[^*\n]*?\*\*\*"
)
_ENVIRONMENT_DESCRIPTION_RE = re.compile(
    r"\*\*\*[^*\n]*?\b(?:Combat|Social|Traversal|Event)\b[^*\n]*?\*\*\*\s*\*(?!\*)([^*\n]+)\*"
)

_FEATURES_SECTION_RE = re.compile(
    r"^##[ \t]+FEATURES[ \t]*$(.*?)(?=^#{1,2}[ \t]|\Z)",
    re.MULTILINE | re.DOTALL | re.IGNORECASE,
)
_FEATURE_RE = re.compile(
    r"\*\*\*([^*\n]+?)[ \t]+-[ \t]+([^*\n]+?):?\*\*\*:?[ \t]*(.*?)"
    r"(?=\n[ \t]*(?:>[ \t]*)?\*\*\*|\Z)",
    re.DOTALL,
)

DEFAULT_ATTACK = StandardAttack()


def _extract(
    pattern: re.Pattern[str],
    text: str,
    convert: Callable[[re.Match[str]], T],
    default: T,
) -> T:
    """Return convert(match) for the first match of pattern, or default."""
    match = pattern.search(text)
    if match is None:
        return default
    return convert(match)


def _clean(value: str) -> str:
    """Strip whitespace and markdown hard-break backslashes."""
    return value.strip().rstrip("\\").strip()


def _normalise_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _signed_int(value: str) -> int:
    return int(value.replace("−", "-").replace(" ", "").replace("\t", ""))


def _name_from_file(file_name: str) -> str:
    return PurePosixPath(file_name).stem.replace("-", " ").strip()


def _parse_name(text: str, fallback_file_name: str) -> str:
    name = _extract(_NAME_RE, text, lambda m: _clean(m.group(1)), "")
    return name or _name_from_file(fallback_file_name)


def _parse_features(text: str) -> list[Feature]:
    section = _extract(_FEATURES_SECTION_RE, text, lambda m: m.group(1), "")
    features: list[Feature] = []
    for match in _FEATURE_RE.finditer(section):
        name, type_, description = (_clean(g) for g in match.groups())
        # Blockquoted feature bodies carry a leading "> " on every line.
        description = "\n".join(
            line.lstrip(">").strip() for line in description.splitlines()
        ).strip()
        if name and type_ and description:
            features.append(Feature(name=name, type=type_, description=description))
    return features


def _parse_experience(match: re.Match[str]) -> list[str]:
    return [item for item in (_clean(part) for part in match.group(1).split(",")) if item]


def _build_adversary(text: str, fallback_file_name: str) -> AdversaryTemplate:
    text = _normalise_newlines(text)
    return AdversaryTemplate(
        name=_parse_name(text, fallback_file_name),
        tier=_extract(_TIER_TYPE_RE, text, lambda m: int(m.group(1)), 1),
        type=_extract(_TIER_TYPE_RE, text, lambda m: m.group(2).strip(), "Standard"),
        description=_extract(_ADVERSARY_DESCRIPTION_RE, text, lambda m: _clean(m.group(1)), ""),
        motives=_extract(_MOTIVES_RE, text, lambda m: _clean(m.group(1)), ""),
        difficulty=_extract(_DIFFICULTY_RE, text, lambda m: int(m.group(1)), 12),
        thresholds=_extract(
            _THRESHOLDS_RE, text, lambda m: (int(m.group(1)), int(m.group(2))), (5, 10)
        ),
        hp=_extract(_HP_RE, text, lambda m: int(m.group(1)), 3),
        stress=_extract(_STRESS_RE, text, lambda m: int(m.group(1)), 3),
        attack_modifier=_extract(_ATTACK_MODIFIER_RE, text, lambda m: _signed_int(m.group(1)), 0),
        standard_attack=_extract(
            _STANDARD_ATTACK_RE,
            text,
            lambda m: StandardAttack(
                name=_clean(m.group(1)),
                range=_clean(m.group(2)),
                damage=_clean(m.group(3)),
            ),
            DEFAULT_ATTACK,
        ),
        experience=_extract(_EXPERIENCE_RE, text, _parse_experience, []),
        features=_parse_features(text),
        is_custom=False,
    )


def _build_environment(text: str, fallback_file_name: str) -> EnvironmentTemplate:
    text = _normalise_newlines(text)
    return EnvironmentTemplate(
        name=_parse_name(text, fallback_file_name),
        type=_extract(_ENVIRONMENT_TYPE_RE, text, lambda m: m.group(1), "Combat"),
        description=_extract(
            _ENVIRONMENT_DESCRIPTION_RE, text, lambda m: _clean(m.group(1)), ""
        ),
        features=_parse_features(text),
        is_custom=False,
    )


def parse_adversary_markdown(
    markdown: str, fallback_file_name: str = ""
) -> AdversaryTemplate | None:
    """Parse one adversary document. Returns None if parsing blows up."""
    try:
        return _build_adversary(markdown, fallback_file_name)
    except Exception:
        logger.warning("Could not parse adversary %r", fallback_file_name, exc_info=True)
        return None


def parse_environment_markdown(
    markdown: str, fallback_file_name: str = ""
) -> EnvironmentTemplate | None:
    """Parse one environment document. Returns None if parsing blows up."""
    try:
        return _build_environment(markdown, fallback_file_name)
    except Exception:
        logger.warning("Could not parse environment %r", fallback_file_name, exc_info=True)
        return None
