"""
Hook extraction, normalization and grouping.

A "hook" is the opening sentence (or line) of an ad's creative body. Hooks
are compared by a normalized key and grouped across ads so the most-reached
angles surface first.
"""

import re
from typing import List, Dict, Any, Iterable, Set, Union

from .cleaner import coerce_ad
from .types import AdRecord, RawAdHook, HookGroup

# ============================================================
# Constants
# ============================================================

SENTENCE_MIN_LENGTH = 10
FIRST_LINE_MAX_LENGTH = 150
TRUNCATE_LENGTH = 100
MIN_KEY_LENGTH = 5

# Trailing (?:\s|$) keeps "3.5" and "U.S." from ending a sentence
FIRST_SENTENCE_REGEX = re.compile(r"^(.+?[.!?])(?:\s|$)")

EMOJI_REGEX = re.compile(
    "["
    "\U0001F300-\U0001F5FF"  # symbols & pictographs
    "\U0001F600-\U0001F64F"  # emoticons
    "\U0001F680-\U0001F6FF"  # transport & map
    "\U0001F700-\U0001F9FF"  # alchemical .. supplemental symbols
    "\U0001FA70-\U0001FAFF"  # extended pictographs
    "\U0001F1E6-\U0001F1FF"  # regional indicators (flags)
    "\u2600-\u27BF"  # misc symbols + dingbats
    "\uFE00-\uFE0F"  # variation selectors
    "\u200D"  # zero-width joiner
    "\u20E3"  # keycap combiner
    "\U000E0020-\U000E007F"  # tag characters
    "\u231A-\u231B"
    "\u23E9-\u23F3"
    "\u23F8-\u23FA"
    "\u25AA-\u25AB"
    "\u25B6"
    "\u25C0"
    "\u25FB-\u25FE"
    "\u2B05-\u2B07"
    "\u2B1B-\u2B1C"
    "\u2B50"
    "\u2B55"
    "]"
)
NON_WORD_REGEX = re.compile(r"[^\w\s]")
WHITESPACE_REGEX = re.compile(r"\s+")


# ============================================================
# Extraction
# ============================================================


def extract_hook(text: str) -> str:
    """
    Extract the opening hook from ad creative text.

    1. First sentence ending in . ! or ? (period-terminated sentences must be
       at least 10 chars so "3.5" or "U.S." don't cut it short)
    2. Fallback: first line, up to 150 chars
    3. Last resort: first 100 chars
    """
    trimmed = (text or "").strip()
    if not trimmed:
        return ""

    match = FIRST_SENTENCE_REGEX.match(trimmed)
    if match:
        sentence = match.group(1).strip()
        if len(sentence) >= SENTENCE_MIN_LENGTH or not sentence.endswith("."):
            # "Buy now!" is a hook even though it is under the floor
            return sentence

    # Ads often use line breaks instead of punctuation
    first_line = trimmed.split("\n")[0].strip()
    if 0 < len(first_line) <= FIRST_LINE_MAX_LENGTH:
        return first_line

    return trimmed[:TRUNCATE_LENGTH].strip()


def normalize_hook(text: str) -> str:
    """Comparison key: lowercase, no emoji, no punctuation, single spaces."""
    key = text.lower()
    key = EMOJI_REGEX.sub("", key)
    key = NON_WORD_REGEX.sub("", key)
    key = WHITESPACE_REGEX.sub(" ", key)
    return key.strip()


# ============================================================
# Grouping
# ============================================================


def group_hooks(hooks: Iterable[RawAdHook]) -> List[HookGroup]:
    groups: Dict[str, Dict[str, Any]] = {}

    for hook in hooks:
        key = normalize_hook(hook.hookText)
        if len(key) < MIN_KEY_LENGTH:
            continue

        if key not in groups:
            groups[key] = {"hookText": hook.hookText, "adIds": [], "totalReach": 0.0}
        groups[key]["adIds"].append(hook.adId)
        groups[key]["totalReach"] += hook.reach

    result = [
        HookGroup(
            hookText=g["hookText"],
            normalizedKey=key,
            frequency=len(g["adIds"]),
            totalReach=g["totalReach"],
            avgReachPerAd=g["totalReach"] / len(g["adIds"]),
            adIds=g["adIds"],
        )
        for key, g in groups.items()
    ]

    # sorted() is stable: equal reach keeps first-seen order
    return sorted(result, key=lambda g: g.totalReach, reverse=True)


def extract_hooks_from_ads(ads: Iterable[Union[AdRecord, Dict[str, Any]]]) -> List[HookGroup]:
    """
    Extracts hooks from every creative body of every ad and groups them.

    Bodies of the same ad that normalize to the same key count once, so an
    ad running several near-identical variants doesn't inflate its group.
    """
    raw_hooks: List[RawAdHook] = []
    seen_by_ad: Dict[str, Set[str]] = {}

    for raw in ads:
        ad = coerce_ad(raw)
        if ad is None:
            continue

        reach = ad.reach or 0.0
        # Keyed by id so a record repeated in the input still counts once
        seen = seen_by_ad.setdefault(ad.id, set())
        for body in ad.creativeBodies:
            hook_text = extract_hook(body)
            if not hook_text:
                continue

            key = normalize_hook(hook_text)
            if len(key) < MIN_KEY_LENGTH or key in seen:
                continue
            seen.add(key)
            raw_hooks.append(RawAdHook(adId=ad.id, hookText=hook_text, reach=reach))

    return group_hooks(raw_hooks)
