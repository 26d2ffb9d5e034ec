"""Cue catalog: detectability weight of each phishing indicator.

Weights follow the NIST Phish Scale idea of observable cues: 1 = obvious,
2 = moderate, 3 = subtle. Premise-alignment factors make a message fit the
recipient's context and so raise difficulty.
"""
from types import MappingProxyType
from typing import NamedTuple

OBVIOUS = 1
MODERATE = 2
SUBTLE = 3

UNKNOWN_CUE_WEIGHT = MODERATE

CUE_CATEGORIES = ("sender", "content", "link", "emotional", "context")


class CueWeight(NamedTuple):
    cue: str
    weight: int
    category: str
    description: str


class PremiseFactor(NamedTuple):
    factor: str
    weight: int
    description: str


CUE_WEIGHTS: tuple[CueWeight, ...] = (
    # Sender
    CueWeight("suspicious domain", OBVIOUS, "sender", "Domain doesn't match claimed sender"),
    CueWeight("external sender", OBVIOUS, "sender", "Message from outside organization"),
    CueWeight("reply-to mismatch", MODERATE, "sender", "Reply-to differs from sender address"),
    CueWeight("look-alike domain", SUBTLE, "sender", "Domain is similar but not identical"),
    CueWeight("spoofed internal name", SUBTLE, "sender", "Name appears internal but isn't"),
    CueWeight("fake sender display name", MODERATE, "sender", "Display name doesn't match email"),
    # Content
    CueWeight("generic greeting", OBVIOUS, "content", "Uses 'Dear Customer' instead of name"),
    CueWeight("spelling errors", OBVIOUS, "content", "Contains misspellings/grammar errors"),
    CueWeight("unusual request", MODERATE, "content", "Request that's not part of normal business"),
    CueWeight("gift cards", OBVIOUS, "content", "Requests gift card purchase"),
    CueWeight("asking for banking details", OBVIOUS, "content", "Requests financial information"),
    CueWeight("wire transfer request", OBVIOUS, "content", "Requests wire/ACH transfer"),
    CueWeight("password request", OBVIOUS, "content", "Asks for password or credentials"),
    CueWeight("keep it secret", MODERATE, "content", "Asks to keep communication confidential"),
    CueWeight("unexpected booking", MODERATE, "content", "Booking/reservation not made by user"),
    CueWeight("too good to be true", OBVIOUS, "content", "Offers unrealistic rewards/prizes"),
    CueWeight("financial lure", MODERATE, "content", "Promises money/bonus as incentive"),
    # Link
    CueWeight("suspicious link domain", OBVIOUS, "link", "Link URL doesn't match claimed destination"),
    CueWeight("external link", MODERATE, "link", "Link goes to external site"),
    CueWeight("external SharePoint link", SUBTLE, "link", "SharePoint URL isn't official"),
    CueWeight("qr code", MODERATE, "link", "Contains QR code to scan"),
    CueWeight("url shortener", MODERATE, "link", "Uses URL shortening service"),
    CueWeight("credential harvesting", MODERATE, "link", "Link leads to fake login page"),
    # Emotional manipulation
    CueWeight("urgency", OBVIOUS, "emotional", "Creates sense of immediate action needed"),
    CueWeight("urgent language", OBVIOUS, "emotional", "Uses urgent/alarming words"),
    CueWeight("threat of suspension", OBVIOUS, "emotional", "Threatens account will be suspended"),
    CueWeight("threat of account lock", OBVIOUS, "emotional", "Threatens account will be locked"),
    CueWeight("fear-based urgency", OBVIOUS, "emotional", "Uses fear to prompt action"),
    CueWeight("deadline pressure", MODERATE, "emotional", "Imposes tight deadline"),
    CueWeight("manufactured urgency", MODERATE, "emotional", "Creates false sense of urgency"),
    CueWeight("manufactured deadline", MODERATE, "emotional", "Creates artificial deadline"),
    CueWeight("foreign location scare", OBVIOUS, "emotional", "Claims activity from suspicious location"),
    CueWeight("callback pressure", MODERATE, "emotional", "Pressures immediate callback"),
    CueWeight("authority pressure", SUBTLE, "emotional", "Claims to be from authority figure"),
    # Context (requires knowing how the business normally works)
    CueWeight("unsolicited request", MODERATE, "context", "Request not initiated by recipient"),
    CueWeight("text codes to personal number", OBVIOUS, "context", "Asks to text info to personal phone"),
    CueWeight("fake CEO", MODERATE, "context", "Impersonates executive"),
    CueWeight("fake Concur domain", MODERATE, "context", "Uses fake travel/expense domain"),
    CueWeight("fake vendor", MODERATE, "context", "Impersonates known vendor"),
    CueWeight("invoice without context", MODERATE, "context", "Invoice with no prior transaction"),
    CueWeight("automated bot pretense", MODERATE, "context", "Claims to be automated system"),
    CueWeight("fake security alert", MODERATE, "context", "Fake security notification"),
    CueWeight("MFA phishing", SUBTLE, "context", "Attempts to capture MFA codes"),
    CueWeight("procurement request", MODERATE, "context", "Request related to purchasing"),
    CueWeight("deadline mention", MODERATE, "context", "Mentions upcoming deadline"),
)

PREMISE_ALIGNMENT_FACTORS: tuple[PremiseFactor, ...] = (
    PremiseFactor("expected_communication", 1, "Type of message recipient normally receives"),
    PremiseFactor("recent_event_tie_in", 1, "References recent real event"),
    PremiseFactor("internal_process_knowledge", 2, "Shows knowledge of internal processes"),
    PremiseFactor("correct_branding", 1, "Uses accurate logos/formatting"),
    PremiseFactor("personalization", 1, "Uses recipient's actual name/details"),
    PremiseFactor("role_appropriate", 1, "Request matches recipient's job role"),
)

_CUES_BY_LABEL = MappingProxyType({c.cue.lower(): c for c in CUE_WEIGHTS})
_FACTORS_BY_NAME = MappingProxyType({f.factor: f for f in PREMISE_ALIGNMENT_FACTORS})


class CueAnalysis(NamedTuple):
    obvious: list[CueWeight]
    moderate: list[CueWeight]
    subtle: list[CueWeight]
    unknown: list[str]


def lookup_cue(label: str) -> CueWeight | None:
    """Return the catalog entry for a cue label (case-insensitive), or None."""
    return _CUES_BY_LABEL.get(label.strip().lower())


def cue_weight(label: str) -> int:
    """Detectability weight of a cue; cues missing from the catalog count as moderate."""
    entry = lookup_cue(label)
    return entry.weight if entry else UNKNOWN_CUE_WEIGHT


def _normalize_factor(name: str) -> str:
    return name.strip().lower().replace("-", "_").replace(" ", "_")


def lookup_premise_factor(name: str) -> PremiseFactor | None:
    return _FACTORS_BY_NAME.get(_normalize_factor(name))


def analyze_cues(cues) -> CueAnalysis:
    """Split a cue list into obvious / moderate / subtle catalog entries and unknown labels."""
    result = CueAnalysis([], [], [], [])
    for label in cues:
        entry = lookup_cue(label)
        if entry is None:
            result.unknown.append(label)
        elif entry.weight == OBVIOUS:
            result.obvious.append(entry)
        elif entry.weight == MODERATE:
            result.moderate.append(entry)
        else:
            result.subtle.append(entry)
    return result
