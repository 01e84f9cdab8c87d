"""
Puff Backend: Domain Vocabularies
=================================

What:  Fixed vocabularies shared by the client and the server: strain types,
       consumption methods, effects, moods, recommendation vibes, symptoms
       and the tolerance-break guide.
How:   Plain module-level constants. Enums are used where a value is stored
       in the database (strain type, method); the rest are lookup tables.
Who:   Schemas validate against these; services score and aggregate with them;
       GET /api/catalog returns them so the client renders the same lists.
"""

import enum
from typing import Dict, List, Optional, TypedDict


class StrainType(str, enum.Enum):
    SATIVA = "sativa"
    INDICA = "indica"
    HYBRID = "hybrid"


class ConsumptionMethod(str, enum.Enum):
    SMOKE = "smoke"
    VAPE = "vape"
    EDIBLE = "edible"
    TINCTURE = "tincture"
    TOPICAL = "topical"
    DAB = "dab"


STRAIN_TYPES: Dict[str, Dict[str, str]] = {
    StrainType.SATIVA.value: {"label": "Sativa", "color": "#F59E0B", "emoji": "☀️"},
    StrainType.INDICA.value: {"label": "Indica", "color": "#8B5CF6", "emoji": "🌙"},
    StrainType.HYBRID.value: {"label": "Hybrid", "color": "#10B981", "emoji": "🌿"},
}

METHODS: Dict[str, Dict[str, str]] = {
    ConsumptionMethod.SMOKE.value: {"label": "Smoke", "emoji": "🚬"},
    ConsumptionMethod.VAPE.value: {"label": "Vape", "emoji": "💨"},
    ConsumptionMethod.EDIBLE.value: {"label": "Edible", "emoji": "🍪"},
    ConsumptionMethod.TINCTURE.value: {"label": "Tincture", "emoji": "💧"},
    ConsumptionMethod.TOPICAL.value: {"label": "Topical", "emoji": "🧴"},
    ConsumptionMethod.DAB.value: {"label": "Dab", "emoji": "🔥"},
}

EFFECTS: List[str] = [
    "Relaxed", "Happy", "Euphoric", "Creative", "Focused",
    "Energetic", "Uplifted", "Sleepy", "Hungry", "Talkative",
    "Giggly", "Pain Relief", "Stress Relief", "Anxiety Relief",
    "Aroused", "Tingly", "Dry Mouth", "Dry Eyes", "Paranoid", "Dizzy",
]

MOOD_EMOJIS: Dict[int, str] = {
    1: "😫",
    2: "😕",
    3: "😐",
    4: "😊",
    5: "😄",
}


# ── Recommendation Vibes ──────────────────────────────────────────────────

class Vibe(TypedDict):
    id: str
    label: str
    icon: str
    keywords: List[str]
    strain_types: List[str]


VIBES: List[Vibe] = [
    {"id": "chill", "label": "chill & relax", "icon": "😌",
     "keywords": ["Relaxed", "Sleepy", "Stress Relief"], "strain_types": ["indica", "hybrid"]},
    {"id": "creative", "label": "creative flow", "icon": "🎨",
     "keywords": ["Creative", "Euphoric", "Focused"], "strain_types": ["sativa", "hybrid"]},
    {"id": "social", "label": "social vibes", "icon": "🎉",
     "keywords": ["Talkative", "Giggly", "Happy", "Uplifted"], "strain_types": ["sativa", "hybrid"]},
    {"id": "focus", "label": "lock in & focus", "icon": "🎯",
     "keywords": ["Focused", "Energetic", "Creative"], "strain_types": ["sativa"]},
    {"id": "sleep", "label": "knock out", "icon": "😴",
     "keywords": ["Sleepy", "Relaxed"], "strain_types": ["indica"]},
    {"id": "pain", "label": "pain relief", "icon": "💆",
     "keywords": ["Pain Relief", "Relaxed", "Tingly"], "strain_types": ["indica", "hybrid"]},
    {"id": "energy", "label": "energize", "icon": "⚡",
     "keywords": ["Energetic", "Uplifted", "Happy"], "strain_types": ["sativa"]},
    {"id": "munchies", "label": "appetite boost", "icon": "🍕",
     "keywords": ["Hungry", "Happy", "Relaxed"], "strain_types": ["indica", "hybrid"]},
]


def find_vibe(vibe_id: str) -> Optional[Vibe]:
    return next((vibe for vibe in VIBES if vibe["id"] == vibe_id), None)


# ── Medical Symptoms ──────────────────────────────────────────────────────
# Order matters: the doctor report lists symptoms in this order.

SYMPTOMS: List[Dict[str, str]] = [
    {"id": "pain", "label": "Pain", "icon": "🤕", "color": "#EF4444"},
    {"id": "anxiety", "label": "Anxiety", "icon": "😰", "color": "#F59E0B"},
    {"id": "sleep", "label": "Sleep Issues", "icon": "😴", "color": "#6366F1"},
    {"id": "appetite", "label": "Appetite", "icon": "🍽️", "color": "#10B981"},
    {"id": "nausea", "label": "Nausea", "icon": "🤢", "color": "#8B5CF6"},
    {"id": "stress", "label": "Stress", "icon": "😤", "color": "#EC4899"},
    {"id": "depression", "label": "Low Mood", "icon": "😔", "color": "#6B7280"},
    {"id": "focus", "label": "Focus Issues", "icon": "🎯", "color": "#14B8A6"},
]

SYMPTOM_IDS = {symptom["id"] for symptom in SYMPTOMS}


# ── Tolerance Break Guide ─────────────────────────────────────────────────

BENEFITS_TIMELINE: List[Dict] = [
    {"day": 1, "title": "Withdrawal peaks",
     "description": "Irritability, sleep issues, cravings are normal. Stay strong!"},
    {"day": 2, "title": "Sleep improving",
     "description": "REM sleep starts returning. Dreams may be vivid."},
    {"day": 3, "title": "Appetite normalizing",
     "description": "Eating without being high might feel weird at first."},
    {"day": 7, "title": "Mental clarity",
     "description": "Brain fog lifting. Short-term memory improving."},
    {"day": 14, "title": "Mood stabilizing",
     "description": "Natural dopamine regulation kicking in."},
    {"day": 21, "title": "Tolerance dropping",
     "description": "CB1 receptors resetting. You'll feel more when you return."},
    {"day": 30, "title": "Full reset",
     "description": "Significant tolerance reduction. Next session will hit different."},
]

COPING_TIPS: List[str] = [
    "💧 Stay hydrated, it helps flush your system",
    "🏃 Exercise releases natural endorphins",
    "😴 Melatonin can help with sleep first few nights",
    "🍵 CBD can ease withdrawal without getting high",
    "📱 Delete dealer contacts temporarily",
    "🧘 Meditation helps with cravings",
    "📝 Journal how you feel, it passes faster than you think",
    "🎮 Keep busy with hobbies",
]

BREAK_DURATIONS: List[int] = [3, 7, 14, 21, 30]


def normalize_effects(effects: Optional[List[str]]) -> List[str]:
    """
    Drop duplicates (keeping first occurrence) and reject unknown effect names.

    Raises ValueError so pydantic validators can surface it as a 422.
    """
    result: List[str] = []
    for effect in effects or []:
        if effect not in EFFECTS:
            raise ValueError(f"Unknown effect '{effect}'. Must be one of: {', '.join(EFFECTS)}")
        if effect not in result:
            result.append(effect)
    return result
