"""Static constants and lookup tables for exmatch."""

from __future__ import annotations

YOUTUBE_API_BASE = "https://www.googleapis.com/youtube/v3"
YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
YOUTUBE_THUMBNAIL_URL = "https://i.ytimg.com/vi/{video_id}/hqdefault.jpg"

FLEXIBILITY = "flexibility"
WARMUP = "warmup"
CARDIO = "cardio"
STRENGTH = "strength"
GENERAL = "general"

CATEGORIES = (FLEXIBILITY, WARMUP, CARDIO, STRENGTH, GENERAL)

INTENSITY_MODIFIERS = ("light", "dynamic", "deep", "static", "moderate", "brisk")

# Longer spellings first so "on treadmill" wins over "treadmill".
SYNONYM_GROUPS = [
    ("treadmill", ["on treadmill", "treadmill"]),
    ("jogging", ["jogging", "running"]),
    ("stretch", ["stretching", "stretch"]),
    ("breathing", ["breathing", "breath"]),
    ("circles", ["circles", "circle"]),
]

# Precedence order matters: first matching category wins.
CATEGORY_RULES = [
    (
        FLEXIBILITY,
        [
            "stretch",
            "breath",
            "flexibility",
            "cooldown",
            "cool down",
            "cool-down",
            "relaxation",
            "yoga",
            "pose",
            "cat-cow",
            "child",
        ],
    ),
    (
        WARMUP,
        ["circle", "swing", "activation", "mobility", "dynamic", "warm"],
    ),
    (
        CARDIO,
        ["treadmill", "jog", "run", "bike", "cycling", "cardio", "walk"],
    ),
    (
        STRENGTH,
        [
            "press",
            "squat",
            "curl",
            "row",
            "deadlift",
            "bench",
            "barbell",
            "dumbbell",
            "pull-up",
            "pullup",
            "push-up",
            "pushup",
            "band",
            "weight",
            "lift",
        ],
    ),
]

SLOT_CATEGORIES = {
    "warmup": WARMUP,
    "warm_up": WARMUP,
    "cardio": CARDIO,
    "cooldown": FLEXIBILITY,
    "cool_down": FLEXIBILITY,
    "main": STRENGTH,
}

# Movement contexts used to gate fuzzy matches.
BREATHING_CONTEXT = ("breathing", "breath")
STRETCH_CONTEXT = ("stretch",)
CARDIO_CONTEXT = ("jogging", "treadmill", "running")
ARM_CONTEXT = ("arm", "circles")

MATCH_THRESHOLD = 70
EXACT_MATCH_SCORE = 100
NORMALIZED_MATCH_SCORE = 95
OVERLAP_BANDS = [(0.8, 85), (0.6, 75), (0.4, 60), (0.2, 40)]
ARM_GATE_MIN_OVERLAP = 0.5
MIN_WORD_LENGTH = 3

QUERY_TEMPLATES = {
    STRENGTH: [
        "{name} exercise form",
        "{name} proper technique",
        "how to do {name}",
        "{name} tutorial",
        "{name} demonstration",
    ],
    CARDIO: [
        "{name} workout",
        "{name} exercise",
        "{name} technique",
        "how to {name}",
        "{name} form",
    ],
    FLEXIBILITY: [
        "{name} technique",
        "{name} exercise",
        "how to do {name}",
        "{name} proper form",
        "{name} demonstration",
    ],
    WARMUP: [
        "{name} exercise",
        "{name} warmup",
        "how to do {name}",
        "{name} technique",
        "{name} demonstration",
    ],
}
GENERAL_QUERY_TEMPLATES = ["{name} exercise", "how to do {name}"]

MAX_VIDEO_SECONDS = 300
REJECTED_SCORE = -100
DURATION_BANDS = [(60, 30), (30, 20), (0, 10)]

TITLE_KEYWORD_BONUSES = {
    STRENGTH: [
        (["form", "technique"], 25),
        (["exercise", "workout"], 20),
        (["tutorial", "how to"], 15),
        (["beginner", "proper"], 10),
    ],
    CARDIO: [
        (["workout", "exercise"], 25),
        (["technique", "form"], 20),
        (["cardio", "training"], 15),
    ],
    FLEXIBILITY: [
        (["stretch", "flexibility"], 25),
        (["technique", "proper"], 20),
        (["exercise", "how to"], 15),
    ],
    WARMUP: [
        (["warmup", "warm up"], 25),
        (["exercise", "movement"], 20),
        (["technique", "form"], 15),
    ],
    GENERAL: [
        (["exercise"], 10),
        (["workout"], 8),
    ],
}

TITLE_PENALTIES = {
    "fail": 50,
    "funny": 30,
    "compilation": 25,
    "reaction": 40,
    "challenge": 20,
    "review": 25,
    "full workout": 20,
}

PREFERRED_CHANNELS = [
    "Athlean-X",
    "FitnessBlender",
    "Calisthenic Movement",
    "ScottHermanFitness",
    "Jeremy Ethier",
    "Jeff Nippard",
    "Bodybuilding.com",
    "HASfit",
    "Yoga with Adriene",
    "MadFit",
]
PREFERRED_CHANNEL_BONUS = 40

VIEW_COUNT_THRESHOLD = 10_000
VIEW_COUNT_BONUS = 10
LIKE_COUNT_THRESHOLD = 100
LIKE_COUNT_BONUS = 5

EARLY_EXIT_SCORE = 40
CONFIDENT_VIDEO_SCORE = 70

DEFAULT_EXERCISE_FIELDS = {
    "difficulty": "beginner",
    "muscle_groups": ["general"],
    "equipment": ["none"],
}

CATEGORY_LABELS = {
    FLEXIBILITY: "Flexibility",
    WARMUP: "Warm-up",
    CARDIO: "Cardio",
    STRENGTH: "Strength",
    GENERAL: "General",
}
