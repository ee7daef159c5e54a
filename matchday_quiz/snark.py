import random

# Refusal lines: tone + target + a reason per refused action

TONES = [
    "Hold the line",
    "Not so fast",
    "Play to the whistle",
    "Steady on",
    "Back in your half",
    "Flag's up",
    "Keep your shape",
]

TARGETS = [
    "champ",
    "gaffer",
    "captain",
    "sunday league legend",
    "armchair pundit",
    "VAR enthusiast",
    "ballon d'or hopeful",
]

ADDONS = {
    "no_game": [
        "there's no quiz running. Try /quiz_name first.",
        "you can't play a match that hasn't been scheduled.",
        "nothing to do here yet.",
    ],
    "boost_refused": [
        "the ×2 is single use and only before a regular question.",
        "no double points for you right now.",
        "that boost is spent or it's not the moment.",
    ],
    "wager_refused": [
        "wagers only happen before the final question.",
        "the final hasn't kicked off, keep your money.",
    ],
    "answer_refused": [
        "there's no open question to answer.",
        "the whistle already went on that one.",
    ],
    "mark_refused": [
        "nothing left to mark on this question.",
        "that one is already in the books.",
    ],
    "advance_refused": [
        "finish this question before moving on.",
        "the referee hasn't blown the whistle yet.",
    ],
    "name_refused": [
        "give me a name with at least two letters.",
        "even a nickname needs two characters.",
    ],
}


def get_snark(category: str) -> str:
    """
    Generate a snark line: random tone + target + category-specific addon.
    """
    tone = random.choice(TONES)
    target = random.choice(TARGETS)
    addon_list = ADDONS.get(category, ["I have no idea what you're asking for."])
    addon = random.choice(addon_list)

    return f"{tone}, {target}, {addon}"
