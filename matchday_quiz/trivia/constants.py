# matchday_quiz/trivia/constants.py

STORAGE_KEY = "quiz_state_v2_solo"

MIN_NAME_LENGTH = 2

MIN_WAGER = 0
MAX_WAGER = 3

BOOST_MULTIPLIER = 2
STREAK_BONUS_AT = 3
STREAK_BONUS = 1

# Raw answer recorded when the player skips ("don't know")
SKIPPED_TEXT = ""
SKIPPED_NUMBER = {"value": None}
