# scripts/init_db.py
# Create the game_state table. Any extra arguments are storage prefixes
# whose saved games should be wiped, e.g.
#   python scripts/init_db.py quiz_state_v2_solo:1234:5678:9012

import asyncio
import sys

from matchday_quiz.db import init_schema
from matchday_quiz.trivia.persistence import PostgresStore, clear_state


async def main(prefixes):
    await init_schema()

    store = PostgresStore()
    for prefix in prefixes:
        await clear_state(store, prefix)
        print(f"🧹 Cleared saved game {prefix}")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:]))
