# scripts/check_catalogs.py
# Load every catalog the question feed references and report what's in it.

import asyncio
import sys

from matchday_quiz.catalog.registry import CatalogRegistry
from matchday_quiz.catalog.sources import HttpCatalogSource, JsonDirectorySource
from matchday_quiz.config import CATALOG_BASE_URL, CATALOG_DIR, QUESTIONS_PATH
from matchday_quiz.trivia.questions import MODE_CATALOG, load_questions
from matchday_quiz.trivia.validators import validate_answer


async def main() -> int:
    source = HttpCatalogSource(CATALOG_BASE_URL) if CATALOG_BASE_URL else JsonDirectorySource(CATALOG_DIR)
    registry = CatalogRegistry(source)
    questions = load_questions(QUESTIONS_PATH)

    problems = 0
    for i, q in enumerate(questions, start=1):
        if q.answer_mode != MODE_CATALOG:
            continue
        index = await registry.get_index(q.catalog)
        print(f"Q{i}: catalog {q.catalog!r} has {len(index)} items")
        if not index.items:
            print(f"⚠ Q{i}: catalog {q.catalog!r} is empty")
            problems += 1
            continue
        # the reference answer itself must validate
        if q.answer is not None:
            verdict = await validate_answer(q, str(q.answer), registry)
            if not verdict.correct:
                print(f"⚠ Q{i}: reference answer {q.answer!r} does not validate")
                problems += 1

    print("✅ All good" if not problems else f"❌ {problems} problem(s)")
    return 1 if problems else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
