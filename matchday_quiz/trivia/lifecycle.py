# -----------------------------
# STAGE / RESULTS RENDERING
# -----------------------------
from typing import List

from matchday_quiz.trivia.constants import MAX_WAGER
from matchday_quiz.trivia.machine import GameSession
from matchday_quiz.trivia.questions import (
    MODE_CATALOG,
    MODE_NUMERIC,
    MODE_SCORELINE,
    category_summary,
    final_topic,
)
from matchday_quiz.trivia.results import ResultRow, summarize
from matchday_quiz.trivia.state import GameStage, Outcome

_MODE_HINTS = {
    MODE_CATALOG: "Answer with `/quiz_answer` (suggestions pop up as you type).",
    MODE_SCORELINE: "Answer with `/quiz_score home away` or `/quiz_answer 2-1`.",
    MODE_NUMERIC: "Answer with `/quiz_answer <number>`.",
}


def _intro_message(session: GameSession) -> str:
    lines = [f"👋 Welcome, **{session.state.player.name}**. Here's today's card:"]
    for entry in category_summary(session.questions):
        points = "/".join(str(p) for p in entry["points"])
        lines.append(f"• **{entry['category']}** — {entry['count']} question(s), ×{points}")
    topic = final_topic(session.questions)
    if topic:
        lines.append(f"🏁 Final question: **{topic}** (wager 0–{MAX_WAGER})")
    lines.append("Type `/quiz_start` when you're ready.")
    return "\n".join(lines)


def _category_message(session: GameSession) -> str:
    state = session.state
    q = session.question
    header = f"📂 **Question {state.index + 1} of {len(session.questions)}** — {q.category}"
    if session.is_final:
        return (
            f"{header}\n"
            f"🏁 Final question. Current wager: **{state.wager}** "
            f"(`/quiz_wager 0-{MAX_WAGER}`), then `/quiz_next`."
        )

    lines = [header, f"Worth ×{q.base_points}."]
    if state.boost_armed_for(state.index):
        lines.append("⚡ ×2 armed for this question.")
    elif state.boost.available:
        lines.append("⚡ `/quiz_boost` doubles this question (once per game).")
    lines.append("`/quiz_next` to see the question.")
    return "\n".join(lines)


def _question_message(session: GameSession) -> str:
    q = session.question
    hint = _MODE_HINTS.get(q.answer_mode, "Answer with `/quiz_answer <text>`.")
    return f"❓ {q.prompt}\n{hint} Don't know? `/quiz_skip`."


def _answer_message(session: GameSession) -> str:
    state = session.state
    q = session.question
    outcome = state.outcome(state.index)
    given = state.answers.get(state.index, "")

    lines = []
    if outcome in (Outcome.CORRECT, Outcome.FINAL_CORRECT):
        lines.append("✅ Correct!")
    elif outcome in (Outcome.WRONG, Outcome.FINAL_WRONG):
        lines.append("❌ Not this time.")
    else:
        lines.append(f"📝 You said: **{given or '—'}**. Mark it with `/quiz_mark`.")

    if q.answer is not None:
        lines.append(f"Answer: **{q.answer}**")
    if q.fact:
        lines.append(f"ℹ️ {q.fact}")
    lines.append(f"Score: **{state.player.score}** · streak {state.player.streak}")
    return "\n".join(lines)


def stage_message(session: GameSession) -> str:
    stage = session.state.stage
    if stage == GameStage.NAME:
        return "⚽ Welcome to the football quiz. Pick a name with `/quiz_name`."
    if stage == GameStage.INTRO:
        return _intro_message(session)
    if stage == GameStage.RESULTS:
        return results_message(session)
    if session.question is None:
        return "No questions loaded."
    if stage == GameStage.CATEGORY:
        return _category_message(session)
    if stage == GameStage.QUESTION:
        return _question_message(session)
    return _answer_message(session)


def _row_line(r: ResultRow) -> str:
    mark = {True: "✔", False: "✘", None: "—"}[r.correct]
    tags = []
    if r.is_final:
        tags.append("final")
    if r.boost_applied:
        tags.append("×2")
    if r.streak_bonus:
        tags.append(f"+{r.streak_bonus} streak")
    tag_text = f" ({', '.join(tags)})" if tags else ""
    delta = f"+{r.delta}" if r.delta >= 0 else str(r.delta)
    return (
        f"`{r.number:>2}` {mark} **{r.category}**{tag_text} · "
        f"{r.answer_text or '—'} · {delta} → {r.running_total}"
    )


def results_message(session: GameSession) -> str:
    rows: List[ResultRow] = session.rows()
    summary = summarize(session.state, rows)

    lines = [
        f"🏆 **Results — {summary['name'] or 'Player'}**",
        f"Score: **{summary['score']}** · longest streak {summary['max_streak']}",
    ]
    lines.extend(_row_line(r) for r in rows)
    lines.append("`/quiz_reset` to play again.")
    return "\n".join(lines)
