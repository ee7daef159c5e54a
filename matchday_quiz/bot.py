import logging
from typing import Dict, List, Tuple

import discord
from discord.ext import commands
from discord import app_commands

from matchday_quiz.catalog.matcher import SuggestionFeed, preferred_label
from matchday_quiz.catalog.registry import CatalogRegistry
from matchday_quiz.catalog.sources import HttpCatalogSource, JsonDirectorySource
from matchday_quiz.snark import get_snark
from matchday_quiz.trivia.intents import (
    Advance,
    ArmBoost,
    CommitName,
    MarkManual,
    Reset,
    ResolveFinal,
    SetWager,
    SkipAnswer,
    Start,
    SubmitAnswer,
)
from matchday_quiz.trivia.lifecycle import results_message, stage_message
from matchday_quiz.trivia.persistence import MemoryStore, PostgresStore
from matchday_quiz.trivia.questions import MODE_CATALOG, load_questions
from matchday_quiz.trivia.sessions import SessionHub
from matchday_quiz.trivia.state import GameStage
from .config import BOT_TOKEN, CATALOG_BASE_URL, CATALOG_DIR, DB_NAME, DB_PASS, LOG_LEVEL, QUESTIONS_PATH
from .db import init_schema

logger = logging.getLogger(__name__)

intents = discord.Intents.default()

bot = commands.Bot(
    command_prefix="!",
    intents=intents,
    help_command=None,
)

SessionKey = Tuple[int, int, int]

if CATALOG_BASE_URL:
    REGISTRY = CatalogRegistry(HttpCatalogSource(CATALOG_BASE_URL))
else:
    REGISTRY = CatalogRegistry(JsonDirectorySource(CATALOG_DIR))

USE_DATABASE = bool(DB_PASS and DB_NAME)
STORE = PostgresStore() if USE_DATABASE else MemoryStore()

QUESTIONS = load_questions(QUESTIONS_PATH)
HUB = SessionHub(QUESTIONS, REGISTRY, STORE)
FEEDS: Dict[SessionKey, SuggestionFeed] = {}


# -----------------------------
# SESSION HELPERS
# -----------------------------
def session_key(interaction: discord.Interaction) -> SessionKey:
    guild_id = interaction.guild.id if interaction.guild else 0
    channel_id = interaction.channel.id if interaction.channel else 0
    return guild_id, channel_id, interaction.user.id


async def run_intent(interaction: discord.Interaction, intent, refused: str):
    key = session_key(interaction)
    session, changed = await HUB.dispatch(key, intent)
    if not changed:
        await interaction.response.send_message(get_snark(refused), ephemeral=True)
        return

    # render before yielding: a queued intent may change the state next
    text = stage_message(session)
    FEEDS.pop(key, None)
    await interaction.response.send_message(text)


# -----------------------------
# BOT EVENTS
# -----------------------------
@bot.event
async def on_ready():
    logger.info("Logged in as %s (ID: %s)", bot.user, bot.user.id)

    if USE_DATABASE:
        await init_schema()

    # warm up every catalog the feed uses
    for name in sorted({q.catalog for q in QUESTIONS if q.answer_mode == MODE_CATALOG and q.catalog}):
        await REGISTRY.get_index(name)

    try:
        synced = await bot.tree.sync()
        logger.info("✅ Synced %d app commands.", len(synced))
    except discord.DiscordException as e:
        logger.error("❌ Error syncing app commands: %s", e)


# -----------------------------
# COMMANDS
# -----------------------------
@bot.tree.command(name="quiz_name", description="Pick your player name.")
async def quiz_name(interaction: discord.Interaction, name: str):
    await run_intent(interaction, CommitName(name), "name_refused")


@bot.tree.command(name="quiz_start", description="Kick off the quiz.")
async def quiz_start(interaction: discord.Interaction):
    await run_intent(interaction, Start(), "no_game")


@bot.tree.command(name="quiz_next", description="Move on to the next screen.")
async def quiz_next(interaction: discord.Interaction):
    await run_intent(interaction, Advance(), "advance_refused")


@bot.tree.command(name="quiz_boost", description="Double the points of the upcoming question (once per game).")
async def quiz_boost(interaction: discord.Interaction):
    await run_intent(interaction, ArmBoost(), "boost_refused")


@bot.tree.command(name="quiz_wager", description="Stake 0-3 points on the final question.")
async def quiz_wager(interaction: discord.Interaction, amount: app_commands.Range[int, 0, 3]):
    await run_intent(interaction, SetWager(amount), "wager_refused")


@bot.tree.command(name="quiz_answer", description="Answer the current question.")
async def quiz_answer(interaction: discord.Interaction, answer: str):
    await run_intent(interaction, SubmitAnswer(answer), "answer_refused")


@quiz_answer.autocomplete("answer")
async def quiz_answer_autocomplete(
    interaction: discord.Interaction,
    current: str,
) -> List[app_commands.Choice[str]]:
    key = session_key(interaction)
    session = HUB.peek(key)
    if session is None or session.state.stage != GameStage.QUESTION:
        return []
    q = session.question
    if q is None or q.answer_mode != MODE_CATALOG or not q.catalog:
        return []

    feed = FEEDS.get(key)
    if feed is None or feed.catalog_name != q.catalog:
        feed = FEEDS[key] = SuggestionFeed(REGISTRY, q.catalog)

    if not await feed.update(current):
        # a newer keystroke is already being answered
        return []

    return [
        app_commands.Choice(name=preferred_label(item, current)[:100], value=item.id[:100])
        for item in feed.results
    ]


@bot.tree.command(name="quiz_score", description="Answer a scoreline question.")
async def quiz_score(
    interaction: discord.Interaction,
    home: app_commands.Range[int, 0, 99],
    away: app_commands.Range[int, 0, 99],
):
    await run_intent(interaction, SubmitAnswer({"home": home, "away": away}), "answer_refused")


@bot.tree.command(name="quiz_skip", description="I don't know.")
async def quiz_skip(interaction: discord.Interaction):
    await run_intent(interaction, SkipAnswer(), "answer_refused")


@bot.tree.command(name="quiz_mark", description="Mark a free-text answer.")
@app_commands.choices(
    outcome=[
        app_commands.Choice(name="Correct", value="correct"),
        app_commands.Choice(name="Wrong / no answer", value="wrong"),
    ]
)
async def quiz_mark(interaction: discord.Interaction, outcome: app_commands.Choice[str]):
    await run_intent(interaction, MarkManual(outcome.value == "correct"), "mark_refused")


@bot.tree.command(name="quiz_final", description="Settle the final question.")
@app_commands.choices(
    outcome=[
        app_commands.Choice(name="Correct", value="correct"),
        app_commands.Choice(name="Wrong", value="wrong"),
    ]
)
async def quiz_final(interaction: discord.Interaction, outcome: app_commands.Choice[str]):
    await run_intent(interaction, ResolveFinal(outcome.value == "correct"), "mark_refused")


@bot.tree.command(name="quiz_reset", description="Start over (your name is kept).")
async def quiz_reset(interaction: discord.Interaction):
    await run_intent(interaction, Reset(), "no_game")


@bot.tree.command(name="quiz_results", description="Show your results table.")
async def quiz_results(interaction: discord.Interaction):
    session = await HUB.get(session_key(interaction))
    if session.state.stage == GameStage.NAME:
        await interaction.response.send_message(get_snark("no_game"), ephemeral=True)
        return
    await interaction.response.send_message(results_message(session), ephemeral=True)


# -----------------------------
# ENTRY POINT
# -----------------------------
def main():
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not BOT_TOKEN:
        raise ValueError("BOT_TOKEN is missing. Add it to .env or environment variables.")
    bot.run(BOT_TOKEN, log_handler=None)


if __name__ == "__main__":
    main()
