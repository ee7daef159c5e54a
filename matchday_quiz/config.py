# matchday_quiz/config.py

import os
from dotenv import load_dotenv

# Load .env file if present (local development)
load_dotenv()

BOT_TOKEN = os.getenv("BOT_TOKEN")
DB_USER = os.getenv("DB_USER")
DB_PASS = os.getenv("DB_PASS")
DB_NAME = os.getenv("DB_NAME")
DB_HOST = os.getenv("DB_HOST")
DB_PORT = os.getenv("DB_PORT")
DB_ENABLE_SSL = os.getenv("DB_ENABLE_SSL")

QUESTIONS_PATH = os.getenv("QUESTIONS_PATH", "data/questions.json")
CATALOG_DIR = os.getenv("CATALOG_DIR", "data/catalogs")
# When set, catalogs are fetched over HTTP as <CATALOG_BASE_URL>/<name>.json
CATALOG_BASE_URL = os.getenv("CATALOG_BASE_URL")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
