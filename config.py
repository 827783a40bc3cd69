import os
from dotenv import load_dotenv

load_dotenv()

class AppConfig:
    # "heuristic" or "remote"
    BOT_STRATEGY = os.getenv("BOT_STRATEGY", "heuristic").lower()

    # OpenAI
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
    OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-3.5-turbo-1106")
    OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL") or None
    OPENAI_TIMEOUT = float(os.getenv("OPENAI_TIMEOUT", "15"))
    OPENAI_TEMPERATURE = float(os.getenv("OPENAI_TEMPERATURE", "0.7"))

    # Flask
    SECRET_KEY = os.getenv("FLASK_SECRET_KEY", "dev-secret")
