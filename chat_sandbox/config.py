import os
from typing import Union

from dotenv import load_dotenv


def load_environment_variables():
    if os.path.exists(".env"):
        load_dotenv(".env")


def env_variable(name: str, default=None) -> Union[str, bool]:
    value = os.getenv(name, default)
    if value and str(value).lower() == "false":
        return False
    if value and str(value).lower() == "true":
        return True
    return value


load_environment_variables()

### --- Environment Configuration --- ###

IS_DEV = env_variable("IS_DEV")
URL_HOSTNAME = os.getenv("URL_HOSTNAME", "http://localhost:" + os.getenv("PORT", "3000"))

# Requests taking longer than this are answered with a 503 by the request middleware.
# Two sequential provider calls (compression, then completion) must fit inside it.
REQUEST_TIMEOUT_SECS = int(os.getenv("REQUEST_TIMEOUT_SECS", "120"))

### --- Bugsnag Configuration --- ###

BUGSNAG_API_KEY = os.getenv("BUGSNAG_API_KEY")
BUGSNAG_RELEASE_STAGE = os.getenv("BUGSNAG_RELEASE_STAGE", "development" if IS_DEV else "production")

### --- Compression Provider Configuration --- ###

TTC_API_URL = "https://api.thetokencompany.com/v1/compress"
TTC_API_KEY = os.getenv("TTC_API_KEY")
TTC_COMPRESSION_MODEL = "bear-1"
COMPRESSION_TIMEOUT_SECS = float(os.getenv("COMPRESSION_TIMEOUT_SECS", "30"))

### --- Chat Completion Provider Configuration --- ###

GROQ_API_URL = "https://api.groq.com/openai/v1/chat/completions"
GROQ_API_KEY = os.getenv("GROQ_API_KEY")

OPENROUTER_API_URL = "https://openrouter.ai/api/v1/chat/completions"
OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY")
OPENROUTER_REFERER = os.getenv("OPENROUTER_REFERER", "https://thetokencompany.com")
OPENROUTER_TITLE = "TTC Chat Sandbox"

CHAT_COMPLETION_TIMEOUT_SECS = float(os.getenv("CHAT_COMPLETION_TIMEOUT_SECS", "60"))
CHAT_MAX_COMPLETION_TOKENS = 1024

### --- Chat Configuration --- ###

DEFAULT_SYSTEM_PROMPT = "You are a helpful AI assistant. Keep responses SHORT (2-3 sentences max)."
SEED_GREETING = "Hey! What do you wanna talk about?"

### --- Compaction Configuration --- ###

# Number of appended turns (user and assistant each count) that triggers compaction
COMPRESSION_FREQUENCY_DEFAULT = 5
COMPRESSION_FREQUENCY_MIN = 5
COMPRESSION_FREQUENCY_MAX = 15

COMPRESSION_AGGRESSIVENESS_DEFAULT = 0.9
COMPRESSION_AGGRESSIVENESS_MIN = 0.1
COMPRESSION_AGGRESSIVENESS_MAX = 0.9

if env_variable("COMPRESSION_FREQUENCY_DEFAULT"):
    COMPRESSION_FREQUENCY_DEFAULT = int(env_variable("COMPRESSION_FREQUENCY_DEFAULT"))
