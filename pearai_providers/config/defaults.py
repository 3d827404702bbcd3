"""pearai_providers.config.defaults
=================================

Small, stable default values for the PearAI client. They can be overridden
through a config file, environment variables or explicit overrides (see
``pearai_providers.config.get_client_config``).

Only plain constants live here; this module imports nothing from the package.
"""

from __future__ import annotations

PROVIDER_NAME = "pearai-server"

# ---- Server ----
SERVER_URL = "https://server.trypear.ai/pearai-server-api2"
COMPLETE_PATH = "/stream_complete"
CHAT_PATH = "/server_chat"

# ---- Request shaping ----
# Stop sequences forwarded per request, except for the models listed below.
STOP_SEQUENCE_LIMIT = 2
UNLIMITED_STOP_MODELS = ["starcoder-7b"]
# Detail hint attached to every forwarded image reference.
IMAGE_DETAIL = "low"

# ---- Models ----
DEFAULT_MODELS = [
    "llama3-70b",
    "gpt-3.5-turbo",
    "gpt-4o",
    "gemini-1.5-pro-latest",
    "claude-3-sonnet-20240229",
    "claude-3-haiku-20240307",
]
DEFAULT_MODEL = "gpt-4o"

# ---- Identity headers ----
UNKNOWN_UNIQUE_ID = "None"
UNKNOWN_VALUE = "Unknown"

# ---- Usage accounting event names ----
PROMPT_TOKENS_EVENT = "free_trial_prompt_tokens"
COMPLETION_TOKENS_EVENT = "free_trial_completion_tokens"

# ---- Token refresh ----
# Seconds before expiry at which a token is already treated as expired.
TOKEN_EXPIRY_LEEWAY_SECONDS = 60.0
