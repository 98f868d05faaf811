# configs/config.py
import os

class Config:
    # Any OpenAI-compatible endpoint; LM Studio's local server by default.
    API_KEY = os.getenv("TRIBUNAL_API_KEY", "lm-studio")
    BASE_URL = os.getenv("TRIBUNAL_BASE_URL", "http://127.0.0.1:1234/v1")
    MODEL_NAME = os.getenv("TRIBUNAL_MODEL", "local-model")
    TEMPERATURE = 0.0

    ORACLE_TIMEOUT = float(os.getenv("TRIBUNAL_ORACLE_TIMEOUT", "30"))
    PLACEHOLDER_DELAY = float(os.getenv("TRIBUNAL_PLACEHOLDER_DELAY", "0.8"))

    LOG_LEVEL = os.getenv("TRIBUNAL_LOG_LEVEL", "INFO")
