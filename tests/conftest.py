"""Global test configuration for llm-extract tests."""

from pathlib import Path

from dotenv import load_dotenv

# Integration tests read OPENAI_API_KEY; a local .env keeps it out of the shell
env_file = Path(__file__).parent.parent / ".env"
if env_file.exists():
    load_dotenv(env_file)
