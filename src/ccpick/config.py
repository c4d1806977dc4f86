"""cc-pick configuration (environment defaults; CLI flags override)."""
import os


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip().lower()
    return value if value in choices else default


THEMES = ("light", "dark")

# Output
OUTPUT_DIR = os.getenv("CCPICK_OUTPUT_DIR", "./output")
THEME = _env_choice("CCPICK_THEME", THEMES, "light")

# Input
SKIP_MALFORMED = _env_bool("CCPICK_SKIP_MALFORMED", False)

# Logging
LOG_LEVEL = os.getenv("CCPICK_LOG_LEVEL", "WARNING").upper()
