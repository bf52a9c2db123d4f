# config_home.py — toolchat home, .env loading and credential lookup
from __future__ import annotations

import os
import json
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

from models import LLMModel, default_config

# ---------- App home ----------

def app_dir() -> Path:
    """$TOOLCHAT_HOME if set, else ~/.toolchat. Created on first use."""
    env = os.getenv("TOOLCHAT_HOME", "").strip()
    base = Path(os.path.expanduser(env)) if env else (Path.home() / ".toolchat")
    try:
        base.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error("Failed to create toolchat home at '{}': {}", str(base), e)
        base = Path.cwd() / ".toolchat"
        base.mkdir(parents=True, exist_ok=True)
    return base


def env_path() -> Path:
    return app_dir() / ".env"


def models_json_path() -> Path:
    return app_dir() / "models.json"


def log_dir() -> Path:
    p = app_dir() / "logs"
    p.mkdir(parents=True, exist_ok=True)
    return p

# ---------- helpers ----------

def _write_json(p: Path, d: dict) -> None:
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(d, indent=2), encoding="utf-8")
    except OSError as e:
        logger.warning("Failed to save json '{}': {}", str(p), e)


def ensure_models_json() -> Path:
    """Seed models.json with the default model the first time the app runs."""
    p = models_json_path()
    if not p.exists():
        _write_json(p, default_config())
        logger.info("Initialized default models.json at {}", str(p))
    return p


def load_env_files(cwd: Optional[Path] = None) -> None:
    """Load <home>/.env, then ./.env; values already in the environment win."""
    for candidate in (env_path(), (cwd or Path.cwd()) / ".env"):
        if candidate.exists():
            load_dotenv(candidate, override=False)
            logger.debug("Loaded env file '{}'", str(candidate))


def resolve_api_key(model: LLMModel) -> str:
    """Read the static credential once, at start-up."""
    if not model.api_key_env:
        msg = f"Model '{model.name}' has no 'api_key_env' in config."
        logger.error("resolve_api_key: {}", msg)
        raise RuntimeError(msg)
    key = os.getenv(model.api_key_env)
    if not key:
        msg = (f"API key env '{model.api_key_env}' not found in environment. "
               f"Export it or add it to {env_path()}")
        logger.error("resolve_api_key: {}", msg)
        raise RuntimeError(msg)
    logger.debug("resolve_api_key: using env '{}'", model.api_key_env)
    return key


__all__ = [
    "app_dir",
    "env_path",
    "models_json_path",
    "log_dir",
    "ensure_models_json",
    "load_env_files",
    "resolve_api_key",
]
