# main.py
import os
import sys
from pathlib import Path

from loguru import logger

from adapters.anthropic_messages import AnthropicMessagesAdapter
from agent import Agent
from config_home import ensure_models_json, load_env_files, resolve_api_key
from logging_setup import configure_logging
from models import ModelRegistry
from tools.registry import build_default_registry
from ui import ChatUI


def main() -> int:
    """Interactive REPL; configuration comes from the toolchat home and the environment."""
    load_env_files()
    configure_logging()

    ui = ChatUI()
    try:
        models = ModelRegistry(str(ensure_models_json()))
        model = models.get(os.getenv("TOOLCHAT_MODEL") or None)  # picks default if unset
        api_key = resolve_api_key(model)
    except (OSError, ValueError, RuntimeError) as e:
        logger.error("start-up failed: {}", e)
        ui.error(str(e))
        return 1

    tools = build_default_registry(Path.cwd())
    client = AnthropicMessagesAdapter(model, api_key)
    agent = Agent(client, tools, ui=ui, model_name=model.resolved_model())
    agent.start()
    return 0


if __name__ == "__main__":
    sys.exit(main())
