# models.py
import json
from pathlib import Path
from dataclasses import dataclass
from typing import Optional, Dict, Any, List

from loguru import logger

DEFAULT_MODEL = "claude-3-7-sonnet-20250219"
DEFAULT_ENDPOINT = "https://api.anthropic.com/v1"
DEFAULT_API_VERSION = "2023-06-01"


@dataclass
class LLMModel:
    name: str
    provider: str = "anthropic"
    endpoint: str = DEFAULT_ENDPOINT
    model: Optional[str] = None
    max_tokens: int = 1024
    api_version: str = DEFAULT_API_VERSION
    # The credential itself never lives in config; only the env var that holds it.
    api_key_env: Optional[str] = "ANTHROPIC_API_KEY"
    timeout: Optional[float] = None  # seconds; None waits indefinitely

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "LLMModel":
        timeout = d.get("timeout")
        m = cls(
            name=d.get("name"),
            provider=d.get("provider", "anthropic"),
            endpoint=d.get("endpoint", DEFAULT_ENDPOINT),
            model=d.get("model"),
            max_tokens=int(d.get("max_tokens", 1024)),
            api_version=d.get("api_version", DEFAULT_API_VERSION),
            api_key_env=d.get("api_key_env", "ANTHROPIC_API_KEY"),
            timeout=float(timeout) if timeout is not None else None,
        )
        logger.debug(
            "LLMModel.from_dict → name='{}', provider='{}', endpoint='{}', model='{}', max_tokens={}",
            m.name, m.provider, m.endpoint, m.model, m.max_tokens,
        )
        return m

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "provider": self.provider,
            "endpoint": self.endpoint,
            "model": self.model,
            "max_tokens": self.max_tokens,
            "api_version": self.api_version,
            "api_key_env": self.api_key_env,
            "timeout": self.timeout,
        }

    def resolved_model(self) -> str:
        resolved = self.model or self.name
        logger.debug("LLMModel.resolved_model → {}", resolved)
        return resolved


def default_config() -> Dict[str, Any]:
    return {
        "default_llm_model": DEFAULT_MODEL,
        "llm_models": [LLMModel(name=DEFAULT_MODEL).to_dict()],
    }


class ModelRegistry:
    """
    Named model entries from models.json:

        {"default_llm_model": "<name>", "llm_models": [{"name": ..., "max_tokens": ...}, ...]}

    Entries without a name are skipped. With no default set, the first entry is used.
    """

    def __init__(self, config_path: str):
        self.models: Dict[str, LLMModel] = {}
        self.default_name: Optional[str] = None
        self.load(config_path)

    @staticmethod
    def _read(path: Path) -> Dict[str, Any]:
        if not path.is_file():
            logger.error("models config missing: '{}'", str(path))
            raise FileNotFoundError(f"Model config not found at: {path}")
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.error("models config '{}' is not valid JSON: {}", str(path), e)
            raise ValueError(f"Invalid model config JSON in {path}: {e}") from e
        if not isinstance(data, dict) or not isinstance(data.get("llm_models"), list):
            logger.error("models config '{}' has no 'llm_models' list", str(path))
            raise ValueError("Invalid model config: expected 'llm_models' array.")
        return data

    def load(self, path: str) -> None:
        cfg_path = Path(path).resolve()
        data = self._read(cfg_path)

        for entry in data["llm_models"]:
            if not isinstance(entry, dict) or not entry.get("name"):
                logger.warning("models config: skipping entry without a name: {}", entry)
                continue
            try:
                m = LLMModel.from_dict(entry)
            except (TypeError, ValueError) as e:
                logger.warning("models config: skipping '{}': {}", entry.get("name"), e)
                continue
            self.models[m.name] = m

        self.default_name = data.get("default_llm_model") or next(iter(self.models), None)
        logger.info("ModelRegistry: {} model(s) from '{}'; default='{}'",
                    len(self.models), str(cfg_path), self.default_name)

    def get(self, name: Optional[str]) -> LLMModel:
        """Named entry, or the default when `name` is empty."""
        key = name or self.default_name
        if key and key in self.models:
            return self.models[key]
        available = ", ".join(self.models) or "none"
        if name:
            logger.error("model '{}' not configured (available: {})", name, available)
            raise ValueError(f"Model '{name}' not found. Available: {available}")
        logger.error("no usable default model (default='{}', available: {})", self.default_name, available)
        raise ValueError("No default model configured and none specified.")

    def list(self) -> List[LLMModel]:
        return list(self.models.values())
