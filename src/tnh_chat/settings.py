"""Service settings.

Built once at startup and passed to every pipeline component.
Environment variables take precedence, then the optional config file
(``APP_CONFIG_PATH``), then the defaults below.
"""

import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

from .utils.config import read_config

OPENAI = "openai"
OLLAMA = "ollama"

# Environment variable -> Settings field
ENV_FIELDS = {
    "PROVIDER": "provider",
    "OPENAI_API_KEY": "openai_api_key",
    "OPENAI_MODEL": "openai_model",
    "OPENAI_EMBED_MODEL": "openai_embed_model",
    "OLLAMA_HOST": "ollama_host",
    "OLLAMA_MODEL": "ollama_model",
    "OLLAMA_EMBED_MODEL": "ollama_embed_model",
    "SUPABASE_URL": "supabase_url",
    "SUPABASE_SERVICE_ROLE_KEY": "supabase_service_role_key",
    "SUPABASE_TABLE": "supabase_table",
    "SUPABASE_QUERY_NAME": "supabase_query_name",
    "SERVICE_API_KEY": "service_api_key",
    "PORT": "port",
    "NODE_ENV": "environment",
    "TOP_K": "top_k",
    "MODEL_TIMEOUT": "model_timeout",
    "LOG_FILE": "log_file",
}


@dataclass(frozen=True)
class Settings:
    # Model providers
    provider: str = OLLAMA
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_embed_model: str = "text-embedding-3-small"
    ollama_host: str = "http://localhost:11434"
    ollama_model: str = "llama3"
    ollama_embed_model: str = "nomic-embed-text"
    temperature: float = 0.2
    model_timeout: Optional[float] = None

    # Vector store
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    supabase_table: str = "documents"
    supabase_query_name: str = "match_documents"
    top_k: int = 6

    # Service
    service_api_key: str = ""
    port: int = 8787
    environment: str = "development"
    log_file: Optional[str] = None

    @property
    def vector_store_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_role_key)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @staticmethod
    def load(
        environ: Optional[Mapping[str, str]] = None,
        config_path: Optional[str] = None,
    ) -> "Settings":
        """
        Build settings from the config file and the environment.

        Args:
            environ: Environment mapping (defaults to ``os.environ`` after
                     loading a local ``.env`` file)
            config_path: Optional JSON/YAML file; defaults to ``APP_CONFIG_PATH``

        Returns:
            Settings instance

        Raises:
            ValueError: If a numeric option cannot be parsed
        """
        if environ is None:
            # Load `.env` only for local development
            load_dotenv()
            environ = os.environ

        values: Dict[str, Any] = {}

        config_path = config_path or environ.get("APP_CONFIG_PATH")
        if config_path:
            known = {f.name for f in fields(Settings)}
            file_values = read_config(config_path)
            values.update({k: v for k, v in file_values.items() if k in known and v is not None})

        for env_name, field_name in ENV_FIELDS.items():
            raw = environ.get(env_name)
            if raw:
                values[field_name] = raw

        return Settings(**_coerce(values))


def _coerce(values: Dict[str, Any]) -> Dict[str, Any]:
    coerced = dict(values)
    try:
        if "port" in coerced:
            coerced["port"] = int(coerced["port"])
        if "top_k" in coerced:
            coerced["top_k"] = int(coerced["top_k"])
        if "temperature" in coerced:
            coerced["temperature"] = float(coerced["temperature"])
        if coerced.get("model_timeout") is not None:
            coerced["model_timeout"] = float(coerced["model_timeout"])
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid numeric setting: {e}") from e
    return coerced
