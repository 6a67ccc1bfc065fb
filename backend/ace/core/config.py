"""
Pydantic Settings: centralized configuration loaded from environment variables.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Application ───────────────────────────
    APP_ENV: str = "development"
    LOG_LEVEL: str = ""
    CORS_ORIGINS: list[str] = ["*"]
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # ── OAuth (prototype client) ──────────────
    OAUTH_CLIENT_ID: str = "ace-prototype-client"
    OAUTH_CLIENT_SECRET: str = "ace-prototype-secret"
    OAUTH_SCOPES: list[str] = [
        "datasets:write",
        "datasets:read",
        "items:write",
        "assets:write",
    ]
    OAUTH_TOKEN_TTL_SECONDS: int = 3600

    # ── Outbound HTTP ─────────────────────────
    HTTP_TIMEOUT_SECONDS: float = 30.0

    # ── CKAN ──────────────────────────────────
    CKAN_BASE_URL: str = ""
    CKAN_API_KEY: str = ""
    CKAN_SCHEMA_ID: str = "ace-standard-schema"

    # ── Orion-LD ──────────────────────────────
    ORION_LD_URL: str = ""
    FIWARE_SERVICE: str = "ace"
    FIWARE_SERVICEPATH: str = "/"
    NGSI_LD_CONTEXT: list[str] = [
        "https://uri.etsi.org/ngsi-ld/v1/ngsi-ld-core-context.jsonld",
        "https://schema.lab.ace/contexts/standard.jsonld",
    ]

    # ── Schema inference (LLM) ────────────────
    OPENAI_API_KEY: str = ""
    SCHEMA_AI_PROVIDER: str = "gpt-4o-mini"
    SCHEMA_AI_STRICT_ESCALATION: bool = True
    SCHEMA_AI_MAX_RETRIES: int = 2
    LLM_TEMPERATURE: float = 0.2
    LLM_MAX_TOKENS: int = 4000

    # ── LangSmith Tracing ────────────────────
    LANGSMITH_API_KEY: str = ""
    LANGSMITH_ENDPOINT: str = "https://api.smith.langchain.com"
    LANGSMITH_PROJECT: str = "ace-schema-inference"
    LANGSMITH_TRACING: bool = False

    model_config = {"env_file": ["../.env", ".env"], "extra": "ignore"}

    @property
    def log_level(self) -> str:
        """Explicit LOG_LEVEL wins; otherwise DEBUG in development."""
        if self.LOG_LEVEL:
            return self.LOG_LEVEL.upper()
        return "DEBUG" if self.APP_ENV == "development" else "INFO"


settings = Settings()
