from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "IVOR Community Assistant"
    debug: bool = False

    # Storage
    db_path: Path = Path(__file__).resolve().parent.parent.parent / "data" / "ivor.db"
    seed_reference_data: bool = True

    # LLM
    llm_provider: str = "gemini"  # gemini
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"

    # Provider retry policy
    provider_max_attempts: int = 3
    provider_retry_delay: float = 1.0  # seconds, multiplied by the attempt number
    provider_timeout: float = 30.0

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["http://localhost:5173"]

    model_config = {
        "env_file": str(Path(__file__).resolve().parent.parent.parent / ".env"),
        "env_prefix": "IVOR_",
    }


settings = Settings()
