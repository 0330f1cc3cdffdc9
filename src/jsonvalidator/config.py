"""Library configuration via environment variables."""

from pydantic_settings import BaseSettings

from jsonvalidator import __version__


class Settings(BaseSettings):
    # Remote schema fetching
    http_timeout: float = 10.0
    follow_redirects: bool = True
    user_agent: str = f"jsonvalidator/{__version__}"

    # Logging (applied by the CLI)
    log_level: str = "warning"
    log_json: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "JSONVALIDATOR_",
    }


settings = Settings()
