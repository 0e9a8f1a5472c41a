from pydantic_settings import BaseSettings, SettingsConfigDict

_COMPETITOR_PROMPT = (
    "Ты помощник по анализу цен. Проанализируй результаты поиска цен и найди "
    "минимальную цену товара у конкурентов."
)
_AVITO_PROMPT = (
    "Ты помощник по анализу цен. Проанализируй результаты поиска на Avito и найди "
    "минимальную б/у цену товара."
)
_EDIT_PROMPT = "Помоги отредактировать данные товара согласно команде пользователя."


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PRICE_ANALYZER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "AI Price Analyzer"

    # Product store
    database_url: str = "sqlite+aiosqlite:///./price_analyzer.db"
    history_limit: int = 100

    # LLM gateway (OpenAI-compatible chat completions)
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o"
    openai_temperature: float = 0.1
    openai_max_tokens: int = 3000
    search_max_tokens: int = 2000
    openai_timeout_s: float = 30.0

    # Web search
    serpapi_api_key: str = ""
    serpapi_base_url: str = "https://serpapi.com/search"
    serpapi_timeout_s: float = 15.0
    search_enabled: bool = True
    search_results_limit: int = 5

    # Prompts
    competitor_prompt: str = _COMPETITOR_PROMPT
    avito_prompt: str = _AVITO_PROMPT
    edit_prompt: str = _EDIT_PROMPT

    # HTTP
    cors_allow_origins: list[str] = ["*"]

    log_level: str = "INFO"
    log_json: bool = False


settings = Settings()
