import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BUNDLED_CONTENT_DIR = Path(__file__).resolve().parent / "data"
CONTENT_SOURCES = ("bundled", "directory", "http")


class Settings(BaseSettings):
    app_name: str = "solution_quest"
    env: str = "dev"
    log_level: str = "INFO"

    content_source: str = "bundled"
    content_dir: str = ""
    content_base_url: str = ""
    content_timeout_s: float = 8.0

    rng_seed: int | None = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


def validate_content_source(source: str | None, *, content_dir: str | None, content_base_url: str | None) -> str:
    candidate = (source or "").strip().lower() or "bundled"
    if candidate not in CONTENT_SOURCES:
        raise RuntimeError(
            f"CONTENT_SOURCE={source!r} is not supported. Use one of: {', '.join(CONTENT_SOURCES)}."
        )
    if candidate == "directory":
        if not content_dir or not content_dir.strip():
            raise RuntimeError("CONTENT_SOURCE=directory requires CONTENT_DIR to point at the CSV content pack.")
        if not Path(content_dir).is_dir():
            raise RuntimeError(f"CONTENT_DIR={content_dir} does not exist or is not a directory.")
    if candidate == "http":
        base = (content_base_url or "").strip().lower()
        if not base.startswith(("http://", "https://")):
            raise RuntimeError(
                "CONTENT_SOURCE=http requires CONTENT_BASE_URL, e.g. https://example.org/data"
            )
    return candidate


def configure_logging(config: Settings | None = None) -> int:
    """Entry hook for the host application; the engine itself never configures logging.

    Installs a root handler if none exists and applies ``log_level`` to the
    ``solution_quest`` logger tree. Returns the level that was applied.
    """
    level_name = str((config or settings).log_level or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("solution_quest").setLevel(level)
    return level


settings = Settings()
settings.content_source = validate_content_source(
    settings.content_source,
    content_dir=settings.content_dir,
    content_base_url=settings.content_base_url,
)
