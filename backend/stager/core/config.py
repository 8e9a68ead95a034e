from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, HttpUrl, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Directory that holds the ``stager`` package (``backend/`` in a checkout).
PACKAGE_PARENT = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Use top level .env file (one level above ./backend/)
        env_file="../.env",
        env_ignore_empty=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "artifact-stager"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    SENTRY_DSN: HttpUrl | None = None
    LOG_LEVEL: str = "INFO"
    PORT: int = 3000

    # Filesystem layout
    BASE_PATH: Path = Field(default_factory=Path.cwd)
    ALT_BASE_PATH: Path | None = None
    DOCUMENT_ROOT: str = ""
    DOCUMENT_ROOT_SUBDIR: str = "bee33"

    DESCRIPTOR_DIR: str = "Maker"
    DESCRIPTOR_FILENAME: str = "com.apple.MobileGestalt.plist"
    PRODUCT_ID_SEPARATORS: str = ","

    STAGE1_DIR: str = "firststp"
    STAGE2_DIR: str = "2ndd"
    STAGE3_DIR: str = "last"
    STAGE1_OUTPUT: str = "fixedfile"
    STAGE2_OUTPUT: str = "belliloveu.png"
    STAGE3_OUTPUT: str = "apllefuckedhhh.png"
    STAGE1_SCRATCH_DIR: str = "Caches"
    STAGE1_ARCHIVE: str = "temp.zip"
    # First (stored) entry of the stage-1 archive; empty disables it.
    STAGE1_MIMETYPE: str = "application/epub+zip"
    STAGE2_DATABASE: str = "BLDatabaseManager.sqlite"
    STAGE3_DATABASE: str = "downloads.sqlitedb"

    STAGE2_TEMPLATE: str = "BLDatabaseManager.png"
    STAGE3_TEMPLATE: str = "downloads.28.png"
    KEY_PLACEHOLDER: str = "KEYOOOOOO"
    SENTINEL_URL: str = "https://google.com"
    SENTINEL_KEY: str = "GOODKEY"
    TEMPLATE_ENCODING: str = "utf-8"

    RANDOM_NAME_LENGTH: int = Field(default=16, ge=16)
    IN_PROGRESS_MARKER: str = ".inprogress"

    # URL generation
    PUBLIC_HOST: str = Field(
        default="localhost:3000",
        validation_alias=AliasChoices("PUBLIC_HOST", "HOST"),
    )
    PUBLIC_SCHEME: Literal["http", "https"] | None = None
    TRUST_REQUEST_HOST: bool = True

    # SQL materialization
    SQL_ENGINE: Literal["sqlite", "sqlite-cli"] = "sqlite"
    SQLITE_CLI_PATH: str = "sqlite3"
    SQL_BATCH_TIMEOUT: float = 60.0

    # Retention
    RETENTION_SECONDS: int = 600
    RETENTION_STALE_LOCK_SECONDS: int = 3600

    # Device registry
    REGISTRY_DB_PATH: Path | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def alt_base_path(self) -> Path:
        return self.ALT_BASE_PATH or PACKAGE_PARENT

    @computed_field  # type: ignore[prop-decorator]
    @property
    def public_scheme(self) -> str:
        if self.PUBLIC_SCHEME:
            return self.PUBLIC_SCHEME
        return "https" if self.ENVIRONMENT == "production" else "http"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def public_base_url(self) -> str:
        return f"{self.public_scheme}://{self.PUBLIC_HOST}"

    @property
    def stage_dirs(self) -> dict[str, str]:
        """URL prefix / directory name of each stage-output root, keyed by stage."""
        return {
            "stage1": self.STAGE1_DIR,
            "stage2": self.STAGE2_DIR,
            "stage3": self.STAGE3_DIR,
        }

    @property
    def stage_roots(self) -> list[Path]:
        return [self.BASE_PATH / d for d in self.stage_dirs.values()]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def registry_database_uri(self) -> str:
        path = self.REGISTRY_DB_PATH or self.BASE_PATH / "database.db"
        return f"sqlite:///{path}"


settings = Settings()  # type: ignore
