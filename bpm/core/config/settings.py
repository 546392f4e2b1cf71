"""Application settings using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bpm.core.config.loader import ConfigLoader
from bpm.core.exceptions.errors import ConfigurationError

# Searched in order when no explicit config file is given
DEFAULT_CONFIG_PATHS = [
    Path("bpm.yaml"),
    Path.home() / ".bpm" / "config.yaml",
]


class GitSettings(BaseSettings):
    """Git operation configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="BPM_GIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    retry_attempts: int = Field(
        default=1,
        ge=1,
        le=10,
        description="Attempts for clone operations (1 = no retry)",
    )
    retry_delay: int = Field(
        default=2,
        ge=1,
        le=60,
        description="Retry delay in seconds",
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="BPM_LOGGING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = Field(
        default="INFO",
        description="Log level",
    )
    format: str = Field(
        default="[%(name)s] %(message)s",
        description="Log format string",
    )
    file: Path | None = Field(
        default=None,
        description="Log file path",
    )
    use_rich: bool = Field(
        default=True,
        description="Use Rich console for output",
    )

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("file", mode="before")
    @classmethod
    def validate_file(cls, v: str | None) -> Path | None:
        """Validate and convert file to Path."""
        if v is None or v == "":
            return None
        return Path(v)


class ProjectSettings(BaseSettings):
    """Project layout and dependency resolution settings."""

    model_config = SettingsConfigDict(
        env_prefix="BPM_PROJECT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    lockfile_name: str = Field(
        default="bpm.json",
        min_length=1,
        description="Lockfile name in the project root",
    )
    vendor_dir_name: str = Field(
        default="vendor",
        min_length=1,
        description="Directory holding fetched dependencies",
    )
    source_extensions: list[str] = Field(
        default_factory=lambda: [".go"],
        description="Extensions of files scanned for imports",
    )
    url_scheme: str = Field(
        default="https://",
        description="Scheme prepended to identifiers to build fetch URLs",
    )
    url_overrides: dict[str, str] = Field(
        default_factory=dict,
        description="Fetch URL per package identifier",
    )
    max_workers: int = Field(
        default=8,
        ge=1,
        le=64,
        description="Maximum concurrent git tasks per graph level",
    )

    @field_validator("source_extensions", mode="after")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        """Lowercase extensions and make sure they start with a dot."""
        return [ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in v]


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="BPM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    git: GitSettings = Field(default_factory=GitSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    project: ProjectSettings = Field(default_factory=ProjectSettings)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from YAML file.

        Args:
            path: Path to YAML configuration file.

        Returns:
            Settings instance with values from YAML.

        Raises:
            ConfigurationError: If the file cannot be loaded or holds invalid values.
        """
        loader = ConfigLoader(path)
        loader.load()

        try:
            return cls(
                git=GitSettings(**loader.get_section("git")),
                logging=LoggingSettings(**loader.get_section("logging")),
                project=ProjectSettings(**loader.get_section("project")),
            )
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration in {path}",
                config_key=str(path),
                details={"error": str(e)},
            ) from e

    @classmethod
    def load(cls, path: Path | None = None) -> "Settings":
        """Load settings from an explicit file or the default locations.

        Priority: explicit file > bpm.yaml > ~/.bpm/config.yaml > environment > defaults

        Args:
            path: Optional YAML configuration file.

        Returns:
            Settings instance.
        """
        if path is not None:
            return cls.from_yaml(path)

        for default_path in DEFAULT_CONFIG_PATHS:
            if default_path.is_file():
                return cls.from_yaml(default_path)

        # Environment variables and .env are automatically loaded by pydantic-settings
        return cls()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings built from the environment and defaults.

    Configuration files are only read by the command line via
    `Settings.load`, so importing bpm never touches the file system.

    Returns:
        Settings singleton.
    """
    return Settings()
