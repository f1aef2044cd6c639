from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class RegistrySettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="METAREGISTRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    weak_references: bool = Field(
        default=True,
        description="Hold targets through weak references where the target supports them, "
                    "so metadata is released together with its target. Targets that cannot "
                    "be weakly referenced are always held strongly until forgotten."
    )
    thread_safe: bool = Field(
        default=True,
        description="Guard registry mutation with a re-entrant lock. Disable only when every "
                    "registry is confined to a single thread."
    )
    infer_wrapped_parent: bool = Field(
        default=True,
        description="For classes whose only base is object, follow a class-valued __wrapped__ "
                    "attribute to recover the class they replace. This is a best-effort "
                    "heuristic and may link classes that are not related by inheritance."
    )
    log_level: str = Field(
        default="INFO",
        description="Log level applied by setup_logging() when none is passed explicitly"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the configured log level.

        Args:
            v: The raw log level

        Returns:
            Upper-cased log level name
        """
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(
                f"Invalid log level '{v}'. Expected one of: {', '.join(_LOG_LEVELS)}"
            )
        return level
