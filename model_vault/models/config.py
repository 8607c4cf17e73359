"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pydantic import BaseModel, Field, field_validator

from model_vault.models.artifact import ARTIFACT_EXTENSION

DEFAULT_MODEL_URL = (
    "https://huggingface.co/unsloth/Qwen3-0.6B-GGUF/resolve/main/"
    "Qwen3-0.6B-Q4_K_M.gguf"
)
DEFAULT_MODEL_NAME = "Qwen3-0.6B-Q4_K_M"

MIN_CHUNK_SIZE = 65536  # 64 KB
MAX_CHUNK_SIZE = 8388608  # 8 MB


class VaultConfig(BaseModel):
    """A validated configuration model for the application."""

    # Storage
    artifact_root: str = ""  # Empty means the platform default location
    extension: str = ARTIFACT_EXTENSION

    # Transfer Settings
    chunk_size: int = 262144  # 256 KB
    connect_timeout: float = 15.0
    read_timeout: float = 90.0

    # Download Defaults
    default_url: str = DEFAULT_MODEL_URL
    default_name: str = DEFAULT_MODEL_NAME

    # Internal fields not loaded from INI file
    config_path: str = Field("", repr=False)

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @field_validator("extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        """Ensures the extension is a lower-case suffix such as '.gguf'."""
        if not v.startswith(".") or len(v) < 2:
            raise ValueError("Extension must start with a dot, e.g. '.gguf'.")
        if "/" in v or "\\" in v:
            raise ValueError("Extension cannot contain path separators.")
        return v.lower()

    @field_validator("chunk_size")
    @classmethod
    def validate_chunk_size(cls, v: int) -> int:
        """Ensures a reasonable read size for the response stream."""
        if v < MIN_CHUNK_SIZE or v > MAX_CHUNK_SIZE:
            raise ValueError(
                f"Chunk size must be between {MIN_CHUNK_SIZE} and {MAX_CHUNK_SIZE} "
                "bytes."
            )
        return v

    @field_validator("connect_timeout", "read_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Timeouts must be positive numbers of seconds.")
        return v

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path"}
        return {key for key in cls.model_fields if key not in internal_fields}
