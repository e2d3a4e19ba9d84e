"""
Configuration settings for the API.
Each field can be overridden by an environment variable of the same name.
"""
import os
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Dict, List, Optional


def _as_bool(raw: str) -> bool:
    return raw.strip().lower() in ("true", "1", "yes")


def _as_list(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


_COERCE: Dict[Any, Callable[[str], Any]] = {
    bool: _as_bool,
    int: int,
    float: float,
    List[str]: _as_list,
}


@dataclass
class Settings:
    """API Configuration"""

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: List[str] = field(default_factory=lambda: ["*"])

    # Letters API upstream
    LETTERS_API_BASE_URL: str = "https://letters.gov.sg/api/v1"
    LETTERS_TIMEOUT: float = 0.0  # seconds; 0 disables the timeout

    def __post_init__(self):
        for f in fields(self):
            raw = os.getenv(f.name)
            if raw is None:
                continue
            coerce = _COERCE.get(f.type, str)
            setattr(self, f.name, coerce(raw))
        self.LOG_LEVEL = self.LOG_LEVEL.upper()

    @property
    def letters_timeout(self) -> Optional[float]:
        """Timeout handed to httpx; ``None`` means wait indefinitely."""
        return self.LETTERS_TIMEOUT if self.LETTERS_TIMEOUT > 0 else None


# Global settings instance
settings = Settings()
