"""
LendTrust — Configuration

All settings load from environment variables with safe defaults for development.
In production, set LENDTRUST_ENV=production to enforce valid values.
"""
import os
import warnings
from functools import lru_cache
from typing import List

from dotenv import load_dotenv

load_dotenv()


class Settings:
    def __init__(self):
        self.ENVIRONMENT = os.getenv("LENDTRUST_ENV", "development")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        # === Scoring ===
        self.DEFAULT_SCORING_STRATEGY = os.getenv("DEFAULT_SCORING_STRATEGY", "comprehensive")
        if self.DEFAULT_SCORING_STRATEGY not in ("comprehensive", "legacy"):
            if self.is_production:
                raise RuntimeError(
                    f"DEFAULT_SCORING_STRATEGY '{self.DEFAULT_SCORING_STRATEGY}' is not a known strategy"
                )
            warnings.warn(
                f"Unknown DEFAULT_SCORING_STRATEGY '{self.DEFAULT_SCORING_STRATEGY}', using comprehensive."
            )
            self.DEFAULT_SCORING_STRATEGY = "comprehensive"

        # === Market eligibility (minimum score, per scale) ===
        self.MIN_ELIGIBLE_SCORE = int(os.getenv("MIN_ELIGIBLE_SCORE", "40"))
        self.MIN_ELIGIBLE_LEGACY_SCORE = int(os.getenv("MIN_ELIGIBLE_LEGACY_SCORE", "500"))

        # === Rates ===
        self.BASE_INTEREST_RATE = float(os.getenv("BASE_INTEREST_RATE", "8.0"))

        # === Application ===
        self.LENDTRUST_HOST = os.getenv("LENDTRUST_HOST", "0.0.0.0")
        self.LENDTRUST_PORT = int(os.getenv("LENDTRUST_PORT", "8000"))
        self.CORS_ORIGINS: List[str] = [
            o.strip()
            for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:8080").split(",")
            if o.strip()
        ]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    def min_eligible_score(self, scale: str) -> int:
        if scale == "legacy":
            return self.MIN_ELIGIBLE_LEGACY_SCORE
        return self.MIN_ELIGIBLE_SCORE


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
