"""Configuration management for the Hold'em table."""

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings

# 5 community cards + 2 hole cards per player must fit in a 52-card deck
MAX_PLAYERS_PER_DECK = 23


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Table defaults
    buy_in: int = Field(default=1000, alias="HOLDEM_BUY_IN")
    small_blind: int = Field(default=25, alias="HOLDEM_SMALL_BLIND")
    big_blind: int = Field(default=50, alias="HOLDEM_BIG_BLIND")
    max_seats: int = Field(default=10, alias="HOLDEM_MAX_SEATS")

    # Hand flow
    reveal_delay: float = Field(default=5.0, alias="HOLDEM_REVEAL_DELAY")
    decision_retries: int = Field(default=2, alias="HOLDEM_DECISION_RETRIES")

    # Logging
    log_level: str = Field(default="INFO", alias="HOLDEM_LOG_LEVEL")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class TableConfig(BaseModel):
    """Table parameters, fixed for the lifetime of a session."""

    buy_in: int = Field(gt=0)
    small_blind: int = Field(gt=0)
    big_blind: int = Field(gt=0)
    max_seats: int = Field(default=10, ge=2, le=MAX_PLAYERS_PER_DECK)
    reveal_delay: float = Field(default=5.0, ge=0)
    decision_retries: int = Field(default=2, ge=0)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_blinds(self) -> "TableConfig":
        if self.small_blind > self.big_blind:
            raise ValueError(
                f"small blind {self.small_blind} exceeds big blind {self.big_blind}"
            )
        if self.big_blind > self.buy_in:
            raise ValueError(
                f"big blind {self.big_blind} exceeds buy-in {self.buy_in}"
            )
        return self

    @classmethod
    def from_settings(cls, source: Settings | None = None, **overrides) -> "TableConfig":
        """
        Build a table config from settings, with optional overrides.

        Args:
            source: Settings to read defaults from (module singleton if omitted)
            **overrides: Field values that take precedence over settings

        Returns:
            Validated TableConfig
        """
        source = source or settings
        values = {
            "buy_in": source.buy_in,
            "small_blind": source.small_blind,
            "big_blind": source.big_blind,
            "max_seats": source.max_seats,
            "reveal_delay": source.reveal_delay,
            "decision_retries": source.decision_retries,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


# Singleton settings instance
settings = Settings()
