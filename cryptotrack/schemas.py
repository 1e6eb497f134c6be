from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """snake_case attributes, camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Health / version ---
class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    timestamp: str


class VersionResponse(BaseModel):
    service: str  # "cryptotrack-api:0.3.0"
    version: str


# --- Error taxonomy ---
class ErrorCode(str, Enum):
    UPSTREAM_FAILURE = "UPSTREAM_FAILURE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    CLIENT_ERROR = "CLIENT_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorResponse(BaseModel):
    message: str
    code: ErrorCode = ErrorCode.INTERNAL_ERROR


# --- Records held by the store ---
class User(CamelModel):
    id: int
    username: str
    password: str


class UserCreate(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserPublic(CamelModel):
    id: int
    username: str


class PortfolioItem(CamelModel):
    id: int
    user_id: int
    coin_id: str
    symbol: str
    name: str
    amount: float
    purchase_price: float
    created_at: datetime


class WatchlistItem(CamelModel):
    id: int
    user_id: int
    coin_id: str
    created_at: datetime


Theme = Literal["dark", "light"]


class UserSettings(CamelModel):
    id: int
    user_id: int
    theme: Theme = "dark"
    currency: str = "usd"
    preferences: dict[str, Any] = Field(default_factory=dict)


# --- Request bodies ---
class PortfolioCreate(CamelModel):
    coin_id: str = Field(..., min_length=1, description="CoinGecko id, e.g. bitcoin")
    symbol: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0, allow_inf_nan=False)
    purchase_price: float = Field(..., gt=0, allow_inf_nan=False)


class PortfolioUpdate(CamelModel):
    amount: float | None = Field(None, gt=0, allow_inf_nan=False)
    purchase_price: float | None = Field(None, gt=0, allow_inf_nan=False)


class WatchlistCreate(CamelModel):
    coin_id: str = Field(..., min_length=1)


class WatchlistStatus(CamelModel):
    coin_id: str
    in_watchlist: bool


class SettingsUpdate(CamelModel):
    theme: Theme | None = None
    currency: str | None = Field(None, min_length=1)
    preferences: dict[str, Any] | None = None

    @field_validator("currency")
    @classmethod
    def _lower_currency(cls, v: str | None) -> str | None:
        return v.strip().lower() if v is not None else None


# --- News ---
class NewsItem(CamelModel):
    id: int
    title: str
    summary: str
    source: str
    published_at: str  # ISO-8601
    image_url: str
    url: str
    category: str = "market"


# --- Portfolio valuation ---
class HoldingValuation(PortfolioItem):
    current_price: float
    current_value: float
    purchase_value: float
    profit: float
    profit_percentage: float


class PortfolioValuation(CamelModel):
    currency: str
    holdings: list[HoldingValuation]
    total_value: float
    total_cost: float
    total_profit: float
    total_profit_percentage: float
