"""Settings for the start page."""

import math
from pathlib import Path
from typing import Any, List, Optional

import yaml
from loguru import logger
from pydantic import BaseModel, Field, field_validator, model_validator

from .router import DEFAULT_SEARCH_ENGINE


MAX_LINKS_PER_CATEGORY = 4


def _clean(value: Any) -> str:
    # YAML reads bare titles like 2048 as numbers
    return "" if value is None else str(value).strip()


class LinkConfig(BaseModel):
    title: str = ""
    url: str = ""
    icon: str = ""

    @field_validator("title", "url", "icon", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> str:
        return _clean(v)


class CategoryConfig(BaseModel):
    title: str = ""
    icon: str = ""
    links: List[LinkConfig] = Field(default_factory=list)

    @field_validator("title", "icon", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> str:
        return _clean(v)

    @field_validator("links")
    @classmethod
    def drop_empty_links(cls, v: List[LinkConfig]) -> List[LinkConfig]:
        kept = [link for link in v if link.title or link.url]
        return kept[:MAX_LINKS_PER_CATEGORY]

    @property
    def is_empty(self) -> bool:
        return not self.title and not self.links


class SearchConfig(BaseModel):
    # Navigate when exactly one non-exact prefix match exists
    single_prefix_match_navigates: bool = False
    engine_url: str = DEFAULT_SEARCH_ENGINE


class CarouselConfig(BaseModel):
    visible_count: int = 4
    wheel_debounce_ms: int = 200
    drag_threshold_px: float = 30.0
    drag_threshold_ratio: float = 0.15
    min_wheel_delta: float = 1.0

    @field_validator("visible_count")
    @classmethod
    def validate_visible_count(cls, v: int) -> int:
        if v < 1:
            raise ValueError("visible_count must be at least 1")
        return v

    @field_validator("wheel_debounce_ms")
    @classmethod
    def validate_debounce(cls, v: int) -> int:
        if v < 0:
            raise ValueError("wheel_debounce_ms must not be negative")
        return v


class WeatherConfig(BaseModel):
    lat: Optional[float] = None
    lon: Optional[float] = None
    temp_imperial: bool = False
    wind_imperial: bool = False

    @property
    def configured(self) -> bool:
        return (
            self.lat is not None and self.lon is not None
            and math.isfinite(self.lat) and math.isfinite(self.lon)
        )


class TasksConfig(BaseModel):
    token: str = ""

    @field_validator("token", mode="before")
    @classmethod
    def strip_token(cls, v: Any) -> str:
        return _clean(v)


class Config(BaseModel):
    """Main configuration for the start page."""

    clock_12h: bool = False
    search: SearchConfig = Field(default_factory=SearchConfig)
    carousel: CarouselConfig = Field(default_factory=CarouselConfig)
    weather: WeatherConfig = Field(default_factory=WeatherConfig)
    tasks: TasksConfig = Field(default_factory=TasksConfig)
    categories: List[CategoryConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def drop_empty_categories(self) -> "Config":
        self.categories = [c for c in self.categories if not c.is_empty]
        return self

    @classmethod
    def default_locations(cls) -> List[Path]:
        return [
            Path("startpage.yaml"),
            Path.home() / ".config" / "startpage" / "config.yaml",
            Path("/etc/startpage/config.yaml"),
        ]

    @classmethod
    def find(cls) -> Optional[Path]:
        for candidate in cls.default_locations():
            if candidate.exists():
                return candidate
        return None

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """
        Load configuration from YAML file.

        An explicit path must exist. Without one the default locations are
        searched and, when none exists, defaults are returned.
        """
        if config_path is None:
            config_path = cls.find()
            if config_path is None:
                logger.info("No config file found, using defaults")
                return cls()
        elif not Path(config_path).exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

    def save(self, config_path: Path) -> None:
        """Save configuration to YAML file."""
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w") as f:
            yaml.safe_dump(self.model_dump(), f, default_flow_style=False, sort_keys=False)
        logger.info(f"Saved config to: {config_path}")

    def ensure_categories(self, config_path: Optional[Path] = None) -> bool:
        """
        Seed the default categories when none are configured.

        Seeded categories are persisted when config_path is given so the
        settings editor shows them next time. Returns True if seeding happened.
        """
        if self.categories:
            return False
        self.categories = default_categories()
        logger.info("Seeded default categories")
        if config_path is not None:
            self.save(config_path)
        return True


def _category(title: str, icon: str, links: List[tuple]) -> CategoryConfig:
    return CategoryConfig(
        title=title,
        icon=icon,
        links=[LinkConfig(title=t, url=u, icon=i) for t, u, i in links],
    )


def default_categories() -> List[CategoryConfig]:
    return [
        _category("Search", "search", [
            ("Google", "https://www.google.com", "google"),
            ("YouTube", "https://www.youtube.com", "youtube"),
            ("Wikipedia", "https://www.wikipedia.org", "wikipedia"),
            ("Maps", "https://maps.google.com", "map"),
        ]),
        _category("Social", "users", [
            ("Reddit", "https://www.reddit.com", "reddit"),
            ("X", "https://x.com", "x-twitter"),
            ("LinkedIn", "https://www.linkedin.com", "linkedin"),
            ("Instagram", "https://www.instagram.com", "instagram"),
        ]),
        _category("Dev", "code", [
            ("GitHub", "https://github.com", "github"),
            ("Stack Overflow", "https://stackoverflow.com", "stack-overflow"),
            ("MDN Docs", "https://developer.mozilla.org", "mdnwebdocs"),
            ("NPM", "https://www.npmjs.com", "npm"),
        ]),
        _category("Shopping", "shopping-bag", [
            ("Amazon", "https://www.amazon.com", "amazon"),
            ("eBay", "https://www.ebay.com", "ebay"),
            ("Newegg", "https://www.newegg.com", "newegg"),
            ("AliExpress", "https://www.aliexpress.com", "aliexpress"),
        ]),
    ]
