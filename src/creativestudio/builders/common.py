"""Shared pieces of the per-studio task builders: options, pools and batch context."""

import random
from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from creativestudio.models.requests import ImageBlob
from creativestudio.utils.image_utils import generate_set_id, get_timestamp


class Option(BaseModel):
    """One selectable catalog entry."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    prompt: str = ""


class OptionCategory(BaseModel):
    """Named group of options; selections are made by category name."""

    model_config = ConfigDict(frozen=True)

    name: str
    options: tuple[Option, ...]


class SourceImage(BaseModel):
    """An input image as the studio holds it: inline data or a public URL, plus its filename."""

    model_config = ConfigDict(frozen=True)

    filename: str = Field(..., min_length=1)
    blob: Optional[ImageBlob] = None
    url: Optional[str] = None
    short_id: Optional[str] = Field(None, description="Per-upload id used by the {short_id} filename placeholder")

    @property
    def images(self) -> tuple[ImageBlob, ...]:
        return (self.blob,) if self.blob is not None else ()

    @property
    def image_urls(self) -> tuple[str, ...]:
        return (self.url,) if self.url else ()


class BatchContext(BaseModel):
    """Session id and batch timestamp shared by every task of one Generate click."""

    model_config = ConfigDict(frozen=True)

    session_id: str = Field(default_factory=generate_set_id)
    timestamp: str = Field(default_factory=get_timestamp)


def split_custom(text: Optional[str]) -> list[str]:
    """Comma-separated user override, trimmed, blanks dropped."""
    if not text:
        return []
    return [item.strip() for item in text.split(",") if item.strip()]


def custom_options(text: Optional[str], prefix: str) -> list[Option]:
    return [Option(id=f"custom_{prefix}_{i}", name=item, prompt=item) for i, item in enumerate(split_custom(text))]


def resolve_pool(
    categories: Sequence[OptionCategory],
    selected: Sequence[str] = (),
    custom: Optional[str] = None,
    use_custom: bool = False,
    prefix: str = "option",
) -> list[Option]:
    """
    Selection pool for one axis.

    An active custom override wins when it has any text. Otherwise the
    options of the selected categories are used; an empty selection, or one
    that matches nothing, means the full catalog.
    """
    if use_custom:
        overrides = custom_options(custom, prefix)
        if overrides:
            return overrides

    all_options = [option for category in categories for option in category.options]
    if not selected:
        return all_options
    chosen = [option for category in categories if category.name in selected for option in category.options]
    return chosen or all_options


def pick(pool: Sequence, rng: Optional[random.Random] = None):
    """Uniform random element of a non-empty pool."""
    return (rng or random).choice(pool)


def compose_prompt(*parts: Optional[str]) -> str:
    """Join non-empty prompt fragments with single spaces."""
    return " ".join(part.strip() for part in parts if part and part.strip()).strip()


def resolve_id_pool(
    options: Sequence[Option],
    selected_ids: Sequence[str] = (),
    custom: Optional[str] = None,
    use_custom: bool = False,
    prefix: str = "option",
) -> list[Option]:
    """Like resolve_pool, for flat catalogs selected by option id."""
    if use_custom:
        overrides = custom_options(custom, prefix)
        if overrides:
            return overrides
    if not selected_ids:
        return list(options)
    chosen = [option for option in options if option.id in selected_ids]
    return chosen or list(options)
