"""Block content schemas.

Each implemented block type has a pydantic model for its ``content``
payload. Payloads are validated here before they reach persistence and
are stored as the model's plain-dict dump. Text blocks also get their
derived fields (word count, reading time, heading outline) recomputed.
"""

import html
import math
import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from humans.domain.entities import BlockType
from humans.domain.exceptions import BlockContentError

WORDS_PER_MINUTE = 200

_TAG_PATTERN = re.compile(r"<[^>]+>")
_HEADING_PATTERN = re.compile(r"<h([1-4])(?:\s[^>]*)?>(.*?)</h\1\s*>", re.IGNORECASE | re.DOTALL)


class _ContentModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class BioLink(_ContentModel):
    label: str = Field(..., min_length=1, max_length=100)
    url: str = Field(..., min_length=1, max_length=2048)


class BioContent(_ContentModel):
    """Content of a bio block: the author header of a page."""

    display_name: str | None = Field(None, max_length=100)
    tagline: str | None = Field(None, max_length=200)
    bio: str | None = None
    avatar_url: str | None = Field(None, max_length=2048)
    links: list[BioLink] = Field(default_factory=list)


class OutlineEntry(_ContentModel):
    """One heading of a text block's outline."""

    id: str
    level: int = Field(..., ge=1, le=4)
    text: str
    anchor: str


class TextContent(_ContentModel):
    """Content of a text block.

    ``text`` is the plain text; ``html`` is the optional rich rendering.
    ``word_count``, ``reading_time`` and ``outline`` are always derived
    and any client-sent values are replaced.
    """

    text: str
    html: str | None = None
    formatting: Literal["plain", "markdown", "rich"] = "plain"
    word_count: int = 0
    reading_time: int = 0
    outline: list[OutlineEntry] = Field(default_factory=list)

    @model_validator(mode="after")
    def derive_metrics(self) -> "TextContent":
        source = strip_tags(self.html) if self.html else self.text
        self.word_count = count_words(source)
        self.reading_time = reading_time_minutes(self.word_count)
        self.outline = build_outline(self.html) if self.html else []
        return self


class LinkItem(_ContentModel):
    title: str = Field(..., min_length=1, max_length=255)
    url: str = Field(..., min_length=1, max_length=2048)
    description: str | None = None


class LinksContent(_ContentModel):
    """Content of a links block."""

    items: list[LinkItem] = Field(default_factory=list)


class ContentListItem(_ContentModel):
    title: str = Field(..., min_length=1, max_length=255)
    url: str | None = Field(None, max_length=2048)
    annotation: str | None = None
    type: Literal["article", "book", "video", "podcast", "other"] | None = None


class ContentListContent(_ContentModel):
    """Content of a curated content list block."""

    items: list[ContentListItem] = Field(default_factory=list)


class BlockStyling(BaseModel):
    model_config = ConfigDict(extra="allow")

    background_color: str | None = None
    text_color: str | None = None
    border_radius: str | None = None


class BlockConfig(BaseModel):
    """Presentational hints for a block. Unknown keys are kept."""

    model_config = ConfigDict(extra="allow")

    size: Literal["small", "medium", "large"] | None = None
    layout: Literal["default", "centered", "grid"] | None = None
    styling: BlockStyling | None = None


CONTENT_MODELS: dict[BlockType, type[BaseModel]] = {
    BlockType.BIO: BioContent,
    BlockType.TEXT: TextContent,
    BlockType.LINKS: LinksContent,
    BlockType.CONTENT_LIST: ContentListContent,
}


def strip_tags(markup: str) -> str:
    """Remove HTML tags and unescape entities."""
    return html.unescape(_TAG_PATTERN.sub(" ", markup))


def count_words(text: str) -> int:
    return len(text.split())


def reading_time_minutes(word_count: int) -> int:
    """Minutes to read at 200 words per minute, rounded up."""
    return math.ceil(word_count / WORDS_PER_MINUTE)


def build_outline(markup: str) -> list[OutlineEntry]:
    """Collect h1-h4 headings of an HTML fragment.

    Each entry's id is ``heading-<offset>`` where offset is the heading's
    position in the markup, so ids are unique within a block.
    """
    outline: list[OutlineEntry] = []
    for match in _HEADING_PATTERN.finditer(markup):
        text = " ".join(strip_tags(match.group(2)).split())
        heading_id = f"heading-{match.start()}"
        outline.append(
            OutlineEntry(
                id=heading_id,
                level=int(match.group(1)),
                text=text,
                anchor=f"#{heading_id}",
            )
        )
    return outline


def _format_error(error: PydanticValidationError) -> tuple[str, str | None]:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    message = f"{location}: {first['msg']}" if location else first["msg"]
    return message, location or None


def validate_block_content(block_type: str, content: dict[str, Any] | None) -> dict[str, Any]:
    """Validate a content payload against its block type.

    Args:
        block_type: The block's type.
        content: Raw content payload.

    Returns:
        The normalized content as a plain dict.

    Raises:
        BlockContentError: If the type is unknown or unsupported, or the
            payload does not match the type's schema.
    """
    try:
        kind = BlockType(block_type)
    except ValueError:
        raise BlockContentError(
            f"Unknown block type '{block_type}'", field="block_type", code="unknown_block_type"
        ) from None

    model = CONTENT_MODELS.get(kind)
    if model is None:
        raise BlockContentError(
            f"Block type '{kind.value}' is not supported yet",
            field="block_type",
            code="unsupported_block_type",
        )

    try:
        parsed = model.model_validate(content or {})
    except PydanticValidationError as e:
        message, location = _format_error(e)
        raise BlockContentError(
            f"Invalid {kind.value} content: {message}",
            field=f"content.{location}" if location else "content",
            code="invalid_content",
        ) from e

    return parsed.model_dump(mode="json", exclude_none=True)


def validate_block_config(config: dict[str, Any] | None) -> dict[str, Any]:
    """Validate presentational hints, keeping unknown keys.

    Raises:
        BlockContentError: If a known key has an invalid value.
    """
    try:
        parsed = BlockConfig.model_validate(config or {})
    except PydanticValidationError as e:
        message, location = _format_error(e)
        raise BlockContentError(
            f"Invalid config: {message}",
            field=f"config.{location}" if location else "config",
            code="invalid_config",
        ) from e
    return parsed.model_dump(mode="json", exclude_none=True)
