"""Slug generator service.

Turns block titles into URL-friendly slugs, validates slug syntax and
tells UUID-shaped path segments apart from slugs.
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class SlugValidationError:
    """Represents a slug validation error.

    Attributes:
        field: The field name (typically 'slug').
        message: Human-readable error message.
        code: Machine-readable error code.
    """

    field: str
    message: str
    code: str


class SlugGenerator:
    """Generate and validate block slugs.

    Slug rules:
    - 1-100 characters
    - Lowercase letters and digits in segments joined by single hyphens
    - No leading or trailing hyphen
    """

    MIN_LENGTH = 1
    MAX_LENGTH = 100

    VALID_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    UUID_PATTERN = re.compile(
        r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
        re.IGNORECASE,
    )

    _SEPARATORS = re.compile(r"[\s_]+")
    _DISALLOWED = re.compile(r"[^a-z0-9-]")
    _REPEATED_HYPHENS = re.compile(r"-+")

    @classmethod
    def generate(cls, text: str) -> str:
        """Generate a slug from text.

        Total over all strings; the result may be empty.

        Args:
            text: The text to convert (usually a block title).

        Returns:
            URL-friendly slug, possibly empty.

        Examples:
            >>> SlugGenerator.generate("Hello, World!")
            'hello-world'
            >>> SlugGenerator.generate("  __multi   space__ ")
            'multi-space'
            >>> SlugGenerator.generate("???")
            ''
        """
        slug = text.lower().strip()
        slug = cls._SEPARATORS.sub("-", slug)
        slug = cls._DISALLOWED.sub("", slug)
        slug = cls._REPEATED_HYPHENS.sub("-", slug)
        return slug.strip("-")

    @classmethod
    def sanitize(cls, text: str) -> str:
        """Clean up a slug typed by a user; same rules as generate()."""
        return cls.generate(text)

    @classmethod
    def validate(cls, slug: str) -> list[SlugValidationError]:
        """Validate a slug against the rules.

        Args:
            slug: The slug to validate.

        Returns:
            List of validation errors. Empty list if slug is valid.
        """
        errors: list[SlugValidationError] = []

        if len(slug) < cls.MIN_LENGTH:
            errors.append(
                SlugValidationError(
                    field="slug",
                    message="Slug cannot be empty",
                    code="slug_too_short",
                )
            )
            return errors

        if len(slug) > cls.MAX_LENGTH:
            errors.append(
                SlugValidationError(
                    field="slug",
                    message=f"Slug must be at most {cls.MAX_LENGTH} characters",
                    code="slug_too_long",
                )
            )

        if not cls.VALID_SLUG_PATTERN.fullmatch(slug):
            errors.append(
                SlugValidationError(
                    field="slug",
                    message=(
                        "Slug can only contain lowercase letters, numbers, "
                        "and single hyphens between words"
                    ),
                    code="slug_invalid_chars",
                )
            )

        return errors

    @classmethod
    def is_valid(cls, slug: str) -> bool:
        """Check if a slug is valid.

        Args:
            slug: The slug to validate.

        Returns:
            True if slug meets all requirements, False otherwise.
        """
        return len(cls.validate(slug)) == 0

    @classmethod
    def is_uuid(cls, value: str) -> bool:
        """Check whether a path segment looks like a database ID.

        Only used to pick between id and slug lookup, not to validate UUIDs.
        """
        return cls.UUID_PATTERN.fullmatch(value) is not None
