"""humans.inc - bio link pages built from ordered content blocks.

Users assemble a public profile page out of blocks (bio, text, links,
curated content lists), group them into collections, and publish them
under their username.
"""

__version__ = "0.1.0"

from humans.infrastructure.api.app import app

__all__ = ["app", "__version__"]
