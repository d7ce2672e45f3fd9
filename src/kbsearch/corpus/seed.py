"""Seed corpus loading and validation."""
from importlib import resources
from pathlib import Path

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError

from kbsearch.corpus.schemas import Article, CategoryMeta

logger = structlog.get_logger()

PACKAGED_SEED = "seed.yaml"


class SeedError(Exception):
    """Raised when the seed document cannot be read or parsed."""

    def __init__(self, message: str, source: str) -> None:
        """Initialize seed error.

        Args:
            message: Error description.
            source: Path or resource name of the seed document.
        """
        super().__init__(message)
        self.source = source


class SeedValidationError(SeedError):
    """Raised when seed records fail schema validation."""

    def __init__(
        self, message: str, source: str, validation_error: ValidationError
    ) -> None:
        """Initialize validation error.

        Args:
            message: Error description.
            source: Path or resource name of the seed document.
            validation_error: Pydantic validation error details.
        """
        super().__init__(message, source)
        self.validation_error = validation_error


class SeedDocument(BaseModel):
    """Top-level layout of a seed document."""

    categories: list[CategoryMeta] = Field(default_factory=list)
    articles: list[Article] = Field(default_factory=list)


def _read_seed_text(path: Path | None) -> tuple[str, str]:
    """Read raw seed text from a file or the packaged resource.

    Returns:
        Tuple of (raw text, source label).
    """
    if path is None:
        resource = resources.files("kbsearch.corpus") / "data" / PACKAGED_SEED
        return resource.read_text(encoding="utf-8"), f"package:{PACKAGED_SEED}"

    try:
        return path.read_text(encoding="utf-8"), str(path)
    except FileNotFoundError as e:
        raise SeedError(f"Seed file not found: {path}", str(path)) from e
    except OSError as e:
        raise SeedError(f"Failed to read seed file: {e}", str(path)) from e


def load_seed(path: str | Path | None = None) -> SeedDocument:
    """Load and validate the seed corpus.

    Args:
        path: Optional seed file. Uses the packaged seed when None.

    Returns:
        Validated seed document.

    Raises:
        SeedError: If the document cannot be read or is not a YAML mapping.
        SeedValidationError: If any record fails validation.
    """
    raw, source = _read_seed_text(Path(path) if path is not None else None)

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise SeedError(f"Invalid YAML in seed: {e}", source) from e

    if not isinstance(data, dict):
        raise SeedError("Seed document must be a mapping", source)

    try:
        document = SeedDocument.model_validate(data)
    except ValidationError as e:
        raise SeedValidationError(f"Invalid seed records in {source}", source, e) from e

    ids = [article.id for article in document.articles]
    if len(ids) != len(set(ids)):
        raise SeedError("Seed contains duplicate article ids", source)

    logger.info(
        "seed_loaded",
        source=source,
        article_count=len(document.articles),
        category_count=len(document.categories),
    )
    return document
