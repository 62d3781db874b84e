"""Input checks shared by photo and album services."""

from pixelboard.errors import ValidationError

MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500


def clean_text(title: str | None, description: str | None) -> tuple[str, str]:
    """Trim and bound-check a title/description pair."""
    clean_title = (title or "").strip()
    clean_description = (description or "").strip()
    if not clean_title:
        raise ValidationError("Title is required")
    if len(clean_title) > MAX_TITLE_LENGTH:
        raise ValidationError(f"Title must be at most {MAX_TITLE_LENGTH} characters")
    if len(clean_description) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(
            f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters"
        )
    return clean_title, clean_description
