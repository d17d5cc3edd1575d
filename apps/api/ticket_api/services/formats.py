from enum import Enum

from ..core.errors import InvalidInput
from ..core.settings import Settings


class MessageFormat(str, Enum):
    MARKDOWN = "markdown"
    HTML = "html"
    TEXT = "text"

    @classmethod
    def try_from_string(cls, value: str | None) -> "MessageFormat | None":
        if value is None or not value.strip():
            return None
        return FORMAT_ALIASES.get(value.strip().lower())

    @classmethod
    def allowed_list(cls) -> str:
        return ", ".join(f.value for f in cls)


FORMAT_ALIASES = {
    "markdown": MessageFormat.MARKDOWN,
    "md": MessageFormat.MARKDOWN,
    "html": MessageFormat.HTML,
    "text": MessageFormat.TEXT,
    "plain": MessageFormat.TEXT,
    "txt": MessageFormat.TEXT,
}


def validate_format(value: str | None, settings: Settings) -> str:
    fmt = MessageFormat.try_from_string(value)
    if fmt is None:
        if value is None or not value.strip():
            raise InvalidInput("Format cannot be empty")
        raise InvalidInput(f"Invalid format. Allowed: {MessageFormat.allowed_list()}")

    if (
        fmt is MessageFormat.MARKDOWN
        and settings.REQUIRE_MARKDOWN_PLUGIN
        and not settings.MARKDOWN_PLUGIN_ENABLED
    ):
        raise InvalidInput("Markdown Support plugin is required but not active")
    return fmt.value
