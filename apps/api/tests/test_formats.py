import pytest

from ticket_api.core.errors import InvalidInput
from ticket_api.core.settings import Settings
from ticket_api.services.formats import MessageFormat, validate_format


@pytest.mark.parametrize(
    "value,expected",
    [("markdown", "markdown"), ("MD", "markdown"), ("html", "html"), (" Text ", "text"), ("plain", "text")],
)
def test_validate_format_accepts_aliases(settings, value, expected):
    assert validate_format(value, settings) == expected


def test_validate_format_rejects_blank(settings):
    with pytest.raises(InvalidInput) as exc:
        validate_format("  ", settings)
    assert exc.value.message == "Format cannot be empty"


def test_validate_format_rejects_unknown(settings):
    with pytest.raises(InvalidInput) as exc:
        validate_format("rtf", settings)
    assert exc.value.message == "Invalid format. Allowed: markdown, html, text"


def test_markdown_requires_plugin_when_configured():
    strict = Settings(_env_file=None, REQUIRE_MARKDOWN_PLUGIN=True, MARKDOWN_PLUGIN_ENABLED=False)
    with pytest.raises(InvalidInput):
        validate_format("markdown", strict)
    assert validate_format("html", strict) == "html"

    enabled = Settings(_env_file=None, REQUIRE_MARKDOWN_PLUGIN=True, MARKDOWN_PLUGIN_ENABLED=True)
    assert validate_format("md", enabled) == "markdown"


def test_try_from_string():
    assert MessageFormat.try_from_string("txt") is MessageFormat.TEXT
    assert MessageFormat.try_from_string(None) is None
    assert MessageFormat.try_from_string("docx") is None
