"""Language-name to ISO 639 code conversion."""

import logging

import pycountry

logger = logging.getLogger(__name__)


def to_language_code(name: str) -> str:
    """
    Convert a language name ("Spanish") to its ISO 639-1 code ("es").

    Falls back to ISO 639-3 for languages without a two-letter code. Unknown
    names are returned unchanged.
    """
    try:
        language = pycountry.languages.lookup(name)
    except LookupError:
        logger.info(f"No ISO code for language {name!r}, keeping it as given")
        return name
    return getattr(language, "alpha_2", None) or language.alpha_3


def normalize_language(raw: str, max_code_length: int = 3) -> str:
    """
    Turn a `language` command argument into the stored preference.

    Short arguments are taken to be codes already. Longer ones get their first
    character upper-cased and go through the name lookup.
    """
    if len(raw) <= max_code_length:
        return raw
    return to_language_code(raw[:1].upper() + raw[1:])
