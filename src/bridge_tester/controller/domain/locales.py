"""Locale normalization and the expected phrase for each locale."""

from bridge_tester.common import setup_logging
from bridge_tester.controller.exceptions import UnsupportedLocale

logger = setup_logging()

DEFAULT_LOCALE = "en-US"

SUPPORTED_LOCALES = {
    "EN_US": "en-US",
    "DE_DE": "de-DE",
}

REFERENCE_PHRASES = {
    "en-US": (
        "welcome to Circuit please enter the conference pin and push pound "
        "to confirm connecting to the conference"
    ),
}


class LocaleRegistry:
    """Maps bridge locale codes to normalized locales and reference phrases."""

    def __init__(
        self,
        locales: dict[str, str] | None = None,
        phrases: dict[str, str] | None = None,
        default: str = DEFAULT_LOCALE,
    ):
        self._locales = dict(SUPPORTED_LOCALES if locales is None else locales)
        self._phrases = dict(REFERENCE_PHRASES if phrases is None else phrases)
        self._default = default

    @property
    def default(self) -> str:
        return self._default

    def normalize(self, code: str | None) -> str:
        """
        Normalizes a locale code such as ``EN_US`` to ``en-US``.

        Codes already in normalized form are accepted as they are. Anything
        else falls back to the default locale with a warning.
        """
        if code:
            key = code.strip().upper().replace("-", "_")
            if key in self._locales:
                return self._locales[key]
        logger.warning(
            "Invalid or unsupported locale, using default",
            extra={"locale": code, "default": self._default},
        )
        return self._default

    def reference_phrase(self, locale: str) -> str:
        """
        Returns the phrase a bridge in ``locale`` is expected to play.

        Raises:
            UnsupportedLocale: If no phrase is registered for the locale.
        """
        try:
            return self._phrases[locale]
        except KeyError:
            raise UnsupportedLocale(locale) from None
