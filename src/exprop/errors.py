class ExpropError(Exception):
    """Base class for errors raised outside the analysis core."""


class ConfigError(ExpropError):
    pass


class UnsupportedLanguageError(ExpropError):
    def __init__(self, language):
        super().__init__(f"unsupported source language: {language!r}")
        self.language = language
