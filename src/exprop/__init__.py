from functools import lru_cache

from tree_sitter import Language

from .errors import UnsupportedLanguageError

__version__ = "0.3.0"


@lru_cache(maxsize=None)
def get_language_map():
    import tree_sitter_cpp

    CPP_LANGUAGE = Language(tree_sitter_cpp.language())

    return {
        "cpp": CPP_LANGUAGE,
    }


def get_language(src_language):
    language_map = get_language_map()
    if src_language not in language_map:
        raise UnsupportedLanguageError(src_language)
    return language_map[src_language]
