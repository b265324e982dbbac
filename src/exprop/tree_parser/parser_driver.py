from loguru import logger
from tree_sitter import Parser

from .. import get_language
from ..errors import UnsupportedLanguageError
from .cpp_parser import CppParser


class ParserDriver:
    """Parses source text with tree-sitter and lowers it into a SyntaxTree."""

    def __init__(self, src_language="cpp", src_code="", file_name="<memory>"):
        self.src_language = src_language
        self.src_code = src_code
        self.file_name = file_name

        self.parser_map = {
            "cpp": CppParser,
        }
        if self.src_language not in self.parser_map:
            raise UnsupportedLanguageError(self.src_language)

        self.ts_parser = Parser(get_language(self.src_language))
        self.syntax = self.ts_parser.parse(bytes(self.src_code, "utf8"))
        self.root_node = self.syntax.root_node
        if self.root_node.has_error:
            logger.warning("{}: syntax errors, analysing the recovered tree", self.file_name)

        self.parser = self.parser_map[self.src_language](self.root_node, self.file_name)
        self.tree = self.parser.tree
