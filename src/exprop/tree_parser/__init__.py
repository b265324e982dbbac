from .parser_driver import ParserDriver
