from loguru import logger

from ..config import CheckOptions
from ..tree_parser.parser_driver import ParserDriver
from ..utils import postprocessor
from .checker import VisibleExceptionPropagationCheck


class CheckDriver:
    """Parse one translation unit, run the check over it and optionally write the results."""

    def __init__(
        self,
        src_language="cpp",
        src_code="",
        output_file=None,
        properties=None,
        file_name="<memory>",
    ):
        if isinstance(properties, CheckOptions):
            self.options = properties
        else:
            self.options = CheckOptions.from_properties(properties)
        self.src_language = src_language
        self.src_code = src_code

        self.parser = ParserDriver(src_language, src_code, file_name)
        self.root_node = self.parser.root_node
        self.tree = self.parser.tree

        self.check = VisibleExceptionPropagationCheck(self.options)
        self.diagnostics = self.check.run(self.tree)
        if output_file:
            self.json = postprocessor.write_diagnostics_to_json(self.diagnostics, output_file)
            logger.info("wrote {} diagnostic(s) to {}", len(self.diagnostics), output_file)

    def write_tree(self, output_file, graph_format="json"):
        """Dump the lowered tree for inspection: json, dot or all."""
        if graph_format == "all" or graph_format == "json":
            postprocessor.write_networkx_to_json(self.tree, output_file.rsplit(".", 1)[0] + ".json")
        if graph_format == "all" or graph_format == "dot":
            postprocessor.write_to_dot(self.tree, output_file.rsplit(".", 1)[0] + ".dot")
