import json
from dataclasses import asdict, dataclass, fields
from enum import Enum

from loguru import logger

from .errors import ConfigError
from .tree.builder import DEFAULT_ANNOTATION


class Coverage(Enum):
    """How far an annotation on a statement reaches into the statements below it."""

    # Every statement below an annotated statement is covered by it
    ALWAYS = "always"
    # The annotation only accounts for the statement's own expressions
    HEADER_ONLY = "header-only"


SUPPORTED_LANGUAGES = ("cpp",)


@dataclass(frozen=True)
class CheckOptions:
    annotation: str = DEFAULT_ANNOTATION
    coverage: Coverage = Coverage.ALWAYS
    unresolved_callees_throw: bool = False
    language: str = "cpp"

    @classmethod
    def from_properties(cls, properties=None):
        """Build options from a properties dict, rejecting unknown keys and bad values."""
        if not properties:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(properties) - known)
        if unknown:
            raise ConfigError(f"unknown option(s): {', '.join(unknown)}")

        values = dict(properties)
        if "coverage" in values and not isinstance(values["coverage"], Coverage):
            try:
                values["coverage"] = Coverage(values["coverage"])
            except ValueError:
                choices = ", ".join(c.value for c in Coverage)
                raise ConfigError(f"coverage must be one of {choices}, got {values['coverage']!r}") from None
        if "annotation" in values:
            annotation = values["annotation"]
            if not isinstance(annotation, str) or not annotation.strip("[] :"):
                raise ConfigError(f"annotation must be a non-empty name, got {annotation!r}")
            values["annotation"] = annotation.strip().strip("[]").strip()
        if "unresolved_callees_throw" in values and not isinstance(values["unresolved_callees_throw"], bool):
            raise ConfigError("unresolved_callees_throw must be true or false")
        if "language" in values and values["language"] not in SUPPORTED_LANGUAGES:
            raise ConfigError(f"unsupported language {values['language']!r}")
        return cls(**values)

    def merged(self, overrides):
        """Copy of these options with the non-None entries of overrides applied."""
        values = self.to_properties()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return CheckOptions.from_properties(values)

    def to_properties(self):
        values = asdict(self)
        values["coverage"] = self.coverage.value
        return values


def load_options(path):
    """Read CheckOptions from a JSON file."""
    try:
        with open(path, "r") as f:
            properties = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"{path}: invalid JSON: {e}") from e
    if not isinstance(properties, dict):
        raise ConfigError(f"{path}: expected a JSON object")
    logger.debug("loaded options from {}: {}", path, properties)
    return CheckOptions.from_properties(properties)
