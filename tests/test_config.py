import json

import pytest

from exprop.config import CheckOptions, Coverage, load_options
from exprop.errors import ConfigError


def test_defaults():
    options = CheckOptions.from_properties(None)
    assert options.annotation == "maybe_unhandled"
    assert options.coverage is Coverage.ALWAYS
    assert options.unresolved_callees_throw is False
    assert options.language == "cpp"


def test_properties_are_converted():
    options = CheckOptions.from_properties({
        "annotation": "[[may_throw]]",
        "coverage": "header-only",
        "unresolved_callees_throw": True,
    })
    assert options.annotation == "may_throw"
    assert options.coverage is Coverage.HEADER_ONLY
    assert options.unresolved_callees_throw is True


@pytest.mark.parametrize("properties", [
    {"colour": "blue"},
    {"coverage": "sometimes"},
    {"annotation": ""},
    {"annotation": "[[]]"},
    {"unresolved_callees_throw": "yes"},
    {"language": "java"},
])
def test_invalid_properties(properties):
    with pytest.raises(ConfigError):
        CheckOptions.from_properties(properties)


def test_merged_ignores_unset_overrides():
    options = CheckOptions(annotation="may_throw")
    merged = options.merged({"annotation": None, "coverage": "header-only"})
    assert merged.annotation == "may_throw"
    assert merged.coverage is Coverage.HEADER_ONLY
    assert options.coverage is Coverage.ALWAYS


def test_to_properties_round_trips():
    options = CheckOptions(coverage=Coverage.HEADER_ONLY)
    assert CheckOptions.from_properties(options.to_properties()) == options


def test_load_options(tmp_path):
    path = tmp_path / "exprop.json"
    path.write_text(json.dumps({"coverage": "header-only"}))
    assert load_options(str(path)).coverage is Coverage.HEADER_ONLY


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_load_options_rejects_bad_files(tmp_path, content):
    path = tmp_path / "exprop.json"
    path.write_text(content)
    with pytest.raises(ConfigError):
        load_options(str(path))
