"""Unit tests for pipeline-spec parsing."""

from __future__ import annotations

import pytest

from core.errors import DrillSpecError
from pipeline.spec import load_pipeline_spec, parse_pipeline_spec
from tests.fixture_paths import fixture_path


def test_load_pipeline_spec_parses_stages_in_order() -> None:
    """Valid spec should parse expected stage order and terminal."""
    spec = load_pipeline_spec(fixture_path("pipeline_spec/first_three_people.yaml"))

    assert tuple(stage.kind for stage in spec.stages) == ("sorted", "limit")
    assert spec.terminal.kind == "to_list"
    assert spec.item_kind == "person"


def test_load_pipeline_spec_traces_item_kinds() -> None:
    """Mapping people to first names should leave string items."""
    spec = load_pipeline_spec(fixture_path("pipeline_spec/joined_first_names.yaml"))

    assert spec.item_kind == "string"
    assert spec.terminal.args == {"separator": ","}


def test_load_pipeline_spec_invalid_stage_raises_error() -> None:
    """Unsupported stage name should raise spec error."""
    with pytest.raises(DrillSpecError):
        load_pipeline_spec(fixture_path("pipeline_spec/invalid_stage.yaml"))


def test_load_pipeline_spec_wrong_item_kind_raises_error() -> None:
    """Person projections over integers should be rejected before running."""
    with pytest.raises(DrillSpecError, match="expects person items"):
        load_pipeline_spec(fixture_path("pipeline_spec/wrong_item_kind.yaml"))


def test_load_pipeline_spec_join_requires_strings() -> None:
    """Joining records without mapping them to strings should be rejected."""
    with pytest.raises(DrillSpecError):
        load_pipeline_spec(fixture_path("pipeline_spec/join_people.yaml"))


def test_load_pipeline_spec_unknown_root_key_raises_error() -> None:
    """Unknown root fields should be rejected."""
    with pytest.raises(DrillSpecError):
        load_pipeline_spec(fixture_path("pipeline_spec/unknown_root_key.yaml"))


def test_load_pipeline_spec_missing_file_raises_error() -> None:
    """Missing spec file should raise spec error."""
    with pytest.raises(DrillSpecError):
        load_pipeline_spec(fixture_path("pipeline_spec/not-there.yaml"))


def test_to_dict_defaults_to_fail_on_duplicate() -> None:
    """to_dict should fail fast unless a policy is named."""
    spec = load_pipeline_spec(fixture_path("pipeline_spec/duplicate_keys.yaml"))

    assert spec.terminal.args["on_duplicate"] == "fail"


@pytest.mark.parametrize(
    "payload",
    [
        {"version": 2, "source": "people", "terminal": "count"},
        {"version": 1, "terminal": "count"},
        {"version": 1, "source": "people"},
        {"version": 1, "source": "people", "stages": [{"limit": -1}], "terminal": "count"},
        {"version": 1, "source": "people", "stages": [{"limit": 1, "map": "upper"}]},
        {"version": 1, "source": "people", "stages": [{"filter": {"projection": "first_name"}}]},
        {"version": 1, "source": {"kind": "range", "start": 1}, "terminal": "sum"},
        {"version": 1, "source": "people", "terminal": {"kind": "sum", "projection": "last_name"}},
        {"version": 1, "source": "people", "terminal": {"kind": "to_dict", "key": "last_name"}},
    ],
)
def test_parse_pipeline_spec_rejects_malformed_payloads(payload: object) -> None:
    """Malformed specs should fail at composition time."""
    with pytest.raises(DrillSpecError):
        parse_pipeline_spec(payload)


def test_parse_pipeline_spec_accepts_inline_records() -> None:
    """Inline records should parse into a person source."""
    spec = parse_pipeline_spec(
        {
            "version": 1,
            "source": {"kind": "records", "items": [{"first_name": "Ann", "last_name": "Lee"}]},
            "stages": ["distinct", {"map": "last_name"}, {"map": "length"}],
            "terminal": "sum",
        }
    )

    assert spec.source.kind == "records"
    assert spec.item_kind == "int"


def test_load_pipeline_spec_rejects_non_string_prefix() -> None:
    """A startswith filter needs a string prefix."""
    with pytest.raises(DrillSpecError, match="startswith"):
        load_pipeline_spec(fixture_path("pipeline_spec/invalid_filter_operand.yaml"))


@pytest.mark.parametrize(
    "filter_args",
    [
        {"projection": "length", "at_least": "4"},
        {"projection": "length", "at_most": True},
        {"projection": "length", "startswith": "4"},
        {"startswith": 4},
        {"at_most": 7},
    ],
)
def test_parse_pipeline_spec_rejects_mismatched_filter_operands(filter_args: object) -> None:
    """Filter operands must match the projected value kind."""
    payload = {
        "version": 1,
        "source": "people",
        "stages": [{"map": "first_name"}, {"filter": filter_args}],
        "terminal": "to_list",
    }

    with pytest.raises(DrillSpecError):
        parse_pipeline_spec(payload)


def test_load_pipeline_spec_accepts_matching_filter_operands() -> None:
    """Integer bounds over lengths and string prefixes over names should parse."""
    spec = load_pipeline_spec(fixture_path("pipeline_spec/filter_long_names.yaml"))

    assert tuple(stage.args["operator"] for stage in spec.stages[1:]) == (
        "at_least",
        "startswith",
    )
    assert spec.item_kind == "string"
