"""Typed pipeline-spec parsing for declarative drills.

This module loads and validates YAML pipeline specs. A spec names a source,
an ordered list of stages and one terminal operation. Item kinds are traced
from the source through every stage, so a projection applied to the wrong
kind of item is rejected before the pipeline runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Mapping, Sequence, cast

from core.constants import PIPELINE_SPEC_VERSION, TEXT_ENCODING
from core.errors import DrillDependencyError, DrillSpecError
from pipeline.projections import (
    FLAT_PROJECTIONS,
    PREDICATE_OPERATORS,
    PROJECTIONS,
    Projection,
    accepts_kind,
)

SourceKind = Literal["people", "records", "words", "verse", "range", "range_closed"]
StageKind = Literal["filter", "map", "flat_map", "sorted", "limit", "distinct"]
TerminalKind = Literal["to_list", "count", "sum", "max", "min", "join", "to_dict", "group_by"]
DuplicatePolicy = Literal["fail", "keep_first", "keep_last"]

SUPPORTED_SOURCES: tuple[SourceKind, ...] = (
    "people",
    "records",
    "words",
    "verse",
    "range",
    "range_closed",
)
SUPPORTED_STAGES: tuple[StageKind, ...] = (
    "filter",
    "map",
    "flat_map",
    "sorted",
    "limit",
    "distinct",
)
SUPPORTED_TERMINALS: tuple[TerminalKind, ...] = (
    "to_list",
    "count",
    "sum",
    "max",
    "min",
    "join",
    "to_dict",
    "group_by",
)
SUPPORTED_DUPLICATE_POLICIES: tuple[DuplicatePolicy, ...] = ("fail", "keep_first", "keep_last")

_SOURCE_ITEM_KINDS: Mapping[str, str] = {
    "people": "person",
    "records": "person",
    "words": "string",
    "verse": "string",
    "range": "int",
    "range_closed": "int",
}
_TERMINAL_KEYS: Mapping[str, set[str]] = {
    "to_list": set(),
    "count": set(),
    "sum": {"projection"},
    "max": {"projection"},
    "min": {"projection"},
    "join": {"separator"},
    "to_dict": {"key", "value", "on_duplicate"},
    "group_by": {"key", "value"},
}


@dataclass(frozen=True)
class SourceSpec:
    """Pipeline source description."""

    kind: SourceKind
    items: tuple[object, ...] = ()
    start: int | None = None
    end: int | None = None
    path: str | None = None


@dataclass(frozen=True)
class StageSpec:
    """One validated intermediate stage."""

    kind: StageKind
    args: Mapping[str, object]


@dataclass(frozen=True)
class TerminalSpec:
    """Validated terminal operation."""

    kind: TerminalKind
    args: Mapping[str, object]


@dataclass(frozen=True)
class PipelineSpec:
    """Validated pipeline-spec root object.

    Attributes:
        version: Schema version.
        source: Source description.
        stages: Intermediate stages in order.
        terminal: Terminal operation.
        item_kind: Kind of item reaching the terminal.
    """

    version: int
    source: SourceSpec
    stages: tuple[StageSpec, ...]
    terminal: TerminalSpec
    item_kind: str


def load_pipeline_spec(spec_path: str) -> PipelineSpec:
    """Load and validate a YAML pipeline spec from disk.

    Args:
        spec_path: File path to YAML pipeline spec.

    Returns:
        Fully validated pipeline spec.

    Raises:
        DrillDependencyError: If PyYAML is unavailable.
        DrillSpecError: If file is invalid or schema checks fail.
    """
    payload = _load_yaml_payload(spec_path)
    return parse_pipeline_spec(payload)


def parse_pipeline_spec(payload: object) -> PipelineSpec:
    """Validate an already-decoded pipeline spec payload.

    Raises:
        DrillSpecError: If schema or item-kind checks fail.
    """
    root_mapping = _expect_mapping(payload, "pipeline spec root")
    _validate_root_keys(root_mapping)
    version = _parse_version(root_mapping)
    source = _parse_source(root_mapping)
    stages = _parse_stages(root_mapping)
    terminal = _parse_terminal(root_mapping)
    item_kind = _trace_item_kind(source, stages, terminal)
    return PipelineSpec(
        version=version,
        source=source,
        stages=stages,
        terminal=terminal,
        item_kind=item_kind,
    )


def _load_yaml_payload(spec_path: str) -> object:
    try:
        import yaml  # type: ignore[import-untyped]
    except ImportError as error:  # pragma: no cover - dependency failure
        raise DrillDependencyError(
            "YAML pipeline-spec support requires PyYAML. Install with 'pip install pyyaml'."
        ) from error
    spec_file = Path(spec_path).expanduser().resolve()
    if not spec_file.exists():
        raise DrillSpecError(
            f"Pipeline spec file does not exist at {spec_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(spec_file.read_text(encoding=TEXT_ENCODING)))
    except OSError as error:
        raise DrillSpecError(
            f"Failed to read pipeline spec at {spec_file}: {error}. "
            "Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise DrillSpecError(
            f"Failed to parse YAML pipeline spec at {spec_file}: {error}. "
            "Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise DrillSpecError(
            f"Pipeline spec at {spec_file} is empty. Define 'version', 'source' and 'terminal'."
        )
    return payload


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise DrillSpecError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise DrillSpecError(f"Invalid {context}: expected object mapping, got {type(value).__name__}.")


def _expect_sequence(value: object, context: str) -> Sequence[object]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    raise DrillSpecError(f"Invalid {context}: expected list, got {type(value).__name__}.")


def _expect_int(value: object, context: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DrillSpecError(f"Invalid {context}: expected integer, got {value!r}.")
    return value


def _expect_string(value: object, context: str) -> str:
    if not isinstance(value, str):
        raise DrillSpecError(f"Invalid {context}: expected string, got {value!r}.")
    return value


def _parse_version(root_mapping: Mapping[str, object]) -> int:
    raw_version = root_mapping.get("version")
    if isinstance(raw_version, bool) or not isinstance(raw_version, int):
        raise DrillSpecError("Pipeline spec field 'version' must be an integer. Set version: 1.")
    if raw_version != PIPELINE_SPEC_VERSION:
        raise DrillSpecError(
            f"Unsupported pipeline spec version {raw_version}. "
            f"Use version: {PIPELINE_SPEC_VERSION}."
        )
    return raw_version


def _parse_source(root_mapping: Mapping[str, object]) -> SourceSpec:
    raw_source = root_mapping.get("source")
    if raw_source is None:
        raise DrillSpecError("Pipeline spec missing required field 'source'.")
    if isinstance(raw_source, str):
        source_mapping: Mapping[str, object] = {"kind": raw_source}
    else:
        source_mapping = _expect_mapping(raw_source, "pipeline spec source")
    raw_kind = source_mapping.get("kind")
    if raw_kind not in SUPPORTED_SOURCES:
        raise DrillSpecError(
            f"Unsupported source '{raw_kind}'. Use one of: {', '.join(SUPPORTED_SOURCES)}."
        )
    kind = cast(SourceKind, raw_kind)
    if kind in ("range", "range_closed"):
        _validate_keys(source_mapping, {"kind", "start", "end"}, "pipeline spec source")
        return SourceSpec(
            kind=kind,
            start=_expect_int(source_mapping.get("start"), "source start"),
            end=_expect_int(source_mapping.get("end"), "source end"),
        )
    if kind == "words":
        _validate_keys(source_mapping, {"kind", "items"}, "pipeline spec source")
        raw_items = _expect_sequence(source_mapping.get("items"), "source items")
        items = tuple(_expect_string(item, "source item") for item in raw_items)
        return SourceSpec(kind=kind, items=items)
    if kind == "records":
        _validate_keys(source_mapping, {"kind", "items"}, "pipeline spec source")
        raw_items = _expect_sequence(source_mapping.get("items"), "source items")
        return SourceSpec(kind=kind, items=tuple(_parse_record(item) for item in raw_items))
    if kind == "verse":
        _validate_keys(source_mapping, {"kind", "path"}, "pipeline spec source")
        raw_path = source_mapping.get("path")
        path = None if raw_path is None else _expect_string(raw_path, "source path")
        return SourceSpec(kind=kind, path=path)
    _validate_keys(source_mapping, {"kind"}, "pipeline spec source")
    return SourceSpec(kind=kind)


def _parse_record(raw_item: object) -> Mapping[str, object]:
    record_mapping = _expect_mapping(raw_item, "source record")
    _validate_keys(record_mapping, {"first_name", "last_name"}, "source record")
    for field_name in ("first_name", "last_name"):
        _expect_string(record_mapping.get(field_name), f"source record {field_name}")
    return record_mapping


def _parse_stages(root_mapping: Mapping[str, object]) -> tuple[StageSpec, ...]:
    raw_stages = root_mapping.get("stages")
    if raw_stages is None:
        return ()
    stage_rows = _expect_sequence(raw_stages, "pipeline spec stages")
    return tuple(_parse_stage(row, index) for index, row in enumerate(stage_rows))


def _parse_stage(stage_value: object, stage_index: int) -> StageSpec:
    context = f"pipeline spec stage #{stage_index + 1}"
    raw_kind, raw_args = _split_operation(stage_value, context)
    if raw_kind not in SUPPORTED_STAGES:
        raise DrillSpecError(
            f"Unsupported stage '{raw_kind}' in {context}. "
            f"Use one of: {', '.join(SUPPORTED_STAGES)}."
        )
    kind = cast(StageKind, raw_kind)
    if kind in ("map", "flat_map"):
        return StageSpec(kind=kind, args={"projection": _expect_string(raw_args, context)})
    if kind == "limit":
        max_size = _expect_int(raw_args, context)
        if max_size < 0:
            raise DrillSpecError(f"Invalid {context}: limit must be non-negative.")
        return StageSpec(kind=kind, args={"max_size": max_size})
    if kind == "distinct":
        if raw_args is not None:
            raise DrillSpecError(f"Invalid {context}: distinct takes no arguments.")
        return StageSpec(kind=kind, args={})
    if kind == "sorted":
        return StageSpec(kind=kind, args=_parse_sort_args(raw_args, context))
    return StageSpec(kind=kind, args=_parse_filter_args(raw_args, context))


def _split_operation(value: object, context: str) -> tuple[str, object]:
    if isinstance(value, str):
        return value, None
    operation_mapping = _expect_mapping(value, context)
    if len(operation_mapping) != 1:
        raise DrillSpecError(
            f"Invalid {context}: expected exactly one operation name, "
            f"got {', '.join(sorted(operation_mapping)) or 'none'}."
        )
    ((name, args),) = operation_mapping.items()
    return name, args


def _parse_sort_args(raw_args: object, context: str) -> Mapping[str, object]:
    if raw_args is None:
        return {"by": (), "descending": False}
    sort_mapping = _expect_mapping(raw_args, context)
    _validate_keys(sort_mapping, {"by", "descending"}, context)
    raw_by = sort_mapping.get("by", ())
    if isinstance(raw_by, str):
        raw_by = (raw_by,)
    keys = tuple(
        _expect_string(key, f"{context} sort key") for key in _expect_sequence(raw_by, context)
    )
    descending = sort_mapping.get("descending", False)
    if not isinstance(descending, bool):
        raise DrillSpecError(f"Invalid {context}: 'descending' must be true or false.")
    return {"by": keys, "descending": descending}


def _parse_filter_args(raw_args: object, context: str) -> Mapping[str, object]:
    filter_mapping = _expect_mapping(raw_args, context)
    projection = filter_mapping.get("projection", "identity")
    _expect_string(projection, f"{context} projection")
    operators = sorted(set(filter_mapping) - {"projection"})
    if len(operators) != 1 or operators[0] not in PREDICATE_OPERATORS:
        raise DrillSpecError(
            f"Invalid {context}: expected one comparison from "
            f"{', '.join(PREDICATE_OPERATORS)}, got {', '.join(operators) or 'none'}."
        )
    operator_name = operators[0]
    return {
        "projection": projection,
        "operator": operator_name,
        "operand": filter_mapping[operator_name],
    }


def _parse_terminal(root_mapping: Mapping[str, object]) -> TerminalSpec:
    raw_terminal = root_mapping.get("terminal")
    if raw_terminal is None:
        raise DrillSpecError(
            "Pipeline spec missing required field 'terminal'. "
            f"Use one of: {', '.join(SUPPORTED_TERMINALS)}."
        )
    if isinstance(raw_terminal, str):
        terminal_mapping: Mapping[str, object] = {"kind": raw_terminal}
    else:
        terminal_mapping = _expect_mapping(raw_terminal, "pipeline spec terminal")
    raw_kind = terminal_mapping.get("kind")
    if raw_kind not in SUPPORTED_TERMINALS:
        raise DrillSpecError(
            f"Unsupported terminal '{raw_kind}'. Use one of: {', '.join(SUPPORTED_TERMINALS)}."
        )
    kind = cast(TerminalKind, raw_kind)
    allowed_keys = _TERMINAL_KEYS[kind]
    _validate_keys(terminal_mapping, allowed_keys | {"kind"}, "pipeline spec terminal")
    args = {key: value for key, value in terminal_mapping.items() if key != "kind"}
    for key in ("projection", "key", "value", "separator"):
        if key in args:
            _expect_string(args[key], f"terminal {key}")
    if kind == "to_dict":
        _expect_string(args.get("key"), "terminal key")
        _expect_string(args.get("value"), "terminal value")
        policy = args.setdefault("on_duplicate", "fail")
        if policy not in SUPPORTED_DUPLICATE_POLICIES:
            raise DrillSpecError(
                f"Unsupported on_duplicate policy '{policy}'. "
                f"Use one of: {', '.join(SUPPORTED_DUPLICATE_POLICIES)}."
            )
    if kind == "group_by":
        _expect_string(args.get("key"), "terminal key")
    return TerminalSpec(kind=kind, args=args)


def _trace_item_kind(
    source: SourceSpec,
    stages: tuple[StageSpec, ...],
    terminal: TerminalSpec,
) -> str:
    item_kind = _SOURCE_ITEM_KINDS[source.kind]
    for index, stage in enumerate(stages):
        item_kind = _stage_output_kind(stage, item_kind, f"pipeline spec stage #{index + 1}")
    _check_terminal_kind(terminal, item_kind)
    return item_kind


def _stage_output_kind(stage: StageSpec, item_kind: str, context: str) -> str:
    if stage.kind == "map":
        projection = _lookup_projection(str(stage.args["projection"]), item_kind, context)
        return projection.output_kind(item_kind)
    if stage.kind == "flat_map":
        flat_name = str(stage.args["projection"])
        flat_projection = FLAT_PROJECTIONS.get(flat_name)
        if flat_projection is None:
            raise DrillSpecError(
                f"Unknown flat_map projection '{flat_name}' in {context}. "
                f"Use one of: {', '.join(FLAT_PROJECTIONS)}."
            )
        if not accepts_kind(flat_projection.accepts, item_kind):
            raise DrillSpecError(
                f"flat_map projection '{flat_name}' in {context} expects "
                f"{flat_projection.accepts} items, got {item_kind}."
            )
        return flat_projection.produces
    if stage.kind == "filter":
        projection = _lookup_projection(str(stage.args["projection"]), item_kind, context)
        _check_filter_operand(
            str(stage.args["operator"]),
            stage.args["operand"],
            projection.output_kind(item_kind),
            context,
        )
    if stage.kind == "sorted":
        for key_name in cast(tuple[str, ...], stage.args["by"]):
            _lookup_projection(key_name, item_kind, context)
    return item_kind


def _check_filter_operand(
    operator_name: str,
    operand: object,
    value_kind: str,
    context: str,
) -> None:
    if operator_name in ("equals", "not_equals"):
        return
    if operator_name == "startswith":
        if value_kind != "string" or not isinstance(operand, str):
            raise DrillSpecError(
                f"Invalid {context}: startswith compares string values with a string "
                f"prefix, got {value_kind} values and {type(operand).__name__} {operand!r}."
            )
        return
    if value_kind == "int":
        operand_ok = isinstance(operand, int) and not isinstance(operand, bool)
    elif value_kind == "string":
        operand_ok = isinstance(operand, str)
    else:
        operand_ok = False
    if not operand_ok:
        raise DrillSpecError(
            f"Invalid {context}: {operator_name} compares {value_kind} values, "
            f"got {type(operand).__name__} operand {operand!r}."
        )


def _check_terminal_kind(terminal: TerminalSpec, item_kind: str) -> None:
    context = f"terminal '{terminal.kind}'"
    if terminal.kind == "join" and item_kind != "string":
        raise DrillSpecError(f"{context} expects string items, got {item_kind}. Map items first.")
    if terminal.kind == "sum":
        projection_name = str(terminal.args.get("projection", "identity"))
        projection = _lookup_projection(projection_name, item_kind, context)
        if projection.output_kind(item_kind) != "int":
            raise DrillSpecError(f"{context} needs integer values, got {item_kind}.")
    if terminal.kind in ("max", "min"):
        _lookup_projection(str(terminal.args.get("projection", "identity")), item_kind, context)
    if terminal.kind in ("to_dict", "group_by"):
        _lookup_projection(str(terminal.args["key"]), item_kind, context)
        if "value" in terminal.args:
            _lookup_projection(str(terminal.args["value"]), item_kind, context)


def _lookup_projection(name: str, item_kind: str, context: str) -> Projection:
    projection = PROJECTIONS.get(name)
    if projection is None:
        raise DrillSpecError(
            f"Unknown projection '{name}' in {context}. Use one of: {', '.join(PROJECTIONS)}."
        )
    if not accepts_kind(projection.accepts, item_kind):
        raise DrillSpecError(
            f"Projection '{name}' in {context} expects {projection.accepts} items, got {item_kind}."
        )
    return projection


def _validate_keys(mapping: Mapping[str, object], allowed_keys: set[str], context: str) -> None:
    unknown_keys = sorted(set(mapping) - allowed_keys)
    if unknown_keys:
        raise DrillSpecError(f"Invalid {context}: unknown fields {', '.join(unknown_keys)}.")


def _validate_root_keys(root_mapping: Mapping[str, object]) -> None:
    allowed_keys = {"version", "source", "stages", "terminal"}
    unknown_keys = sorted(set(root_mapping) - allowed_keys)
    if unknown_keys:
        raise DrillSpecError(
            f"Pipeline spec contains unknown root fields: {', '.join(unknown_keys)}."
        )
