"""Pipeline-spec execution engine for CLI and SDK workflows.

This module turns a validated pipeline spec into a ``Stream`` over the
fixed drill data and runs its terminal operation.
"""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass, replace
from pathlib import Path
from typing import Any, Callable, Mapping, cast

from core.config import DrillsConfig
from core.constants import DEFAULT_JOIN_SEPARATOR
from core.logging_config import get_logger
from drills.people import PEOPLE
from pipeline.collectors import mapping
from pipeline.comparators import Comparator, comparing, natural_order
from pipeline.projections import (
    FLAT_PROJECTIONS,
    PROJECTIONS,
    build_predicate,
    person_from_mapping,
)
from pipeline.spec import PipelineSpec, SourceSpec, StageSpec, TerminalSpec, load_pipeline_spec
from pipeline.stream import Stream

_LOGGER = get_logger(__name__)

_MERGE_POLICIES: Mapping[str, Callable[[Any, Any], Any] | None] = {
    "fail": None,
    "keep_first": lambda existing, _incoming: existing,
    "keep_last": lambda _existing, incoming: incoming,
}


def execute_pipeline_spec_file(spec_path: str, config: DrillsConfig) -> Any:
    """Load, build and run a YAML pipeline spec.

    Args:
        spec_path: Path to the YAML pipeline spec.
        config: Runtime configuration for the verse source.

    Returns:
        The terminal result.

    Raises:
        DrillSpecError: If the spec is invalid.
        DrillSourceError: If a verse source cannot be read.
        DrillDuplicateKeyError: If ``to_dict`` keys collide under ``fail``.
    """
    spec = _resolve_source_path(load_pipeline_spec(spec_path), Path(spec_path).parent)
    result = execute_pipeline_spec(spec, config)
    _LOGGER.info(
        "pipeline_spec_completed",
        spec_path=spec_path,
        source=spec.source.kind,
        stages=[stage.kind for stage in spec.stages],
        terminal=spec.terminal.kind,
    )
    return result


def execute_pipeline_spec(spec: PipelineSpec, config: DrillsConfig) -> Any:
    """Run an already validated pipeline spec."""
    stream = build_stream(spec, config)
    return _run_terminal(stream, spec.terminal)


def build_stream(spec: PipelineSpec, config: DrillsConfig) -> Stream:
    """Build the intermediate pipeline described by a spec."""
    stream = _build_source(spec.source, config)
    for stage in spec.stages:
        stream = _apply_stage(stream, stage)
    return stream


def render_result(result: Any) -> str:
    """Render a terminal result as one JSON line."""
    return json.dumps(_to_jsonable(result), ensure_ascii=False)


def _resolve_source_path(spec: PipelineSpec, spec_dir: Path) -> PipelineSpec:
    if spec.source.path is None:
        return spec
    source_path = Path(spec.source.path).expanduser()
    if not source_path.is_absolute():
        source_path = spec_dir / source_path
    return replace(spec, source=replace(spec.source, path=str(source_path)))


def _build_source(source: SourceSpec, config: DrillsConfig) -> Stream:
    if source.kind == "people":
        return Stream.from_iterable(PEOPLE)
    if source.kind == "records":
        records = [person_from_mapping(cast(Mapping[str, object], row)) for row in source.items]
        return Stream.from_iterable(records)
    if source.kind == "words":
        return Stream.from_iterable(source.items)
    if source.kind == "verse":
        return Stream.from_lines(source.path or config.verse_path)
    start = cast(int, source.start)
    end = cast(int, source.end)
    if source.kind == "range":
        return Stream.range(start, end)
    return Stream.range_closed(start, end)


def _apply_stage(stream: Stream, stage: StageSpec) -> Stream:
    args = stage.args
    if stage.kind == "map":
        return stream.map(PROJECTIONS[str(args["projection"])].function)
    if stage.kind == "flat_map":
        return stream.flat_map(FLAT_PROJECTIONS[str(args["projection"])].function)
    if stage.kind == "filter":
        projection = PROJECTIONS[str(args["projection"])]
        return stream.filter(build_predicate(projection, str(args["operator"]), args["operand"]))
    if stage.kind == "sorted":
        return stream.sorted(_build_comparator(args))
    if stage.kind == "limit":
        return stream.limit(cast(int, args["max_size"]))
    return stream.distinct()


def _build_comparator(args: Mapping[str, object]) -> Comparator:
    key_names = cast(tuple[str, ...], args["by"])
    if not key_names:
        comparator = natural_order()
    else:
        comparator = comparing(PROJECTIONS[key_names[0]].function)
        for key_name in key_names[1:]:
            comparator = comparator.then_comparing(PROJECTIONS[key_name].function)
    return comparator.reversed() if args["descending"] else comparator


def _run_terminal(stream: Stream, terminal: TerminalSpec) -> Any:
    args = terminal.args
    if terminal.kind == "to_list":
        return stream.to_list()
    if terminal.kind == "count":
        return stream.count()
    if terminal.kind == "join":
        return stream.join(str(args.get("separator", DEFAULT_JOIN_SEPARATOR)))
    if terminal.kind in ("sum", "max", "min"):
        projection = PROJECTIONS[str(args.get("projection", "identity"))].function
        return getattr(stream, terminal.kind)(projection)
    key_fn = PROJECTIONS[str(args["key"])].function
    if terminal.kind == "to_dict":
        value_fn = PROJECTIONS[str(args["value"])].function
        return stream.to_dict(key_fn, value_fn, _MERGE_POLICIES[str(args["on_duplicate"])])
    if "value" in args:
        return stream.group_by(key_fn, mapping(PROJECTIONS[str(args["value"])].function))
    return stream.group_by(key_fn)


def _to_jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, dict):
        return {str(key): _to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(item) for item in value]
    return value
