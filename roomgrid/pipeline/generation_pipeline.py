"""
Generation Pipeline for room grid layouts.

Orchestrates catalog checks, the placement search (with re-seeded retries),
layout validation, and export of the finished layout as JSON, an ASCII map,
and optional debug graphs.
"""

import time
import logging
import random
from pathlib import Path
from typing import Dict, Any, Optional, Callable, List, Tuple
from dataclasses import dataclass, field
from enum import Enum

from ..conversion.layout_export import render_ascii, write_layout_json
from ..conversion.world_coords import DEFAULT_CELL_SIZE, GridMapping
from ..generators.errors import GenerationError
from ..generators.instantiation import InMemoryInstantiator, RoomInstantiator
from ..generators.layout.grid_types import CellCoord
from ..generators.layout.layout_types import Layout
from ..generators.placement.search import PlacementSearch, SearchConfig, SearchResult
from ..generators.templates.catalog import RoomCatalog, build_default_catalog
from ..validation.core import ValidationError, ValidationResult
from ..validation.unified_validator import LayoutValidator

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class PipelineStage(Enum):
    INITIALIZE = "initialize"
    SEARCH = "search"
    VALIDATE = "validate"
    EXPORT = "export"
    COMPLETE = "complete"


GRAPH_FORMATS = ("dot", "json")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class PipelineError(Exception):
    pass


class GenerationCancelledException(PipelineError):
    pass


# ---------------------------------------------------------------------------
# Settings / Result dataclasses
# ---------------------------------------------------------------------------

@dataclass
class GenerationSettings:
    # Placement search
    total_rooms: int = 10
    start_template: Optional[str] = None
    max_candidates_per_door: Optional[int] = None
    max_steps: Optional[int] = None

    # Seeding for reproducible generation
    seed: Optional[int] = None  # None = random seed, otherwise deterministic

    # Re-seeded attempts before the pipeline gives up
    max_attempts: int = 5

    # World conversion
    cell_size: float = DEFAULT_CELL_SIZE

    # Export
    export_json: bool = True
    export_ascii: bool = False
    output_dir: Optional[str] = None
    map_name: str = "generated_layout"

    # Debug output
    enable_graph_dump: bool = False
    graph_dump_format: str = "dot"  # "dot" or "json"

    # Validation
    validate: bool = True
    strict_validation: bool = False

    # Misc
    verbose: bool = False


@dataclass
class PipelineProgress:
    stage: PipelineStage
    stage_progress: float
    overall_progress: float
    message: str
    elapsed_time: float
    estimated_remaining: float

    @property
    def percentage(self) -> int:
        return int(self.overall_progress * 100)


@dataclass
class GenerationResult:
    success: bool
    layout_entries: List[Tuple[str, CellCoord]] = field(default_factory=list)
    layout: Optional[Layout] = None
    seed: Optional[int] = None
    attempts: int = 0
    output_files: List[str] = field(default_factory=list)
    stages_completed: List[PipelineStage] = field(default_factory=list)
    validation: Optional[ValidationResult] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_time(self) -> float:
        return self.metrics.get("total_time", 0.0)

    @property
    def room_count(self) -> int:
        return len(self.layout_entries)

    def add_error(self, error: str, stage: Optional[PipelineStage] = None):
        if stage:
            error = f"[{stage.value}] {error}"
        self.errors.append(error)

    def add_warning(self, warning: str, stage: Optional[PipelineStage] = None):
        if stage:
            warning = f"[{stage.value}] {warning}"
        self.warnings.append(warning)


def derive_attempt_seed(global_seed: int, attempt: int) -> int:
    """Deterministic seed for retry ``attempt`` of a run seeded with ``global_seed``.

    Attempt 0 uses the global seed itself.
    """
    if attempt == 0:
        return global_seed
    return (global_seed * 31 + attempt) % (2**31 - 1)


# ---------------------------------------------------------------------------
# Progress tracker
# ---------------------------------------------------------------------------

class ProgressTracker:
    STAGE_WEIGHTS = {
        PipelineStage.INITIALIZE: 0.05,
        PipelineStage.SEARCH: 0.70,
        PipelineStage.VALIDATE: 0.10,
        PipelineStage.EXPORT: 0.15,
    }

    def __init__(self):
        self.start_time = time.time()
        self.stage_start_times: Dict[PipelineStage, float] = {}

    def start_stage(self, stage: PipelineStage):
        self.stage_start_times[stage] = time.time()

    def stage_durations(self) -> Dict[str, float]:
        """Seconds spent in each started stage; the last one runs until now."""
        starts = list(self.stage_start_times.items())
        durations = {}
        for i, (stage, started) in enumerate(starts):
            finished = starts[i + 1][1] if i + 1 < len(starts) else time.time()
            durations[stage.value] = finished - started
        return durations

    def calculate_progress(self, current_stage: PipelineStage, stage_progress: float) -> PipelineProgress:
        stages = list(self.STAGE_WEIGHTS.keys())
        if current_stage not in stages:
            overall = 1.0
        else:
            idx = stages.index(current_stage)
            completed = sum(self.STAGE_WEIGHTS[s] for s in stages[:idx])
            overall = completed + self.STAGE_WEIGHTS[current_stage] * stage_progress
        elapsed = time.time() - self.start_time
        remaining = (elapsed / overall - elapsed) if overall > 0.01 else 0.0
        return PipelineProgress(
            stage=current_stage,
            stage_progress=stage_progress,
            overall_progress=min(overall, 1.0),
            message="",
            elapsed_time=elapsed,
            estimated_remaining=max(0, remaining),
        )


# ---------------------------------------------------------------------------
# Main pipeline
# ---------------------------------------------------------------------------

class GenerationPipeline:
    """Generates a room layout from a catalog and writes the requested exports."""

    def __init__(self, settings: Optional[GenerationSettings] = None,
                 catalog: Optional[RoomCatalog] = None,
                 instantiator: Optional[RoomInstantiator] = None):
        self.settings = settings or GenerationSettings()
        self.catalog = catalog if catalog is not None else build_default_catalog()
        self.instantiator = instantiator or InMemoryInstantiator()
        self.is_running = False
        self.is_cancelled = False
        self.current_stage = PipelineStage.INITIALIZE
        self.progress_tracker = ProgressTracker()
        self.progress_callback: Optional[Callable[[PipelineProgress], None]] = None

        # Components
        self.validator: Optional[LayoutValidator] = None
        self.mapping: Optional[GridMapping] = None

        # Data
        self.search_result: Optional[SearchResult] = None
        self.layout: Optional[Layout] = None
        self._validate_settings()

    # -- helpers --

    def set_progress_callback(self, callback: Callable[[PipelineProgress], None]):
        self.progress_callback = callback

    def cancel(self):
        self.is_cancelled = True

    def _check_cancellation(self):
        if self.is_cancelled:
            raise GenerationCancelledException("Pipeline cancelled by user")

    def _update_progress(self, stage_progress: float, message: str):
        if self.is_cancelled:
            return
        progress = self.progress_tracker.calculate_progress(self.current_stage, stage_progress)
        progress.message = message
        if self.progress_callback:
            try:
                self.progress_callback(progress)
            except Exception:
                logger.debug("Progress callback raised", exc_info=True)

    def _validate_settings(self):
        errors = []
        s = self.settings
        if not isinstance(s.total_rooms, int) or s.total_rooms < 1:
            errors.append("Room count must be a positive integer")
        if s.max_attempts < 1:
            errors.append("max_attempts must be at least 1")
        if not s.cell_size > 0:
            errors.append("cell_size must be positive")
        if s.max_steps is not None and s.max_steps < 0:
            errors.append("max_steps cannot be negative")
        if s.max_candidates_per_door is not None and s.max_candidates_per_door < 1:
            errors.append("max_candidates_per_door must be at least 1")
        if s.graph_dump_format not in GRAPH_FORMATS:
            errors.append(f"graph_dump_format must be one of {', '.join(GRAPH_FORMATS)}")
        if errors:
            raise PipelineError(f"Invalid settings: {'; '.join(errors)}")

    def _output_dir(self) -> Path:
        out_dir = Path(self.settings.output_dir) if self.settings.output_dir else Path("output") / "layouts"
        out_dir.mkdir(parents=True, exist_ok=True)
        return out_dir

    def _raise_on_failure(self, validation: ValidationResult):
        if validation.failed:
            if self.settings.strict_validation:
                raise ValidationError(validation)
            raise PipelineError(
                "Validation failed: " + "; ".join(issue.format() for issue in validation.errors)
            )

    # -- stages --

    def _initialize_components(self, result: GenerationResult):
        self.current_stage = PipelineStage.INITIALIZE
        self.progress_tracker.start_stage(PipelineStage.INITIALIZE)
        self._update_progress(0.0, "Initializing components...")

        self.mapping = GridMapping(cell_size=self.settings.cell_size)
        self.validator = LayoutValidator(strict_mode=self.settings.strict_validation,
                                         enabled=self.settings.validate)

        catalog_check = self.validator.validate_catalog(
            self.catalog, self.settings.start_template, self.instantiator
        )
        for issue in catalog_check.warnings:
            result.add_warning(issue.format(), PipelineStage.INITIALIZE)
        self._raise_on_failure(catalog_check)

        logger.info("Catalog '%s': %d templates", self.catalog.name, len(self.catalog))
        self._update_progress(1.0, "Initialization complete")

    def _run_search(self, result: GenerationResult, first_seed: int) -> Layout:
        self.current_stage = PipelineStage.SEARCH
        self.progress_tracker.start_stage(PipelineStage.SEARCH)
        self._update_progress(0.0, "Placing rooms...")

        attempt_seeds = []
        for attempt in range(self.settings.max_attempts):
            self._check_cancellation()
            seed = derive_attempt_seed(first_seed, attempt)
            attempt_seeds.append(seed)
            result.attempts = attempt + 1

            config = SearchConfig(
                total_rooms=self.settings.total_rooms,
                seed=seed,
                start_template=self.settings.start_template,
                max_candidates_per_door=self.settings.max_candidates_per_door,
                max_steps=self.settings.max_steps,
            )
            search_result = PlacementSearch(self.catalog, config, self.instantiator).run()
            self.search_result = search_result
            result.metrics['search'] = search_result.stats.to_dict()

            if search_result.success:
                result.seed = seed
                result.metrics['attempt_seeds'] = attempt_seeds
                self._update_progress(1.0, f"Placed {search_result.room_count} rooms")
                return search_result.layout

            logger.warning("Attempt %d/%d with seed %d failed (%s)",
                           attempt + 1, self.settings.max_attempts, seed, search_result.reason)
            self._update_progress((attempt + 1) / self.settings.max_attempts,
                                  f"Attempt {attempt + 1} failed, retrying")

        result.metrics['attempt_seeds'] = attempt_seeds
        raise PipelineError(
            f"No layout of {self.settings.total_rooms} rooms after "
            f"{self.settings.max_attempts} attempt(s) ({self.search_result.reason})"
        )

    def _validate_layout(self, result: GenerationResult):
        self.current_stage = PipelineStage.VALIDATE
        self.progress_tracker.start_stage(PipelineStage.VALIDATE)
        self._check_cancellation()
        self._update_progress(0.0, "Validating layout...")

        validation = self.validator.validate_layout(self.layout, self.settings.total_rooms)
        result.validation = validation
        result.metrics['validation'] = validation.to_dict()
        for issue in validation.warnings:
            result.add_warning(issue.format(), PipelineStage.VALIDATE)
        self._raise_on_failure(validation)

        self._update_progress(1.0, "Validation complete")

    def _export(self, result: GenerationResult):
        self.current_stage = PipelineStage.EXPORT
        self.progress_tracker.start_stage(PipelineStage.EXPORT)
        self._check_cancellation()
        self._update_progress(0.0, "Exporting layout...")

        if self.settings.export_json:
            path = write_layout_json(self._output_dir() / f"{self.settings.map_name}.json",
                                     self.layout, self.mapping, result.seed)
            result.output_files.append(str(path))

        if self.settings.export_ascii:
            self._write_ascii_map(result)

        if self.settings.enable_graph_dump:
            self._write_graph_dump(result, result.seed)

        self._update_progress(1.0, f"Exported {len(result.output_files)} file(s)")

    def _write_ascii_map(self, result: GenerationResult):
        ascii_path = self._output_dir() / f"{self.settings.map_name}.txt"
        with open(ascii_path, 'w', encoding='utf-8') as f:
            f.write(render_ascii(self.layout))
            f.write("\n")
        result.output_files.append(str(ascii_path))
        logger.info("ASCII map written: %s", ascii_path)

    def _write_graph_dump(self, result: GenerationResult, seed: int):
        """Write debug graph dump (DOT or JSON format)."""
        from .debug.graph_export import export_layout_dot, export_layout_json

        out_dir = self._output_dir()
        categories = {t.template_id: t.category for t in self.catalog}

        try:
            if self.settings.graph_dump_format == "json":
                content = export_layout_json(self.layout, seed, categories, result.metrics.get('search'))
                graph_path = out_dir / f"{self.settings.map_name}_debug.json"
            else:  # Default to DOT
                content = export_layout_dot(self.layout, categories)
                graph_path = out_dir / f"{self.settings.map_name}_debug.dot"

            with open(graph_path, 'w', encoding='utf-8') as f:
                f.write(content)

            result.output_files.append(str(graph_path))
            logger.info("Debug graph written: %s", graph_path)
        except OSError as e:
            result.add_warning(f"Failed to write debug graph: {e}", PipelineStage.EXPORT)

    # -- main entry --

    def generate(self) -> GenerationResult:
        """Run every stage and return the outcome.

        Raises:
            PipelineError: If the pipeline is already running
            ValidationError: If strict validation rejects the catalog or layout
        """
        if self.is_running:
            raise PipelineError("Pipeline is already running")
        self.is_running = True
        self.is_cancelled = False
        self.progress_tracker = ProgressTracker()
        result = GenerationResult(success=False)
        start_time = time.time()

        try:
            # Resolve seed for reproducible generation
            if self.settings.seed is not None:
                first_seed = self.settings.seed
            else:
                first_seed = random.randint(0, 2**31 - 1)

            result.metrics['seed'] = first_seed
            logger.info("Generation seed: %d", first_seed)
            logger.info("Starting layout generation: %d rooms, catalog '%s'",
                        self.settings.total_rooms, self.catalog.name)

            stages = [
                (lambda: self._initialize_components(result), "Initialize"),
                (lambda: self._search_stage(result, first_seed), "Search"),
                (lambda: self._validate_layout(result), "Validate"),
                (lambda: self._export(result), "Export"),
            ]
            for stage_fn, desc in stages:
                try:
                    logger.info("Stage: %s", desc)
                    stage_fn()
                    result.stages_completed.append(self.current_stage)
                except GenerationCancelledException:
                    result.add_error("Pipeline cancelled by user")
                    return result
                except (PipelineError, GenerationError) as e:
                    result.add_error(str(e), self.current_stage)
                    return result

            self.current_stage = PipelineStage.COMPLETE
            result.stages_completed.append(PipelineStage.COMPLETE)
            result.success = True
            result.metrics["total_time"] = time.time() - start_time
            result.metrics["stage_times"] = self.progress_tracker.stage_durations()
            logger.info("Pipeline complete in %.2fs", result.metrics["total_time"])
        except ValidationError:
            raise
        except Exception as e:
            logger.exception("Unexpected pipeline error")
            result.add_error(f"Unexpected error: {e}")
        finally:
            self.is_running = False
        return result

    def _search_stage(self, result: GenerationResult, first_seed: int):
        self.layout = self._run_search(result, first_seed)
        result.layout = self.layout
        result.layout_entries = self.layout.entries()


def run_pipeline(total_rooms: int, catalog: Optional[RoomCatalog] = None,
                 **options) -> GenerationResult:
    """Convenience wrapper: build settings from keyword options and run once."""
    settings = GenerationSettings(total_rooms=total_rooms, **options)
    return GenerationPipeline(settings, catalog).generate()
