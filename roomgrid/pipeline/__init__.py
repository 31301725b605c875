"""
Room Grid Generation Pipeline Module.

Provides layout generation with retries, validation and file export.
"""

from .generation_pipeline import (
    GenerationPipeline,
    GenerationSettings,
    GenerationResult,
    PipelineProgress,
    PipelineStage,
    PipelineError,
    GenerationCancelledException,
    derive_attempt_seed,
    run_pipeline,
)

__all__ = [
    'GenerationPipeline',
    'GenerationSettings',
    'GenerationResult',
    'PipelineProgress',
    'PipelineStage',
    'PipelineError',
    'GenerationCancelledException',
    'derive_attempt_seed',
    'run_pipeline',
]
