"""
Main render pipeline.

Orchestrates the three channel passes and their normalization, from a
validated configuration to grids ready for presentation.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import numpy as np

from buddhascope.config import BuddhabrotConfig
from buddhascope.core.accumulator import ChannelResult, DensityGrid, accumulate
from buddhascope.core.normalizer import normalize

# progress_callback(channel_name, samples_done, samples_total)
PipelineProgress = Callable[[str, int, int], None]


@dataclass
class RenderResult:
    """Finished render: raw channels plus their normalized grids."""

    config: BuddhabrotConfig
    channels: List[ChannelResult]
    normalized: Dict[str, np.ndarray]
    max_values: Dict[str, float]

    @property
    def shape(self) -> tuple[int, int]:
        return (self.config.height, self.config.width)

    def channel(self, name: str) -> ChannelResult:
        for ch in self.channels:
            if ch.name == name:
                return ch
        raise KeyError(name)


class BuddhabrotPipeline:
    """
    Complete sampling-to-color-buffer pipeline.

    Channels run one after another, each one sharded across
    ``config.workers``. The running maximum is threaded through all passes;
    whether normalization uses it or each channel's own maximum is set by
    ``config.normalization``.
    """

    def __init__(self, config: Optional[BuddhabrotConfig] = None, rng: Optional[np.random.Generator] = None):
        """
        Initialize the pipeline.

        Args:
            config: Run configuration; validated immediately.
            rng: Optional generator that overrides ``config.seed``.
        """
        self.config = (config or BuddhabrotConfig()).validate()
        self.rng = rng
        if self.rng is None and self.config.seed is not None:
            self.rng = np.random.default_rng(self.config.seed)

    def accumulate_channels(self, progress_callback: Optional[PipelineProgress] = None) -> List[ChannelResult]:
        """Run every channel's accumulation pass in order."""
        cfg = self.config
        results = []
        running_max = 0

        for params in cfg.channels:
            grid = DensityGrid(cfg.height, cfg.width)

            def _progress(done: int, total: int, _name: str = params.name):
                if progress_callback:
                    progress_callback(_name, done, total)

            running_max = accumulate(
                grid,
                cfg.viewport,
                params.iterations,
                params.samples,
                running_max,
                rng=self.rng,
                workers=cfg.workers,
                batch_size=cfg.batch_size,
                progress_callback=_progress,
            )
            results.append(
                ChannelResult(
                    name=params.name,
                    iterations=params.iterations,
                    samples=params.samples,
                    grid=grid,
                    running_max=running_max,
                )
            )
        return results

    def normalize_channels(self, channels: List[ChannelResult]) -> tuple[Dict[str, np.ndarray], Dict[str, float]]:
        """Normalize each channel according to the configured mode."""
        cfg = self.config
        shared_max = max((ch.running_max for ch in channels), default=0)

        normalized = {}
        max_values = {}
        for ch in channels:
            if cfg.normalization == "shared":
                max_value = shared_max
            else:
                max_value = ch.grid.max()
            max_values[ch.name] = float(max_value)
            normalized[ch.name] = normalize(ch.grid, max_value, cfg.output_scale)
        return normalized, max_values

    def run(self, progress_callback: Optional[PipelineProgress] = None) -> RenderResult:
        """
        Run the full pipeline.

        Args:
            progress_callback: Optional callback(channel_name, done, total).

        Returns:
            RenderResult with three channels of identical shape.
        """
        channels = self.accumulate_channels(progress_callback)
        normalized, max_values = self.normalize_channels(channels)
        return RenderResult(
            config=self.config,
            channels=channels,
            normalized=normalized,
            max_values=max_values,
        )
