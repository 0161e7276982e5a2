"""Render settings.

Settings can be built directly, read from ``WHITTED_*`` environment variables
with :meth:`RenderSettings.from_env`, and overridden field by field with
:meth:`RenderSettings.override` (used by the command-line renderer).

Example:
    >>> from src.whitted.config import RenderSettings
    >>> settings = RenderSettings.from_env({"WHITTED_WORKERS": "4"})
    >>> settings.workers, settings.recursion_limit
    (4, 4)
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from src.whitted.camera.pinhole import ANTI_ALIASING_OFFSETS, DEFAULT_BAND_SIZE
from src.whitted.scene.world import DEFAULT_RECURSION_LIMIT

ENV_PREFIX = "WHITTED_"


@dataclass(frozen=True)
class RenderSettings:
    """Options controlling a render.

    Attributes:
        recursion_limit: Reflection/refraction depth (the world clamps
            it to at least 1).
        workers: Worker processes for parallel rendering; None renders in
            the calling process.
        band_size: Rows per parallel work item.
        anti_aliasing: Camera supersampling level (1..5).
        gamma: Gamma applied on export; 1.0 writes linear values.
    """

    recursion_limit: int = DEFAULT_RECURSION_LIMIT
    workers: int | None = None
    band_size: int = DEFAULT_BAND_SIZE
    anti_aliasing: int = 1
    gamma: float = 1.0

    def __post_init__(self) -> None:
        if self.workers is not None and self.workers < 0:
            raise ValueError(f"workers must be non-negative, got {self.workers}")
        if self.band_size <= 0:
            raise ValueError(f"band_size must be positive, got {self.band_size}")
        if self.anti_aliasing not in ANTI_ALIASING_OFFSETS:
            raise ValueError(
                f"anti_aliasing must be one of {sorted(ANTI_ALIASING_OFFSETS)}, "
                f"got {self.anti_aliasing}"
            )
        if self.gamma <= 0.0:
            raise ValueError(f"gamma must be positive, got {self.gamma}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RenderSettings:
        """Build settings from ``WHITTED_<FIELD>`` variables.

        Args:
            environ: Variables to read; defaults to ``os.environ``.

        Raises:
            ValueError: If a variable cannot be parsed.
        """
        if environ is None:
            environ = os.environ

        parsers: dict[str, Callable[[str], Any]] = {
            "recursion_limit": int,
            "workers": int,
            "band_size": int,
            "anti_aliasing": int,
            "gamma": float,
        }
        values: dict[str, Any] = {}
        for name, parse in parsers.items():
            key = ENV_PREFIX + name.upper()
            raw = environ.get(key)
            if raw is None or raw == "":
                continue
            try:
                values[name] = parse(raw)
            except ValueError as err:
                raise ValueError(f"Invalid value for {key}: {raw!r}") from err
        return cls(**values)

    def override(self, **changes: Any) -> RenderSettings:
        """Return a copy with every non-None keyword applied."""
        return dataclasses.replace(self, **{k: v for k, v in changes.items() if v is not None})
