"""
Solver and decomposition settings.

Settings is a frozen dataclass. DEFAULT_SETTINGS is read once from the
CLOTHOIDS_<FIELD> environment variables and shared process-wide; every
public operation takes an optional settings object and falls back to the
defaults, while an explicit keyword beats both.
"""

import math
import os
from dataclasses import dataclass, fields, replace
from typing import Optional

from .exceptions import PreconditionError

ENV_PREFIX = "CLOTHOIDS_"


@dataclass(frozen=True)
class Settings:
    """
    Numerical settings of the kernel.

    Attributes:
        g1_tolerance: Residual tolerance of the G1 Newton iteration
        g1_max_iter: Iteration budget of the G1 Newton iteration
        bb_max_angle: Maximum heading variation of a covering triangle
        bb_max_size: Maximum height of a covering triangle
        bb_max_level: Bisection depth after which the size criterion is dropped
        intersect_max_iter: Newton/bisection budget per candidate pair
        intersect_tolerance: Distance under which two points coincide
        intersect_angle: Heading variation of sub-arcs handed to Newton
        projection_tolerance: Step tolerance of the projection Newton iteration
        projection_max_iter: Iteration budget of the projection Newton iteration
    """

    g1_tolerance: float = 1e-12
    g1_max_iter: int = 20
    bb_max_angle: float = math.pi / 6
    bb_max_size: float = 1e100
    bb_max_level: int = 48
    intersect_max_iter: int = 20
    intersect_tolerance: float = 1e-10
    intersect_angle: float = math.pi / 18
    projection_tolerance: float = 1e-12
    projection_max_iter: int = 30

    def validate(self) -> "Settings":
        """Check ranges; returns self so calls can be chained."""
        if self.g1_tolerance <= 0:
            raise PreconditionError("g1_tolerance must be > 0",
                                    {"value": self.g1_tolerance})
        if not 0 < self.bb_max_angle < math.pi / 2:
            raise PreconditionError("bb_max_angle must be in (0, pi/2)",
                                    {"value": self.bb_max_angle})
        if not 0 < self.intersect_angle < math.pi / 2:
            raise PreconditionError("intersect_angle must be in (0, pi/2)",
                                    {"value": self.intersect_angle})
        if self.bb_max_size <= 0:
            raise PreconditionError("bb_max_size must be > 0",
                                    {"value": self.bb_max_size})
        if self.bb_max_level < 0:
            raise PreconditionError("bb_max_level must be >= 0",
                                    {"value": self.bb_max_level})
        for name in ("g1_max_iter", "intersect_max_iter", "projection_max_iter"):
            if getattr(self, name) < 1:
                raise PreconditionError(f"{name} must be >= 1",
                                        {"value": getattr(self, name)})
        if self.intersect_tolerance <= 0 or self.projection_tolerance <= 0:
            raise PreconditionError("tolerances must be > 0")
        return self

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "Settings":
        """
        Build settings from CLOTHOIDS_<FIELD> environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            Validated settings
        """
        environ = os.environ if environ is None else environ
        overrides = {}
        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            try:
                overrides[f.name] = int(raw) if f.type in (int, "int") else float(raw)
            except ValueError:
                raise PreconditionError(f"Cannot parse {ENV_PREFIX}{f.name.upper()}",
                                        {"value": raw}) from None
        return replace(cls(), **overrides).validate()


DEFAULT_SETTINGS = Settings.from_env()


def resolve(settings: Optional[Settings] = None) -> Settings:
    """The given settings, or the process defaults."""
    return DEFAULT_SETTINGS if settings is None else settings
