"""Bounded archives of non-dominated individuals."""

from .pareto_archive import DensityFn, ParetoArchive

__all__ = ["ParetoArchive", "DensityFn"]
