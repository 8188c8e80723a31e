"""Reference genotype operators."""

from .real import PolynomialMutator, RealCreator, SBXRecombinator

__all__ = ["RealCreator", "SBXRecombinator", "PolynomialMutator"]
