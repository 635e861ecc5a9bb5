"""csvcalc.calc - Formula resolution engine for csvcalc tables."""

from csvcalc.calc._arithmetic import OPERATIONS, ArithmeticFault, apply
from csvcalc.calc._evaluator import ResolutionSession
from csvcalc.calc._graph import DependencyGraph
from csvcalc.calc._parser import ExpressionNode, Operator, is_formula, parse_formula
from csvcalc.calc._protocol import ResolutionResult, ResolutionStrategy, Resolver

__all__ = [
    "ArithmeticFault",
    "DependencyGraph",
    "ExpressionNode",
    "OPERATIONS",
    "Operator",
    "ResolutionResult",
    "ResolutionSession",
    "ResolutionStrategy",
    "Resolver",
    "apply",
    "is_formula",
    "parse_formula",
]
