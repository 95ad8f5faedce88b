"""
Expression sampler: evaluates a formula of x at evenly spaced points.
"""

import logging
import math
from collections import namedtuple

import sympy as sp

from expression_parser import X, FormulaError, parse_formula

logger = logging.getLogger(__name__)

DEFAULT_STEPS = 500

# Per-point status
POINT_OK = "ok"
POINT_UNDEFINED = "undefined"
POINT_OVERFLOW = "overflow"

Sample = namedtuple('Sample', ['x', 'y'])


def compile_formula(formula):
    """Return a float -> number function for the formula, or raise FormulaError"""
    expr = parse_formula(formula)
    # 1/0, 0/0 and friends fold to zoo/nan while parsing
    if expr.has(sp.zoo, sp.nan):
        return lambda x_val: math.nan
    try:
        return sp.lambdify(X, expr, 'math')
    except (TypeError, ValueError, SyntaxError, RecursionError) as e:
        raise FormulaError(f"Cannot compile '{formula}': {e}") from e


def evaluate_point(func, x_val):
    """Evaluate func at x_val and classify the outcome as (status, y)"""
    try:
        y_val = func(x_val)
    except OverflowError:
        return POINT_OVERFLOW, None
    except (ZeroDivisionError, ValueError, TypeError) as e:
        # Domain errors like sqrt of negative, division by zero
        logger.debug("undefined at x=%r: %s", x_val, e)
        return POINT_UNDEFINED, None

    if isinstance(y_val, complex):
        return POINT_UNDEFINED, None
    try:
        y_val = float(y_val)
    except OverflowError:
        # ints too large for a float
        return POINT_OVERFLOW, None
    except (TypeError, ValueError):
        return POINT_UNDEFINED, None

    if math.isnan(y_val):
        return POINT_UNDEFINED, None
    if math.isinf(y_val):
        return POINT_OVERFLOW, None
    return POINT_OK, y_val


def x_positions(x_min, x_max, steps=DEFAULT_STEPS):
    """Evenly spaced x values from x_min to x_max, both ends included"""
    if isinstance(steps, bool) or not isinstance(steps, int) or steps <= 0:
        raise ValueError(f"steps must be a positive integer, got {steps!r}")
    if x_min > x_max:
        raise ValueError(f"x_min ({x_min}) is greater than x_max ({x_max})")
    if x_min == x_max:
        return [float(x_min)]

    step = (x_max - x_min) / steps
    return [x_min + i * step for i in range(steps + 1)]


def sample_points(formula, x_min, x_max, steps=DEFAULT_STEPS):
    """Evaluate formula over [x_min, x_max]; returns (x, status, y) for every x"""
    xs = x_positions(x_min, x_max, steps)
    func = compile_formula(formula)

    points = []
    for x_val in xs:
        status, y_val = evaluate_point(func, x_val)
        points.append((x_val, status, y_val))
    return points


def sample(formula, x_min, x_max, steps=DEFAULT_STEPS):
    """Samples of formula over [x_min, x_max] with undefined points left out"""
    points = sample_points(formula, x_min, x_max, steps)
    samples = [Sample(x_val, y_val) for x_val, status, y_val in points
               if status == POINT_OK]

    skipped = len(points) - len(samples)
    if skipped:
        logger.debug("%r: %d of %d points omitted", formula, skipped, len(points))
    return samples
