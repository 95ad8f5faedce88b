"""
Graphing session: the state a front end keeps between evaluations.
"""

import logging
from collections import namedtuple

from expression_parser import FormulaError
from expression_sampler import DEFAULT_STEPS, sample
from function_analyzer import EMPTY_ANALYSIS, analyze

logger = logging.getLogger(__name__)

DEFAULT_FORMULA = "x^2"
DEFAULT_X_RANGE = (-10.0, 10.0)
DEFAULT_Y_RANGE = (-10.0, 10.0)
RANGE_LIMITS = (-100.0, 100.0)

INVALID_FORMULA_MSG = "Invalid formula. Please check your input."


class Evaluation(namedtuple('Evaluation', ['samples', 'analysis', 'error'])):
    """Result of one sample + analyze run"""
    __slots__ = ()

    @property
    def ok(self):
        return not self.error


EMPTY_EVALUATION = Evaluation((), EMPTY_ANALYSIS, "")


def _ordered(lo, hi):
    lo, hi = float(lo), float(hi)
    return (lo, hi) if lo <= hi else (hi, lo)


class GraphSession:
    """Formula, viewing intervals and sample count, plus the latest result"""

    def __init__(self, formula=DEFAULT_FORMULA, x_range=DEFAULT_X_RANGE,
                 y_range=DEFAULT_Y_RANGE, steps=DEFAULT_STEPS):
        self.formula = formula
        self.x_range = _ordered(*x_range)
        self.y_range = _ordered(*y_range)
        self.steps = steps
        self.last = EMPTY_EVALUATION

    def set_x_range(self, lo, hi):
        self.x_range = _ordered(lo, hi)

    def set_y_range(self, lo, hi):
        self.y_range = _ordered(lo, hi)

    @property
    def samples(self):
        return self.last.samples

    @property
    def analysis(self):
        return self.last.analysis

    @property
    def error(self):
        return self.last.error

    def evaluate(self):
        """Sample and analyze the current formula; the result replaces the last one"""
        x_min, x_max = self.x_range
        try:
            samples = tuple(sample(self.formula, x_min, x_max, self.steps))
        except FormulaError as e:
            logger.info("invalid formula %r: %s", self.formula, e)
            self.last = Evaluation((), EMPTY_ANALYSIS, INVALID_FORMULA_MSG)
            return self.last

        self.last = Evaluation(samples, analyze(samples, self.formula), "")
        return self.last
