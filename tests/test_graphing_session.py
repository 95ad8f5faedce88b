from function_analyzer import EMPTY_ANALYSIS, RANGE_PENDING
from graphing_session import (
    DEFAULT_FORMULA, EMPTY_EVALUATION, INVALID_FORMULA_MSG, GraphSession,
)


def test_defaults():
    session = GraphSession()
    assert session.formula == DEFAULT_FORMULA
    assert session.x_range == (-10.0, 10.0)
    assert session.y_range == (-10.0, 10.0)
    assert session.steps == 500
    assert session.last == EMPTY_EVALUATION


def test_evaluate_success():
    session = GraphSession("x^2")
    result = session.evaluate()
    assert result.ok
    assert result.error == ""
    assert len(result.samples) == 501
    assert result.analysis.y_intercept == "0.00"
    assert session.last is result


def test_invalid_formula_clears_plot():
    session = GraphSession("x^2")
    session.evaluate()

    session.formula = "x +* 2"
    result = session.evaluate()
    assert not result.ok
    assert result.error == INVALID_FORMULA_MSG
    assert session.samples == ()
    assert session.analysis == EMPTY_ANALYSIS


def test_zero_samples_is_not_a_failure():
    session = GraphSession("sqrt(x)", x_range=(-10, -1))
    result = session.evaluate()
    assert result.ok
    assert result.samples == ()
    assert result.analysis.range == RANGE_PENDING


def test_ranges_are_independent_and_ordered():
    session = GraphSession()
    session.set_x_range(5, -5)
    assert session.x_range == (-5.0, 5.0)
    assert session.y_range == (-10.0, 10.0)

    session.set_y_range(0, 50)
    assert session.y_range == (0.0, 50.0)
    assert session.x_range == (-5.0, 5.0)


def test_x_range_is_the_sampling_interval():
    session = GraphSession("x", x_range=(0, 2), steps=4)
    xs = [point.x for point in session.evaluate().samples]
    assert xs == [0.0, 0.5, 1.0, 1.5, 2.0]


def test_latest_evaluation_wins():
    session = GraphSession("x")
    first = session.evaluate()
    session.formula = "sin(x)"
    second = session.evaluate()
    assert session.last is second
    assert first.analysis != second.analysis


def test_repeat_evaluation_is_identical():
    session = GraphSession("log(x + 1) / x")
    assert session.evaluate() == session.evaluate()


def test_deeply_nested_formula_is_invalid():
    for formula in ["(" * 2000 + "x" + ")" * 2000, "-" * 3000 + "x"]:
        result = GraphSession(formula).evaluate()
        assert not result.ok
        assert result.error == INVALID_FORMULA_MSG


def test_huge_constant_evaluates_without_points():
    result = GraphSession("1" + "0" * 400).evaluate()
    assert result.ok
    assert result.samples == ()
