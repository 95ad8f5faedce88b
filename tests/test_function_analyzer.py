import math
import re

import pytest

from expression_sampler import Sample, sample
from function_analyzer import (
    EMPTY_ANALYSIS, NO_TRANSFORMATIONS, NOT_FOUND, RANGE_PENDING,
    analyze, describe, detect_transformations, find_x_intercepts, find_y_intercept,
)

TWO_DECIMALS = re.compile(r"^-?\d+\.\d{2}$")


def test_x_intercepts_on_sign_change_and_touch():
    samples = [Sample(-1, -1), Sample(0, 0), Sample(1, 1)]
    assert find_x_intercepts(samples) == ("0.00", "1.00")


def test_x_intercepts_none():
    assert find_x_intercepts([Sample(0, 1), Sample(1, 2)]) == ()
    assert find_x_intercepts([]) == ()


def test_y_intercept_last_sample_wins():
    samples = [Sample(-0.005, 1.0), Sample(0.0, 0.5), Sample(0.009, 2.0), Sample(0.5, 3.0)]
    assert find_y_intercept(samples) == "2.00"


def test_y_intercept_missing():
    assert find_y_intercept([Sample(-1, 1), Sample(1, 1)]) is None


def test_negative_zero_is_formatted_as_zero():
    assert find_y_intercept([Sample(0.0, -0.0001)]) == "0.00"


def test_empty_samples():
    result = analyze([], "x^2")
    assert result.range == RANGE_PENDING
    assert result.x_intercepts == ()
    assert result.y_intercept is None


def test_square():
    result = analyze(sample("x^2", -10, 10, 500), "x^2")
    assert result.y_intercept == "0.00"
    assert any(abs(float(x)) <= 0.05 for x in result.x_intercepts)
    assert result.domain == "All real numbers"
    assert result.range == "[0.00, 100.00]"
    assert result.transformations == (NO_TRANSFORMATIONS,)


def test_sine():
    result = analyze(sample("sin(x)", -10, 10, 500), "sin(x)")
    low, high = (float(v) for v in result.range.strip("[]").split(", "))
    assert -1.01 <= low <= high <= 1.01

    roots = [float(x) for x in result.x_intercepts]
    for k in range(-3, 4):
        assert any(abs(root - k * math.pi) < 0.05 for root in roots)


def test_sqrt_domain():
    result = analyze(sample("sqrt(x)", -10, 10), "sqrt(x)")
    assert result.domain == "x ≥ 0"
    assert analyze([], "log(x)").domain == "x ≥ 0"


def test_numbers_have_two_decimals():
    result = analyze(sample("sin(x) * 3 - 1", -7, 7, 350), "sin(x) * 3 - 1")
    numbers = list(result.x_intercepts) + result.range.strip("[]").split(", ")
    numbers.append(result.y_intercept)
    assert all(TWO_DECIMALS.match(n) for n in numbers)


@pytest.mark.parametrize("formula, labels", [
    ("x^2", (NO_TRANSFORMATIONS,)),
    ("sin(x) + 2", ("Trigonometric function", "Vertical shift")),
    ("log(x)", ("Logarithmic function",)),
    ("e^x", ("Exponential function",)),
    ("e**x", ("Exponential function",)),
    ("-x^2", ("Reflection over x-axis",)),
    ("y=-x", ("Reflection over x-axis",)),
    ("-(x - 2)^2 + 4", ("Reflection over x-axis", "Horizontal shift", "Vertical shift")),
    ("tan(x + 1)", ("Trigonometric function", "Horizontal shift", "Vertical shift")),
    ("cos(x) - log(x)", ("Trigonometric function", "Logarithmic function", "Vertical shift")),
])
def test_transformations(formula, labels):
    assert detect_transformations(formula) == labels


def test_analysis_is_repeatable():
    samples = sample("x^3 - x", -3, 3, 200)
    assert analyze(samples, "x^3 - x") == analyze(list(samples), "x^3 - x")


def test_describe():
    rows = dict(describe(analyze([Sample(1, 1), Sample(2, 4)], "x^2")))
    assert rows["X-intercepts"] == NOT_FOUND
    assert rows["Y-intercept"] == NOT_FOUND
    assert rows["Range"] == "[1.00, 4.00]"
    assert rows["Transformations"] == NO_TRANSFORMATIONS


def test_empty_analysis_describes():
    rows = dict(describe(EMPTY_ANALYSIS))
    assert rows["X-intercepts"] == NOT_FOUND
    assert rows["Domain"] == ""
