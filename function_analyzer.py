"""
Function analysis over sampled points.

Everything here is read off the samples and the formula text: intercepts
come from sign changes between neighbouring samples, the range from the
sampled y values, and the domain/transformation labels from the spelling
of the formula. None of it is an algebraic result.
"""

from collections import namedtuple

from expression_parser import normalize_formula

Y_INTERCEPT_TOLERANCE = 0.01

ALL_REALS = "All real numbers"
NON_NEGATIVE = "x ≥ 0"
RANGE_PENDING = "Calculating..."
NOT_FOUND = "None found in visible range"
NO_TRANSFORMATIONS = "No major transformations detected"

AnalysisResult = namedtuple(
    'AnalysisResult',
    ['x_intercepts', 'y_intercept', 'domain', 'range', 'transformations'],
)

EMPTY_ANALYSIS = AnalysisResult((), None, "", "", ())


def format_number(value):
    """Two decimals, without a '-0.00'"""
    text = f"{value:.2f}"
    if text == "-0.00":
        return "0.00"
    return text


def find_x_intercepts(samples):
    """x of each sample whose y has a different sign (or zero) from the previous one"""
    intercepts = []
    for prev, cur in zip(samples, samples[1:]):
        if prev.y * cur.y <= 0:
            intercepts.append(format_number(cur.x))
    return tuple(intercepts)


def find_y_intercept(samples):
    # Later samples inside the band replace earlier ones
    y_intercept = None
    for point in samples:
        if abs(point.x) < Y_INTERCEPT_TOLERANCE:
            y_intercept = format_number(point.y)
    return y_intercept


def describe_domain(formula):
    body = normalize_formula(formula)
    if 'sqrt' in body or 'log' in body:
        return NON_NEGATIVE
    return ALL_REALS


def describe_range(samples):
    if not samples:
        return RANGE_PENDING
    ys = [point.y for point in samples]
    return f"[{format_number(min(ys))}, {format_number(max(ys))}]"


def detect_transformations(formula):
    """Labels for the patterns found in the formula text, in a fixed order"""
    body = normalize_formula(formula)
    powered = body.replace('^', '**')

    labels = []
    if 'sin' in body or 'cos' in body or 'tan' in body:
        labels.append("Trigonometric function")
    if 'log' in body:
        labels.append("Logarithmic function")
    if 'e**' in powered:
        labels.append("Exponential function")
    if body.startswith('-'):
        labels.append("Reflection over x-axis")
    if '(x +' in body or '(x -' in body:
        labels.append("Horizontal shift")
    if '+ ' in body or '- ' in body:
        labels.append("Vertical shift")

    if not labels:
        labels.append(NO_TRANSFORMATIONS)
    return tuple(labels)


def analyze(samples, formula):
    """Build the AnalysisResult for a sample list and the formula that produced it"""
    samples = list(samples)
    return AnalysisResult(
        x_intercepts=find_x_intercepts(samples),
        y_intercept=find_y_intercept(samples),
        domain=describe_domain(formula),
        range=describe_range(samples),
        transformations=detect_transformations(formula),
    )


def describe(analysis):
    """(label, text) rows for showing an analysis to the user"""
    return [
        ("X-intercepts", ", ".join(analysis.x_intercepts) or NOT_FOUND),
        ("Y-intercept", analysis.y_intercept if analysis.y_intercept is not None else NOT_FOUND),
        ("Domain", analysis.domain),
        ("Range", analysis.range),
        ("Transformations", ", ".join(analysis.transformations)),
    ]
