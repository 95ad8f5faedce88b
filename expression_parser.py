"""
Formula parser for the graphing calculator.

Turns user text such as "y = 3*sin(x - pi/4)^2" into a sympy expression
in the single variable x. Only a fixed set of names and operators is
understood; the text is never handed to eval/sympify.
"""

import logging
import re

import sympy as sp

logger = logging.getLogger(__name__)

# ============================================================================
# NAMES
# ============================================================================

X = sp.Symbol('x')

CONSTANTS = {
    'pi': sp.pi,
    'e': sp.E,
}


def _log(*args):
    """Natural log, or log base b when called as log(x, b)."""
    if len(args) == 2:
        return sp.log(args[0]) / sp.log(args[1])
    return sp.log(args[0])


# name -> (builder, min args, max args)
FUNCTIONS = {
    'sin': (sp.sin, 1, 1),
    'cos': (sp.cos, 1, 1),
    'tan': (sp.tan, 1, 1),
    'asin': (sp.asin, 1, 1),
    'acos': (sp.acos, 1, 1),
    'atan': (sp.atan, 1, 1),
    'arcsin': (sp.asin, 1, 1),
    'arccos': (sp.acos, 1, 1),
    'arctan': (sp.atan, 1, 1),
    'sinh': (sp.sinh, 1, 1),
    'cosh': (sp.cosh, 1, 1),
    'tanh': (sp.tanh, 1, 1),
    'exp': (sp.exp, 1, 1),
    'log': (_log, 1, 2),
    'ln': (sp.log, 1, 1),
    'sqrt': (sp.sqrt, 1, 1),
    'abs': (sp.Abs, 1, 1),
    'floor': (sp.floor, 1, 1),
    'ceil': (sp.ceiling, 1, 1),
    'min': (sp.Min, 2, 2),
    'max': (sp.Max, 2, 2),
}


class FormulaError(ValueError):
    """Raised when a formula cannot be turned into an expression of x."""


# Deepest nesting of parentheses, signs and powers the parser accepts
MAX_DEPTH = 100


# ============================================================================
# TOKENIZER
# ============================================================================

_TOKEN_RE = re.compile(r"""
    (?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)
  | (?P<name>[A-Za-z_][A-Za-z0-9_]*)
  | (?P<op>\*\*|[-+*/^(),])
  | (?P<space>\s+)
""", re.VERBOSE)

_PREFIX_RE = re.compile(r'^\s*y\s*=')


def normalize_formula(text):
    """Strip a leading 'y=' and replace unicode math glyphs."""
    if text is None:
        raise FormulaError("Empty formula")
    body = _PREFIX_RE.sub('', text, count=1)
    body = body.replace('π', 'pi').replace('−', '-')
    return body.strip()


def tokenize(text):
    """Split formula text into (kind, value) pairs."""
    tokens = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if not match:
            raise FormulaError(f"Unexpected character '{text[pos]}' at position {pos}")
        kind = match.lastgroup
        if kind != 'space':
            tokens.append((kind, match.group()))
        pos = match.end()
    return tokens


# ============================================================================
# PARSER
# ============================================================================

class _Parser:
    """Recursive-descent parser over the token list."""

    def __init__(self, tokens):
        self.tokens = tokens
        self.pos = 0
        self.depth = 0

    def peek(self):
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return (None, None)

    def advance(self):
        token = self.peek()
        self.pos += 1
        return token

    def accept(self, *ops):
        kind, value = self.peek()
        if kind == 'op' and value in ops:
            self.pos += 1
            return value
        return None

    def expect(self, op):
        if not self.accept(op):
            _, value = self.peek()
            found = value if value is not None else 'end of formula'
            raise FormulaError(f"Expected '{op}' but found '{found}'")

    def parse(self):
        expr = self.expression()
        kind, value = self.peek()
        if kind is not None:
            raise FormulaError(f"Unexpected '{value}'")
        return expr

    def expression(self):
        expr = self.term()
        while True:
            op = self.accept('+', '-')
            if op is None:
                return expr
            rhs = self.term()
            expr = expr + rhs if op == '+' else expr - rhs

    def term(self):
        expr = self.unary()
        while True:
            op = self.accept('*', '/')
            if op is None:
                return expr
            rhs = self.unary()
            expr = expr * rhs if op == '*' else expr / rhs

    def unary(self):
        # Every nested construct passes through here
        self.depth += 1
        if self.depth > MAX_DEPTH:
            raise FormulaError("Formula is nested too deeply")
        try:
            op = self.accept('+', '-')
            if op == '-':
                return -self.unary()
            if op == '+':
                return self.unary()
            return self.power()
        finally:
            self.depth -= 1

    def power(self):
        base = self.atom()
        if self.accept('^', '**'):
            exponent = self.unary()
            # Keep constant towers like 10^10^10 in floating point
            if base.is_number and exponent.is_number:
                try:
                    return sp.Pow(sp.Float(base), sp.Float(exponent))
                except (TypeError, ValueError):
                    pass
            return sp.Pow(base, exponent)
        return base

    def atom(self):
        kind, value = self.advance()

        if kind == 'number':
            if re.fullmatch(r'\d+', value):
                return sp.Integer(value)
            return sp.Float(value)

        if kind == 'name':
            if self.accept('('):
                return self.call(value)
            if value == 'x':
                return X
            if value in CONSTANTS:
                return CONSTANTS[value]
            if value in FUNCTIONS:
                raise FormulaError(f"Function '{value}' needs parentheses")
            raise FormulaError(f"Unknown name '{value}'")

        if kind == 'op' and value == '(':
            expr = self.expression()
            self.expect(')')
            return expr

        if kind is None:
            raise FormulaError("Formula ends unexpectedly")
        raise FormulaError(f"Unexpected '{value}'")

    def call(self, name):
        if name not in FUNCTIONS:
            raise FormulaError(f"Unknown function '{name}'")
        builder, min_args, max_args = FUNCTIONS[name]

        args = [self.expression()]
        while self.accept(','):
            args.append(self.expression())
        self.expect(')')

        if not min_args <= len(args) <= max_args:
            raise FormulaError(f"Wrong number of arguments for {name}(): {len(args)}")
        return builder(*args)


def parse_formula(text):
    """Parse formula text into a sympy expression of x"""
    body = normalize_formula(text)
    if not body:
        raise FormulaError("Empty formula")

    tokens = tokenize(body)
    try:
        expr = _Parser(tokens).parse()
    except FormulaError:
        raise
    except (TypeError, ValueError, ArithmeticError, RecursionError) as e:
        # sympy can reject some combinations while building the tree
        raise FormulaError(str(e)) from e

    logger.debug("parsed %r as %s", text, expr)
    return expr
