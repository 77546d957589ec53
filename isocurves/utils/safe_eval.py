#    Copyright (C) 2013 Jeremy S. Sanders
#    Email: Jeremy Sanders <jeremy@jeremysanders.net>
#
#    This program is free software; you can redistribute it and/or modify
#    it under the terms of the GNU General Public License as published by
#    the Free Software Foundation; either version 2 of the License, or
#    (at your option) any later version.
#
#    This program is distributed in the hope that it will be useful,
#    but WITHOUT ANY WARRANTY; without even the implied warranty of
#    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#    GNU General Public License for more details.
#
#    You should have received a copy of the GNU General Public License along
#    with this program; if not, write to the Free Software Foundation, Inc.,
#    51 Franklin Street, Fifth Floor, Boston, MA 02110-1301 USA.
###############################################################################

"""
Checked compilation of field formulas such as "x**2 + y**2 - 1"

The compiled ast tree is examined for anything other than arithmetic,
comparisons and calls to whitelisted numpy functions.
"""

import ast
import math

import numpy as N

# nodes which can appear in a formula
allowed_nodes = frozenset((
        ast.Expression,
        ast.BinOp,
        ast.UnaryOp,
        ast.BoolOp,
        ast.Compare,
        ast.IfExp,
        ast.Call,
        ast.Name,
        ast.Load,
        ast.Constant,
        ast.Add, ast.Sub, ast.Mult, ast.Div, ast.FloorDiv, ast.Mod, ast.Pow,
        ast.USub, ast.UAdd, ast.Not,
        ast.And, ast.Or,
        ast.Eq, ast.NotEq, ast.Lt, ast.LtE, ast.Gt, ast.GtE,
        ))

# functions and constants made available to formulas
allowed_functions = (
    'abs', 'absolute', 'arccos', 'arccosh', 'arcsin', 'arcsinh', 'arctan',
    'arctan2', 'arctanh', 'cbrt', 'ceil', 'cos', 'cosh', 'deg2rad', 'exp',
    'expm1', 'fabs', 'floor', 'fmod', 'hypot', 'log', 'log10', 'log1p',
    'log2', 'maximum', 'minimum', 'rad2deg', 'sign', 'sin', 'sinc', 'sinh',
    'sqrt', 'square', 'tan', 'tanh', 'where',
    )
allowed_constants = {
    'pi': math.pi,
    'e': math.e,
    'inf': math.inf,
    'nan': math.nan,
    }

class SafeEvalException(Exception):
    """Raised by safety errors in code."""
    pass

class CheckNodeVisitor(ast.NodeVisitor):
    """Visit ast nodes to look for unsafe entries."""

    def __init__(self, names):
        self.names = names

    def generic_visit(self, node):
        if type(node) not in allowed_nodes:
            raise SafeEvalException("%s not allowed in formula" %
                                    type(node).__name__)
        ast.NodeVisitor.generic_visit(self, node)

    def visit_Name(self, name):
        if name.id not in self.names:
            raise SafeEvalException('Unknown name in formula: "%s"' % name.id)
        self.generic_visit(name)

    def visit_Call(self, call):
        if not isinstance(call.func, ast.Name):
            raise SafeEvalException("Function has no identifier")
        if call.func.id not in allowed_functions:
            raise SafeEvalException(
                'Function not allowed in formula: "%s"' % call.func.id)
        self.generic_visit(call)

def formulaContext():
    """Return the namespace formulas are evaluated in."""
    context = {'__builtins__': {}}
    for name in allowed_functions:
        context[name] = abs if name == 'abs' else getattr(N, name)
    context.update(allowed_constants)
    return context

def compileChecked(code, variables=('x', 'y'), filename='<formula>'):
    """Compile a formula, checking for security errors.

    Returns a compiled code object. variables are the free names
    the formula may use besides the numpy functions and constants.
    """

    try:
        tree = ast.parse(code.strip(), filename, 'eval')
    except SyntaxError as e:
        raise SafeEvalException('Unable to parse formula: %s' % e)

    names = set(allowed_functions) | set(allowed_constants) | set(variables)
    CheckNodeVisitor(names).visit(tree)

    return compile(tree, filename, 'eval')

def fieldFunction(code):
    """Make a field callable f(x, y) -> float from formula text.

    Errors inside numpy (division by zero, log of negatives) give NaN
    or infinite values rather than exceptions. The formula is tried
    at one point, and SafeEvalException is raised if it does not give
    a single number (e.g. wrong arguments to a function). The same
    exception is raised if this happens later for other values.
    """

    compiled = compileChecked(code)
    context = formulaContext()

    def field(x, y):
        with N.errstate(all='ignore'):
            try:
                val = eval(compiled, context, {'x': x, 'y': y})
                if isinstance(val, complex):
                    # fractional power of a negative number
                    return math.nan
                return float(val)
            except (ZeroDivisionError, OverflowError):
                return math.nan
            except (TypeError, ValueError) as e:
                raise SafeEvalException(
                    'Formula does not give a number: %s' % e)

    field(0.5, 0.25)
    return field
