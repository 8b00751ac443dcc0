"""
Custom luck formulas for unleash chance calculation.

A luck formula replaces the default luck scaling of an unleash candidate. It is
either a plain Python callable or a short expression string such as::

    chance + user.luk * 0.01 - diff * 0.01

Expression strings are parsed with the ``ast`` module and evaluated by walking a
whitelisted subset of the tree, so no arbitrary code ever runs. Available names:

    user    the acting character (``user.luk``, ``user.luck``, ``user.level``)
    diff    the difficulty of the candidate (0 if none was declared)
    chance  the base chance of the candidate as a fraction (0.5 = 50%)

plus the functions in ``FUNCTIONS`` (also reachable as ``Math.<name>``).
"""
import ast
import math
import operator
from typing import Any, Callable


class FormulaError(ValueError):
    """Raised when a luck formula cannot be compiled or evaluated."""


# (user, diff, chance) -> effective chance
LuckFormulaFn = Callable[[Any, int, float], float]

BINDINGS = frozenset({"user", "diff", "chance"})
USER_ATTRIBUTES = frozenset({"luk", "luck", "level"})


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


FUNCTIONS: dict[str, Callable[..., float]] = {
    "min": min,
    "max": max,
    "abs": abs,
    "floor": math.floor,
    "ceil": math.ceil,
    "round": round,
    "sqrt": math.sqrt,
    "pow": math.pow,
    "clamp": _clamp,
}

# JS-style namespace for the functions above, e.g. Math.min(1, chance)
MATH_NAMESPACE = "Math"

BINARY_OPERATORS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: lambda x, y: math.pow(x, y),
}

UNARY_OPERATORS = {
    ast.USub: operator.neg,
    ast.UAdd: operator.pos,
    ast.Not: operator.not_,
}

COMPARE_OPERATORS = {
    ast.Eq: operator.eq,
    ast.NotEq: operator.ne,
    ast.Lt: operator.lt,
    ast.LtE: operator.le,
    ast.Gt: operator.gt,
    ast.GtE: operator.ge,
}

SAFE_NODES = {
    ast.Expression,
    ast.BinOp,
    ast.UnaryOp,
    ast.BoolOp,
    ast.Compare,
    ast.IfExp,
    ast.Call,
    ast.Name,
    ast.Attribute,
    ast.Constant,
    ast.Load,
    ast.And,
    ast.Or,
    *BINARY_OPERATORS,
    *UNARY_OPERATORS,
    *COMPARE_OPERATORS,
}


class LuckFormula:
    """A compiled luck formula expression.

    Compilation checks every node and name up front, so a formula that compiles
    can only fail at evaluation time on arithmetic (e.g. a zero division for a
    particular actor) or on an actor missing the attribute it reads.
    """

    def __init__(self, source: str):
        if not isinstance(source, str) or not source.strip():
            raise FormulaError("Luck formula must be a non-empty string")

        self.source = source.strip()
        try:
            tree = ast.parse(self.source, mode="eval")
        except (SyntaxError, RecursionError, MemoryError) as e:
            raise FormulaError(f"Invalid luck formula '{self.source}': {getattr(e, 'msg', e)}") from e

        for node in ast.walk(tree):
            self._check_node(node)

        self._body = tree.body

    def __repr__(self) -> str:
        return f"LuckFormula({self.source!r})"

    def __call__(self, user: Any, diff: int, chance: float) -> float:
        """Evaluate the formula for one unleash candidate.

        Raises:
            FormulaError: If evaluation fails or the result is not a finite number
        """
        bindings = {"user": user, "diff": diff, "chance": chance}
        try:
            result = self._eval(self._body, bindings)
        except FormulaError:
            raise
        except (ArithmeticError, AttributeError, TypeError, ValueError, RecursionError) as e:
            raise FormulaError(f"Luck formula '{self.source}' failed: {e}") from e

        if isinstance(result, bool) or not isinstance(result, (int, float)):
            raise FormulaError(
                f"Luck formula '{self.source}' produced non-numeric result {result!r}"
            )
        if math.isnan(result):
            raise FormulaError(f"Luck formula '{self.source}' produced NaN")
        return float(result)

    def _check_node(self, node: ast.AST) -> None:
        if type(node) not in SAFE_NODES:
            raise FormulaError(
                f"Unsupported syntax in luck formula '{self.source}': {type(node).__name__}"
            )

        if isinstance(node, ast.Constant):
            if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
                raise FormulaError(
                    f"Only numeric constants are allowed in luck formula '{self.source}'"
                )
        elif isinstance(node, ast.Name):
            if node.id not in BINDINGS and node.id not in FUNCTIONS and node.id != MATH_NAMESPACE:
                raise FormulaError(f"Unknown name '{node.id}' in luck formula '{self.source}'")
        elif isinstance(node, ast.Attribute):
            owner = node.value.id if isinstance(node.value, ast.Name) else None
            if owner == "user":
                if node.attr not in USER_ATTRIBUTES:
                    raise FormulaError(
                        f"Unknown attribute 'user.{node.attr}' in luck formula '{self.source}'"
                    )
            elif owner == MATH_NAMESPACE:
                if node.attr not in FUNCTIONS:
                    raise FormulaError(
                        f"Unknown function 'Math.{node.attr}' in luck formula '{self.source}'"
                    )
            else:
                raise FormulaError(
                    f"Attribute access is only allowed on 'user' and 'Math' in luck formula '{self.source}'"
                )
        elif isinstance(node, ast.Call):
            if node.keywords:
                raise FormulaError(f"Keyword arguments are not allowed in luck formula '{self.source}'")
            if self._function_name(node.func) is None:
                raise FormulaError(f"Only built-in functions can be called in luck formula '{self.source}'")

    @staticmethod
    def _function_name(func: ast.AST):
        if isinstance(func, ast.Name) and func.id in FUNCTIONS:
            return func.id
        if (isinstance(func, ast.Attribute) and isinstance(func.value, ast.Name)
                and func.value.id == MATH_NAMESPACE and func.attr in FUNCTIONS):
            return func.attr
        return None

    def _eval(self, node: ast.AST, bindings: dict[str, Any]) -> Any:
        """Recursively evaluate a checked AST node."""
        if isinstance(node, ast.Constant):
            return node.value
        if isinstance(node, ast.Name):
            if node.id in bindings:
                return bindings[node.id]
            raise FormulaError(f"'{node.id}' is a function and must be called")
        if isinstance(node, ast.Attribute):
            # Only user.<stat> reaches here, Math.<fn> is handled by Call
            user = self._eval(node.value, bindings)
            value = getattr(user, node.attr)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise FormulaError(f"user.{node.attr} is not a number")
            return value
        if isinstance(node, ast.BinOp):
            left = self._eval(node.left, bindings)
            right = self._eval(node.right, bindings)
            return BINARY_OPERATORS[type(node.op)](left, right)
        if isinstance(node, ast.UnaryOp):
            return UNARY_OPERATORS[type(node.op)](self._eval(node.operand, bindings))
        if isinstance(node, ast.BoolOp):
            if isinstance(node.op, ast.And):
                result = True
                for value in node.values:
                    result = self._eval(value, bindings)
                    if not result:
                        return result
                return result
            result = False
            for value in node.values:
                result = self._eval(value, bindings)
                if result:
                    return result
            return result
        if isinstance(node, ast.Compare):
            left = self._eval(node.left, bindings)
            for op, right_node in zip(node.ops, node.comparators):
                right = self._eval(right_node, bindings)
                if not COMPARE_OPERATORS[type(op)](left, right):
                    return False
                left = right  # For chained comparisons
            return True
        if isinstance(node, ast.IfExp):
            if self._eval(node.test, bindings):
                return self._eval(node.body, bindings)
            return self._eval(node.orelse, bindings)
        if isinstance(node, ast.Call):
            func = FUNCTIONS[self._function_name(node.func)]
            args = [self._eval(arg, bindings) for arg in node.args]
            return func(*args)
        raise FormulaError(f"Unsupported node type: {type(node).__name__}")


class _ProbeUser:
    """Stand-in actor used to trial-run a formula at load time."""
    luk = 10
    luck = 10
    level = 1


def validate_formula(formula: LuckFormulaFn) -> float:
    """Trial-evaluate a formula with representative inputs.

    Returns:
        The probe result

    Raises:
        FormulaError: If the formula fails or returns something unusable
    """
    try:
        result = formula(_ProbeUser(), 10, 0.5)
    except FormulaError:
        raise
    except Exception as e:
        raise FormulaError(f"Luck formula failed trial evaluation: {e}") from e

    if isinstance(result, bool) or not isinstance(result, (int, float)) or math.isnan(result):
        raise FormulaError(f"Luck formula returned non-numeric result {result!r}")
    return float(result)
