"""Tree-walking evaluator for Tofu.

evaluate never raises for a mistake in the program being run. Every failure becomes an Error object, and every
place that combines the results of evaluating sub-nodes checks for an Error first and hands it back unchanged, so an
Error travels up through operands, arguments, blocks and calls to the top level like an exception would. A
ReturnValue travels the same way, but only as far as the call it returns from (apply_function), or the top level
(evaluate_program); it is never bound to a name or used as an operand.

Functions are closures over the Environment their literal was evaluated in. Calling one evaluates its body in a new
Environment chained to that captured Environment. Blocks do not open a scope of their own.
"""

from tofu.core.ast import (BlockStatement, BooleanLiteral, CallExpression, ExpressionStatement, FunctionLiteral,
                           Identifier, IfExpression, InfixExpression, IntegerLiteral, LetStatement, PrefixExpression,
                           Program, ReturnStatement)
from tofu.core.object import (FALSE, NULL, Error, Function, Integer, ReturnValue, native_bool,
                              new_enclosed_environment)
from tofu.core.parser import INT_MAX, INT_MIN


def evaluate(node, environment):
    """Evaluates node against environment and returns the resulting Object (an Error if evaluation failed)."""
    if isinstance(node, Program):
        return evaluate_program(node, environment)

    # statements
    elif isinstance(node, BlockStatement):
        return evaluate_block(node, environment)

    elif isinstance(node, ExpressionStatement):
        return evaluate(node.value, environment)

    elif isinstance(node, LetStatement):
        value = evaluate(node.value, environment)
        if is_signal(value):
            return value
        environment.set(node.name.name, value)
        return NULL

    elif isinstance(node, ReturnStatement):
        value = evaluate(node.value, environment)
        if is_signal(value):
            return value
        return ReturnValue(value)

    # expressions
    elif isinstance(node, IntegerLiteral):
        return Integer(node.value)

    elif isinstance(node, BooleanLiteral):
        return native_bool(node.value)

    elif isinstance(node, Identifier):
        return evaluate_identifier(node, environment)

    elif isinstance(node, PrefixExpression):
        operand = evaluate(node.operand, environment)
        if is_signal(operand):
            return operand
        return evaluate_prefix_expression(node.operator, operand)

    elif isinstance(node, InfixExpression):
        left = evaluate(node.left, environment)
        if is_signal(left):
            return left
        right = evaluate(node.right, environment)
        if is_signal(right):
            return right
        return evaluate_infix_expression(node.operator, left, right)

    elif isinstance(node, IfExpression):
        return evaluate_if_expression(node, environment)

    elif isinstance(node, FunctionLiteral):
        return Function(node.parameters, node.body, environment)

    elif isinstance(node, CallExpression):
        function = evaluate(node.function, environment)
        if is_signal(function):
            return function
        elif not isinstance(function, Function):
            return Error(f"not a function: {function.type_name}")

        arguments = evaluate_expressions(node.arguments, environment)
        if len(arguments) == 1 and is_signal(arguments[0]):
            return arguments[0]

        return apply_function(function, arguments)

    raise TypeError(f"cannot evaluate {type(node).__name__}")


def evaluate_program(program, environment):
    """Evaluates statements in order. A top-level return stops the program and yields the returned value."""
    result = NULL
    for statement in program.statements:
        result = evaluate(statement, environment)

        if isinstance(result, ReturnValue):
            return result.value
        elif is_error(result):
            return result

    return result


def evaluate_block(block, environment):
    """Like evaluate_program, but a ReturnValue is passed up still wrapped, so that it can leave the enclosing
    function call.
    """
    result = NULL
    for statement in block.statements:
        result = evaluate(statement, environment)

        if isinstance(result, (ReturnValue, Error)):
            return result

    return result


def evaluate_identifier(node, environment):
    value = environment.get(node.name)
    if value is None:
        return Error(f"identifier not found: {node.name}")
    return value


def evaluate_expressions(expressions, environment):
    """Evaluates expressions left to right. If one of them is an Error or ReturnValue, returns [just that]."""
    results = []
    for expression in expressions:
        value = evaluate(expression, environment)
        if is_signal(value):
            return [value]
        results.append(value)
    return results


def evaluate_prefix_expression(operator, operand):
    if operator == "!":
        return native_bool(not is_truthy(operand))

    elif operator == "-":
        if not isinstance(operand, Integer):
            return Error(f"unknown operator: -{operand.type_name}")
        return check_overflow(-operand.value, f"-{operand.value}")

    return Error(f"unknown operator: {operator}{operand.type_name}")


def evaluate_infix_expression(operator, left, right):
    if isinstance(left, Integer) and isinstance(right, Integer):
        return evaluate_integer_infix_expression(operator, left, right)

    elif operator == "==":
        return native_bool(left is right)
    elif operator == "!=":
        return native_bool(left is not right)

    elif left.type_name != right.type_name:
        return Error(f"type mismatch: {left.type_name} {operator} {right.type_name}")

    return Error(f"unknown operator: {left.type_name} {operator} {right.type_name}")


def evaluate_integer_infix_expression(operator, left, right):
    lval, rval = left.value, right.value
    expr = f"{lval} {operator} {rval}"

    if operator == "+":
        return check_overflow(lval + rval, expr)
    elif operator == "-":
        return check_overflow(lval - rval, expr)
    elif operator == "*":
        return check_overflow(lval * rval, expr)
    elif operator == "/":
        if rval == 0:
            return Error(f"division by zero: {expr}")
        quotient = abs(lval) // abs(rval)  # truncates toward zero
        return check_overflow(quotient if (lval < 0) == (rval < 0) else -quotient, expr)

    elif operator == "<":
        return native_bool(lval < rval)
    elif operator == ">":
        return native_bool(lval > rval)
    elif operator == "==":
        return native_bool(lval == rval)
    elif operator == "!=":
        return native_bool(lval != rval)

    return Error(f"unknown operator: {left.type_name} {operator} {right.type_name}")


def check_overflow(value, expr):
    """Returns Integer(value), or an Error if value does not fit in a signed 64-bit integer."""
    if not INT_MIN <= value <= INT_MAX:
        return Error(f"integer overflow: {expr}")
    return Integer(value)


def evaluate_if_expression(node, environment):
    condition = evaluate(node.condition, environment)
    if is_signal(condition):
        return condition

    if is_truthy(condition):
        return evaluate(node.consequence, environment)
    elif node.alternative is not None:
        return evaluate(node.alternative, environment)
    return NULL


def apply_function(function, arguments):
    """Calls function with already-evaluated arguments. A ReturnValue coming out of the body is unwrapped here, so
    that return only ever leaves one call.
    """
    if not isinstance(function, Function):
        return Error(f"not a function: {function.type_name}")

    if len(arguments) != len(function.parameters):
        return Error(f"wrong number of arguments: expected {len(function.parameters)}, got {len(arguments)}")

    environment = new_enclosed_environment(function.environment)
    for parameter, argument in zip(function.parameters, arguments):
        environment.set(parameter.name, argument)

    result = evaluate(function.body, environment)
    if isinstance(result, ReturnValue):
        return result.value
    return result


def is_truthy(value):
    """Only false and null are falsy. 0 is truthy."""
    return value is not FALSE and value is not NULL


def is_error(value):
    return isinstance(value, Error)


def is_signal(value):
    """Whether value must be passed up unchanged rather than used: an Error, or a ReturnValue on its way out of a
    call (an if expression can produce one wherever a value is expected).
    """
    return isinstance(value, (Error, ReturnValue))
