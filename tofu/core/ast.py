"""Abstract syntax tree for Tofu.

Grammar of the trees built by the parser:

```
<program>    ::= <statement>*
<statement>  ::= "let" <ident> "=" <expression> ";"
               | "return" <expression> ";"
               | <expression> [";"]
<block>      ::= "{" <statement>* "}"
<expression> ::= <ident> | <int> | "true" | "false"
               | <prefix_op> <expression>                        ; "!" or "-"
               | <expression> <infix_op> <expression>            ; see parser.Precedence
               | "(" <expression> ")"
               | "if" "(" <expression> ")" <block> ["else" <block>]
               | "fn" "(" [<ident> ("," <ident>)*] ")" <block>
               | <expression> "(" [<expression> ("," <expression>)*] ")"
```

Nodes carry no behavior beyond their structure. str(node) renders canonical source, with every prefix and infix
expression parenthesized so that operator precedence can be read off directly.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from typing import List, Optional

from tofu.core.token import Token


@dataclass
class Node(ABC):
    """Superclass of every AST node. token is the token the node was parsed from."""
    token: Optional[Token] = field(default=None, repr=False, compare=False, kw_only=True)

    @abstractmethod
    def __str__(self):
        """Canonical source form of this node."""

    @property
    def nodes(self):
        """Child nodes of this node, in source order."""
        children = []
        for node_field in fields(self):
            value = getattr(self, node_field.name)
            if isinstance(value, Node) and node_field.name != "token":
                children.append(value)
            elif isinstance(value, list):
                children.extend(item for item in value if isinstance(item, Node))
        return children

    def display(self, indents=0):
        """Recursively displays the tree below this node in a readable format.

        Format:
        <Node>('<expr>', nodes=[
            <Node>('<expr>', nodes=[
                ...
                <Node>('<expr>')  # <-- if nodes is empty
            ])
        ])
        """
        expr = str(self).replace("\n", " ")
        result = f"{'    ' * indents}{type(self).__name__}('{expr}'"
        if self.nodes:
            result += ", nodes=["
            for node in self.nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"


class Statement(Node):
    """Statements may produce no usable value."""


class Expression(Node):
    """Expressions always produce exactly one value."""


@dataclass
class Program(Node):
    statements: List[Statement] = field(default_factory=list)

    def __str__(self):
        return "".join(str(statement) for statement in self.statements)


@dataclass
class Identifier(Expression):
    name: str

    def __str__(self):
        return self.name


@dataclass
class IntegerLiteral(Expression):
    value: int

    def __str__(self):
        return str(self.value)


@dataclass
class BooleanLiteral(Expression):
    value: bool

    def __str__(self):
        return "true" if self.value else "false"


@dataclass
class PrefixExpression(Expression):
    operator: str
    operand: Expression

    def __str__(self):
        return f"({self.operator}{self.operand})"


@dataclass
class InfixExpression(Expression):
    operator: str
    left: Expression
    right: Expression

    def __str__(self):
        return f"({self.left} {self.operator} {self.right})"


@dataclass
class LetStatement(Statement):
    name: Identifier
    value: Expression

    def __str__(self):
        return f"let {self.name} = {self.value};"


@dataclass
class ReturnStatement(Statement):
    value: Expression

    def __str__(self):
        return f"return {self.value};"


@dataclass
class ExpressionStatement(Statement):
    value: Expression

    def __str__(self):
        return str(self.value)


@dataclass
class BlockStatement(Statement):
    statements: List[Statement] = field(default_factory=list)

    def __str__(self):
        return "".join(str(statement) for statement in self.statements)


@dataclass
class IfExpression(Expression):
    condition: Expression
    consequence: BlockStatement
    alternative: Optional[BlockStatement] = None

    def __str__(self):
        result = f"if {self.condition} {{ {self.consequence} }}"
        if self.alternative is not None:
            result += f" else {{ {self.alternative} }}"
        return result


@dataclass
class FunctionLiteral(Expression):
    parameters: List[Identifier]
    body: BlockStatement

    def __str__(self):
        return f"fn({', '.join(str(parameter) for parameter in self.parameters)}) {{ {self.body} }}"


@dataclass
class CallExpression(Expression):
    function: Expression
    arguments: List[Expression] = field(default_factory=list)

    def __str__(self):
        return f"{self.function}({', '.join(str(argument) for argument in self.arguments)})"
