"""
Operator precedence of expressions, used to decide where a rewrite needs parentheses.

Higher precedence is more tightly binding. Binary operators take their precedence from their
associativity class, all other expressions from the fixed classes below.
"""
from enum import Enum

PREC_CLOSURE = -40
PREC_JUMP = -30
PREC_RANGE = -10
PREC_ASSIGN = 2
PREC_CAST = 14
PREC_PREFIX = 50
PREC_POSTFIX = 60
PREC_PAREN = 99
PREC_FORCE_PAREN = 100


class BinOpKind(Enum):
    """Enumerator of all binary operators, valued by their source representation."""

    add = "+"
    sub = "-"
    mul = "*"
    div = "/"
    rem = "%"
    logical_and = "&&"
    logical_or = "||"
    bit_xor = "^"
    bit_and = "&"
    bit_or = "|"
    shl = "<<"
    shr = ">>"
    eq = "=="
    lt = "<"
    le = "<="
    ne = "!="
    ge = ">="
    gt = ">"

    @property
    def precedence(self) -> int:
        return BINOP_PRECEDENCE[self]


BINOP_PRECEDENCE = {
    BinOpKind.mul: 13,
    BinOpKind.div: 13,
    BinOpKind.rem: 13,
    BinOpKind.add: 12,
    BinOpKind.sub: 12,
    BinOpKind.shl: 11,
    BinOpKind.shr: 11,
    BinOpKind.bit_and: 10,
    BinOpKind.bit_xor: 9,
    BinOpKind.bit_or: 8,
    BinOpKind.eq: 7,
    BinOpKind.lt: 7,
    BinOpKind.le: 7,
    BinOpKind.ne: 7,
    BinOpKind.ge: 7,
    BinOpKind.gt: 7,
    BinOpKind.logical_and: 6,
    BinOpKind.logical_or: 5,
}
