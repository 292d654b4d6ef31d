"""
Numeric type lattice

Classifies a change of a column's Java type as widening (every old value is
representable after the change) or narrowing (some old values may be lost).

    byte < short < int < long < BigInteger
    float < double
    integral -> float/double/BigDecimal, float/double -> BigDecimal
"""

from enum import StrEnum


class Conversion(StrEnum):
    IDENTICAL = "identical"
    WIDENING = "widening"
    NARROWING = "narrowing"
    UNRELATED = "unrelated"


_ALIASES: dict[str, str] = {
    "byte": "byte",
    "java.lang.Byte": "byte",
    "Byte": "byte",
    "short": "short",
    "java.lang.Short": "short",
    "Short": "short",
    "int": "int",
    "java.lang.Integer": "int",
    "Integer": "int",
    "long": "long",
    "java.lang.Long": "long",
    "Long": "long",
    "float": "float",
    "java.lang.Float": "float",
    "Float": "float",
    "double": "double",
    "java.lang.Double": "double",
    "Double": "double",
    "java.math.BigInteger": "BigInteger",
    "BigInteger": "BigInteger",
    "java.math.BigDecimal": "BigDecimal",
    "BigDecimal": "BigDecimal",
}

# Direct widening edges; the lattice is their transitive closure.
_WIDENS_TO: dict[str, tuple[str, ...]] = {
    "byte": ("short",),
    "short": ("int",),
    "int": ("long", "float", "double"),
    "long": ("BigInteger", "float", "double"),
    "float": ("double",),
    "double": ("BigDecimal",),
    "BigInteger": ("BigDecimal",),
    "BigDecimal": (),
}


def _closure() -> dict[str, frozenset[str]]:
    reachable: dict[str, frozenset[str]] = {}

    def visit(node: str) -> frozenset[str]:
        if node not in reachable:
            found: set[str] = set()
            for nxt in _WIDENS_TO[node]:
                found.add(nxt)
                found |= visit(nxt)
            reachable[node] = frozenset(found)
        return reachable[node]

    for node in _WIDENS_TO:
        visit(node)
    return reachable


_REACHABLE = _closure()


def canonical_numeric_type(java_type: str | None) -> str | None:
    """Map a primitive or boxed numeric type name to its lattice node"""
    if java_type is None:
        return None
    return _ALIASES.get(java_type.strip())


def classify(old_type: str | None, new_type: str | None) -> Conversion:
    """Place a type change on the lattice"""
    old_node = canonical_numeric_type(old_type)
    new_node = canonical_numeric_type(new_type)
    if old_node is None or new_node is None:
        return Conversion.UNRELATED
    if old_node == new_node:
        return Conversion.IDENTICAL
    if new_node in _REACHABLE[old_node]:
        return Conversion.WIDENING
    if old_node in _REACHABLE[new_node]:
        return Conversion.NARROWING
    return Conversion.UNRELATED


def describe_conversion(old_type: str | None, new_type: str | None) -> str:
    """Human readable summary used in column warnings"""
    conversion = classify(old_type, new_type)
    if conversion is Conversion.NARROWING:
        return f"Narrowing conversion from {old_type} to {new_type}; may cause data loss."
    if conversion is Conversion.WIDENING:
        return f"Widening conversion from {old_type} to {new_type}; generally safe."
    return f"Type changed from {old_type} to {new_type}; verify compatibility."
