"""A small model of Go's type system.

Mirrors the parts of go/types that assertion checkers need: basic kinds with
their info flags, named types with methods, and the composite constructors.
Generic instantiation is not modelled; such expressions simply have no type.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class BasicKind(enum.IntEnum):
    INVALID = 0
    BOOL = 1
    INT = 2
    INT8 = 3
    INT16 = 4
    INT32 = 5
    INT64 = 6
    UINT = 7
    UINT8 = 8
    UINT16 = 9
    UINT32 = 10
    UINT64 = 11
    UINTPTR = 12
    FLOAT32 = 13
    FLOAT64 = 14
    COMPLEX64 = 15
    COMPLEX128 = 16
    STRING = 17
    UNSAFE_POINTER = 18

    UNTYPED_BOOL = 19
    UNTYPED_INT = 20
    UNTYPED_RUNE = 21
    UNTYPED_FLOAT = 22
    UNTYPED_COMPLEX = 23
    UNTYPED_STRING = 24
    UNTYPED_NIL = 25


class BasicInfo(enum.Flag):
    NONE = 0
    IS_BOOLEAN = 1 << 0
    IS_INTEGER = 1 << 1
    IS_UNSIGNED = 1 << 2
    IS_FLOAT = 1 << 3
    IS_COMPLEX = 1 << 4
    IS_STRING = 1 << 5
    IS_UNTYPED = 1 << 6

    IS_ORDERED = IS_INTEGER | IS_FLOAT | IS_STRING
    IS_NUMERIC = IS_INTEGER | IS_FLOAT | IS_COMPLEX
    IS_CONST_TYPE = IS_BOOLEAN | IS_NUMERIC | IS_STRING


class Type:
    """Base for every type in the model."""

    def underlying(self) -> Type:
        return self

    def __str__(self) -> str:
        return type(self).__name__


@dataclass(frozen=True, eq=False)
class Basic(Type):
    kind: BasicKind
    info: BasicInfo
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(eq=False)
class Named(Type):
    """A defined type. Mutable so that recursive declarations can be resolved."""

    name: str
    pkg_path: str = ""
    underlying_: Type | None = None
    methods: dict[str, Signature] = field(default_factory=dict)

    def underlying(self) -> Type:
        t: Type | None = self.underlying_
        for _ in range(32):
            if not isinstance(t, Named):
                break
            t = t.underlying_
        if t is None or isinstance(t, Named):
            return TYP[BasicKind.INVALID]
        return t

    def __str__(self) -> str:
        if self.pkg_path:
            return f"{self.pkg_path}.{self.name}"
        return self.name


@dataclass(frozen=True, eq=False)
class Pointer(Type):
    elem: Type

    def __str__(self) -> str:
        return f"*{self.elem}"


@dataclass(frozen=True, eq=False)
class Slice(Type):
    elem: Type

    def __str__(self) -> str:
        return f"[]{self.elem}"


@dataclass(frozen=True, eq=False)
class Array(Type):
    elem: Type
    length: int | None = None

    def __str__(self) -> str:
        n = "?" if self.length is None else self.length
        return f"[{n}]{self.elem}"


@dataclass(frozen=True, eq=False)
class Map(Type):
    key: Type
    elem: Type

    def __str__(self) -> str:
        return f"map[{self.key}]{self.elem}"


@dataclass(frozen=True, eq=False)
class Chan(Type):
    elem: Type
    dir: str = "both"

    def __str__(self) -> str:
        return f"chan {self.elem}"


@dataclass(frozen=True, eq=False)
class Tuple(Type):
    vars: tuple[Type, ...] = ()

    def __len__(self) -> int:
        return len(self.vars)

    def __str__(self) -> str:
        return "(" + ", ".join(str(v) for v in self.vars) + ")"


@dataclass(frozen=True, eq=False)
class Signature(Type):
    params: Tuple = Tuple()
    results: Tuple = Tuple()
    variadic: bool = False

    def __str__(self) -> str:
        return f"func{self.params}{self.results}"


@dataclass(frozen=True, eq=False)
class Var:
    name: str
    type: Type
    embedded: bool = False


@dataclass(frozen=True, eq=False)
class Struct(Type):
    fields: tuple[Var, ...] = ()

    def __str__(self) -> str:
        return "struct{...}"


@dataclass(frozen=True, eq=False)
class Interface(Type):
    def __str__(self) -> str:
        return "interface{...}"


_B = BasicInfo

TYP: dict[BasicKind, Basic] = {
    kind: Basic(kind, info, name)
    for kind, info, name in (
        (BasicKind.INVALID, _B.NONE, "invalid type"),
        (BasicKind.BOOL, _B.IS_BOOLEAN, "bool"),
        (BasicKind.INT, _B.IS_INTEGER, "int"),
        (BasicKind.INT8, _B.IS_INTEGER, "int8"),
        (BasicKind.INT16, _B.IS_INTEGER, "int16"),
        (BasicKind.INT32, _B.IS_INTEGER, "int32"),
        (BasicKind.INT64, _B.IS_INTEGER, "int64"),
        (BasicKind.UINT, _B.IS_INTEGER | _B.IS_UNSIGNED, "uint"),
        (BasicKind.UINT8, _B.IS_INTEGER | _B.IS_UNSIGNED, "uint8"),
        (BasicKind.UINT16, _B.IS_INTEGER | _B.IS_UNSIGNED, "uint16"),
        (BasicKind.UINT32, _B.IS_INTEGER | _B.IS_UNSIGNED, "uint32"),
        (BasicKind.UINT64, _B.IS_INTEGER | _B.IS_UNSIGNED, "uint64"),
        (BasicKind.UINTPTR, _B.IS_INTEGER | _B.IS_UNSIGNED, "uintptr"),
        (BasicKind.FLOAT32, _B.IS_FLOAT, "float32"),
        (BasicKind.FLOAT64, _B.IS_FLOAT, "float64"),
        (BasicKind.COMPLEX64, _B.IS_COMPLEX, "complex64"),
        (BasicKind.COMPLEX128, _B.IS_COMPLEX, "complex128"),
        (BasicKind.STRING, _B.IS_STRING, "string"),
        (BasicKind.UNSAFE_POINTER, _B.NONE, "unsafe.Pointer"),
        (BasicKind.UNTYPED_BOOL, _B.IS_BOOLEAN | _B.IS_UNTYPED, "untyped bool"),
        (BasicKind.UNTYPED_INT, _B.IS_INTEGER | _B.IS_UNTYPED, "untyped int"),
        (BasicKind.UNTYPED_RUNE, _B.IS_INTEGER | _B.IS_UNTYPED, "untyped rune"),
        (BasicKind.UNTYPED_FLOAT, _B.IS_FLOAT | _B.IS_UNTYPED, "untyped float"),
        (BasicKind.UNTYPED_COMPLEX, _B.IS_COMPLEX | _B.IS_UNTYPED, "untyped complex"),
        (BasicKind.UNTYPED_STRING, _B.IS_STRING | _B.IS_UNTYPED, "untyped string"),
        (BasicKind.UNTYPED_NIL, _B.IS_UNTYPED, "untyped nil"),
    )
}

_DEFAULTS = {
    BasicKind.UNTYPED_BOOL: BasicKind.BOOL,
    BasicKind.UNTYPED_INT: BasicKind.INT,
    BasicKind.UNTYPED_RUNE: BasicKind.INT32,
    BasicKind.UNTYPED_FLOAT: BasicKind.FLOAT64,
    BasicKind.UNTYPED_COMPLEX: BasicKind.COMPLEX128,
    BasicKind.UNTYPED_STRING: BasicKind.STRING,
}


def is_untyped(t: Type | None) -> bool:
    return isinstance(t, Basic) and bool(t.info & BasicInfo.IS_UNTYPED)


def default_type(t: Type | None) -> Type | None:
    """Type an untyped constant takes when assigned to a fresh variable."""
    if isinstance(t, Basic) and t.kind in _DEFAULTS:
        return TYP[_DEFAULTS[t.kind]]
    return t


def is_invalid(t: Type | None) -> bool:
    return t is None or (isinstance(t, Basic) and t.kind is BasicKind.INVALID)


def deref(t: Type | None) -> Type | None:
    """Strip one level of pointer indirection."""
    if isinstance(t, Pointer):
        return t.elem
    return t


def lookup_field_or_method(t: Type | None, name: str, _depth: int = 0) -> Type | None:
    """Find the type of field or method *name* on *t*, following embedded fields."""
    if t is None or _depth > 8:
        return None
    base = deref(t)
    if isinstance(base, Named):
        sig = base.methods.get(name)
        if sig is not None:
            return sig
    under = base.underlying() if base is not None else None
    if not isinstance(under, Struct):
        return None
    for var in under.fields:
        if var.name == name:
            return var.type
    for var in under.fields:
        if var.embedded:
            found = lookup_field_or_method(var.type, name, _depth + 1)
            if found is not None:
                return found
    return None


def embeds(t: Type | None, target: Named, _depth: int = 0) -> bool:
    """True if *t* (or the struct behind it) embeds *target*, directly or transitively."""
    base = deref(t)
    if base is target:
        return True
    if base is None or _depth > 8:
        return False
    under = base.underlying()
    if not isinstance(under, Struct):
        return False
    return any(var.embedded and embeds(var.type, target, _depth + 1) for var in under.fields)
