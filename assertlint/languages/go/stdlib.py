"""Type signatures for imported packages the checker knows about.

Only source files are parsed, so exported members of imported packages come
from this table. It covers the standard-library packages that commonly
produce floats in tests, plus the testify packages themselves. Anything not
listed resolves to "unknown", which checkers treat as "not a float".
"""

from __future__ import annotations

from assertlint.languages.go.types import (
    TYP,
    BasicKind,
    Interface,
    Named,
    Pointer,
    Signature,
    Slice,
    Struct,
    Tuple,
    Type,
    Var,
)

ASSERT_PKG = "github.com/stretchr/testify/assert"
REQUIRE_PKG = "github.com/stretchr/testify/require"
SUITE_PKG = "github.com/stretchr/testify/suite"

_bool = TYP[BasicKind.BOOL]
_int = TYP[BasicKind.INT]
_int64 = TYP[BasicKind.INT64]
_uint32 = TYP[BasicKind.UINT32]
_uint64 = TYP[BasicKind.UINT64]
_f32 = TYP[BasicKind.FLOAT32]
_f64 = TYP[BasicKind.FLOAT64]
_str = TYP[BasicKind.STRING]
_untyped_float = TYP[BasicKind.UNTYPED_FLOAT]
_untyped_int = TYP[BasicKind.UNTYPED_INT]
_error = Named("error", underlying_=Interface())
_any = Interface()


def _sig(params: tuple[Type, ...], results: tuple[Type, ...] = (), variadic: bool = False) -> Signature:
    return Signature(Tuple(params), Tuple(results), variadic)


def _method_set(**methods: Signature) -> dict[str, Signature]:
    return dict(methods)


# kind is one of "const", "var", "func", "type"
Member = tuple[str, Type]

_F64_F64 = _sig((_f64,), (_f64,))
_F64x2_F64 = _sig((_f64, _f64), (_f64,))

_MATH: dict[str, Member] = {
    **{
        name: ("const", _untyped_float)
        for name in (
            "E", "Pi", "Phi", "Sqrt2", "SqrtE", "SqrtPi", "SqrtPhi", "Ln2",
            "Log2E", "Ln10", "Log10E", "MaxFloat32", "SmallestNonzeroFloat32",
            "MaxFloat64", "SmallestNonzeroFloat64",
        )
    },
    **{
        name: ("const", _untyped_int)
        for name in (
            "MaxInt", "MinInt", "MaxInt8", "MinInt8", "MaxInt16", "MinInt16",
            "MaxInt32", "MinInt32", "MaxInt64", "MinInt64", "MaxUint8",
            "MaxUint16", "MaxUint32", "MaxUint64",
        )
    },
    **{
        name: ("func", _F64_F64)
        for name in (
            "Abs", "Acos", "Acosh", "Asin", "Asinh", "Atan", "Atanh", "Cbrt",
            "Ceil", "Cos", "Cosh", "Erf", "Erfc", "Erfinv", "Erfcinv", "Exp",
            "Exp2", "Expm1", "Floor", "Gamma", "J0", "J1", "Log", "Log10",
            "Log1p", "Log2", "Logb", "Round", "RoundToEven", "Sin", "Sinh",
            "Sqrt", "Tan", "Tanh", "Trunc", "Y0", "Y1",
        )
    },
    **{
        name: ("func", _F64x2_F64)
        for name in (
            "Atan2", "Copysign", "Dim", "Hypot", "Max", "Min", "Mod",
            "Nextafter", "Pow", "Remainder",
        )
    },
    "Inf": ("func", _sig((_int,), (_f64,))),
    "NaN": ("func", _sig((), (_f64,))),
    "IsNaN": ("func", _sig((_f64,), (_bool,))),
    "IsInf": ("func", _sig((_f64, _int), (_bool,))),
    "Signbit": ("func", _sig((_f64,), (_bool,))),
    "Ilogb": ("func", _sig((_f64,), (_int,))),
    "Pow10": ("func", _sig((_int,), (_f64,))),
    "Ldexp": ("func", _sig((_f64, _int), (_f64,))),
    "Frexp": ("func", _sig((_f64,), (_f64, _int))),
    "Modf": ("func", _sig((_f64,), (_f64, _f64))),
    "Sincos": ("func", _sig((_f64,), (_f64, _f64))),
    "Lgamma": ("func", _sig((_f64,), (_f64, _int))),
    "FMA": ("func", _sig((_f64, _f64, _f64), (_f64,))),
    "Float64bits": ("func", _sig((_f64,), (_uint64,))),
    "Float64frombits": ("func", _sig((_uint64,), (_f64,))),
    "Float32bits": ("func", _sig((_f32,), (_uint32,))),
    "Float32frombits": ("func", _sig((_uint32,), (_f32,))),
}

_STRCONV: dict[str, Member] = {
    "ParseFloat": ("func", _sig((_str, _int), (_f64, _error))),
    "ParseInt": ("func", _sig((_str, _int, _int), (_int64, _error))),
    "ParseUint": ("func", _sig((_str, _int, _int), (_uint64, _error))),
    "ParseBool": ("func", _sig((_str,), (_bool, _error))),
    "Atoi": ("func", _sig((_str,), (_int, _error))),
    "Itoa": ("func", _sig((_int,), (_str,))),
    "FormatFloat": ("func", _sig((_f64, TYP[BasicKind.UINT8], _int, _int), (_str,))),
    "FormatInt": ("func", _sig((_int64, _int), (_str,))),
    "FormatBool": ("func", _sig((_bool,), (_str,))),
    "Quote": ("func", _sig((_str,), (_str,))),
}

_DURATION = Named("Duration", "time", _int64)
_DURATION.methods.update(
    _method_set(
        Hours=_sig((), (_f64,)),
        Minutes=_sig((), (_f64,)),
        Seconds=_sig((), (_f64,)),
        Milliseconds=_sig((), (_int64,)),
        Microseconds=_sig((), (_int64,)),
        Nanoseconds=_sig((), (_int64,)),
        String=_sig((), (_str,)),
    )
)

_TIME: dict[str, Member] = {
    "Duration": ("type", _DURATION),
    **{
        name: ("const", _DURATION)
        for name in ("Nanosecond", "Microsecond", "Millisecond", "Second", "Minute", "Hour")
    },
    "Since": ("func", _sig((_any,), (_DURATION,))),
    "ParseDuration": ("func", _sig((_str,), (_DURATION, _error))),
}

_RAND: dict[str, Member] = {
    "Float64": ("func", _sig((), (_f64,))),
    "Float32": ("func", _sig((), (_f32,))),
    "NormFloat64": ("func", _sig((), (_f64,))),
    "ExpFloat64": ("func", _sig((), (_f64,))),
    "Int": ("func", _sig((), (_int,))),
    "Intn": ("func", _sig((_int,), (_int,))),
    "Int63": ("func", _sig((), (_int64,))),
}

_TESTING_T = Named("T", "testing", Struct())
_TESTING_B = Named("B", "testing", Struct())
_TESTING_TB = Named("TB", "testing", Interface())
for _t in (_TESTING_T, _TESTING_B):
    _t.methods.update(
        _method_set(
            Helper=_sig(()),
            Name=_sig((), (_str,)),
            Fatal=_sig((Slice(_any),), variadic=True),
            Errorf=_sig((_str, Slice(_any)), variadic=True),
            Log=_sig((Slice(_any),), variadic=True),
            Skip=_sig((Slice(_any),), variadic=True),
        )
    )
_TESTING_T.methods["Run"] = _sig((_str, _sig((Pointer(_TESTING_T),), ())), (_bool,))
_TESTING_T.methods["Parallel"] = _sig(())

_TESTING: dict[str, Member] = {
    "T": ("type", _TESTING_T),
    "B": ("type", _TESTING_B),
    "TB": ("type", _TESTING_TB),
}


ASSERT_ASSERTIONS = Named("Assertions", ASSERT_PKG, Struct())
REQUIRE_ASSERTIONS = Named("Assertions", REQUIRE_PKG, Struct())

_TESTIFY_CHECKS = (
    "Condition", "Contains", "DirExists", "ElementsMatch", "Empty", "Equal",
    "EqualError", "EqualExportedValues", "EqualValues", "Error", "ErrorAs",
    "ErrorContains", "ErrorIs", "Eventually", "EventuallyWithT", "Exactly",
    "Fail", "FailNow", "False", "FileExists", "Greater", "GreaterOrEqual",
    "HTTPBodyContains", "HTTPBodyNotContains", "HTTPError", "HTTPRedirect",
    "HTTPStatusCode", "HTTPSuccess", "Implements", "InDelta", "InDeltaMapValues",
    "InDeltaSlice", "InEpsilon", "InEpsilonSlice", "IsDecreasing", "IsIncreasing",
    "IsNonDecreasing", "IsNonIncreasing", "IsType", "JSONEq", "Len", "Less",
    "LessOrEqual", "Negative", "Never", "Nil", "NoDirExists", "NoError",
    "NoFileExists", "NotContains", "NotEmpty", "NotEqual", "NotEqualValues",
    "NotErrorAs", "NotErrorIs", "NotImplements", "NotNil", "NotPanics",
    "NotRegexp", "NotSame", "NotSubset", "NotZero", "Panics", "PanicsWithError",
    "PanicsWithValue", "Positive", "Regexp", "Same", "Subset", "True",
    "WithinDuration", "WithinRange", "YAMLEq", "Zero",
)


def _check_names():
    for base in _TESTIFY_CHECKS:
        yield base
        yield base + "f"


def _package_checks(result: tuple[Type, ...]) -> dict[str, Member]:
    sig = _sig((_TESTING_TB, Slice(_any)), result, variadic=True)
    return {name: ("func", sig) for name in _check_names()}


def _method_checks(result: tuple[Type, ...]) -> dict[str, Signature]:
    sig = _sig((Slice(_any),), result, variadic=True)
    return {name: sig for name in _check_names()}


ASSERT_ASSERTIONS.methods.update(_method_checks((_bool,)))
REQUIRE_ASSERTIONS.methods.update(_method_checks(()))

_ASSERT: dict[str, Member] = {
    **_package_checks((_bool,)),
    "Assertions": ("type", ASSERT_ASSERTIONS),
    "New": ("func", _sig((_TESTING_TB,), (Pointer(ASSERT_ASSERTIONS),))),
    "ObjectsAreEqual": ("func", _sig((_any, _any), (_bool,))),
    "ObjectsAreEqualValues": ("func", _sig((_any, _any), (_bool,))),
    "ObjectsExportedFieldsAreEqual": ("func", _sig((_any, _any), (_bool,))),
    "CallerInfo": ("func", _sig((), (Slice(_str),))),
    "HTTPBody": ("func", _sig((_any, _str, _str, _any), (_str,))),
}

_REQUIRE: dict[str, Member] = {
    **_package_checks(()),
    "Assertions": ("type", REQUIRE_ASSERTIONS),
    "New": ("func", _sig((_TESTING_TB,), (Pointer(REQUIRE_ASSERTIONS),))),
}

# suite.Suite embeds *assert.Assertions, so s.Equal(...) is an assert call.
SUITE = Named(
    "Suite",
    SUITE_PKG,
    Struct((Var("Assertions", Pointer(ASSERT_ASSERTIONS), embedded=True),)),
)
SUITE.methods.update(
    _method_set(
        T=_sig((), (Pointer(_TESTING_T),)),
        SetT=_sig((Pointer(_TESTING_T),)),
        Require=_sig((), (Pointer(REQUIRE_ASSERTIONS),)),
        Assert=_sig((), (Pointer(ASSERT_ASSERTIONS),)),
        Run=_sig((_str, _sig(())), (_bool,)),
    )
)

_SUITE: dict[str, Member] = {
    "Suite": ("type", SUITE),
    "Run": ("func", _sig((Pointer(_TESTING_T), _any))),
}

PACKAGES: dict[str, dict[str, Member]] = {
    "math": _MATH,
    "strconv": _STRCONV,
    "time": _TIME,
    "math/rand": _RAND,
    "math/rand/v2": _RAND,
    "testing": _TESTING,
    ASSERT_PKG: _ASSERT,
    REQUIRE_PKG: _REQUIRE,
    SUITE_PKG: _SUITE,
}


def lookup_member(pkg_path: str, name: str) -> Member | None:
    """Return ``(kind, type)`` for an exported package member, or None if unknown."""
    return PACKAGES.get(pkg_path, {}).get(name)


def is_assert_pkg(path: str) -> bool:
    return path == ASSERT_PKG


def is_require_pkg(path: str) -> bool:
    return path == REQUIRE_PKG
