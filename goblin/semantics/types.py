# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Semantic types as a type checker reports them.

The variants mirror Go's `go/types`: Array, Basic, Chan, Interface, Map,
Named, Pointer, Signature, Slice, Struct and Tuple. Values are plain
dataclasses compared by identity; `Named.underlying` is assignable after
construction so recursive types can be built (and are then caught by the
renderer's depth bound).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class BasicKind(Enum):
	"""Basic type kinds, valued by the names the IR uses."""

	INVALID = "Invalid"
	BOOL = "Bool"
	INT = "Int"
	INT8 = "Int8"
	INT16 = "Int16"
	INT32 = "Int32"
	INT64 = "Int64"
	UINT = "UInt"
	UINT8 = "UInt8"
	UINT16 = "UInt16"
	UINT32 = "UInt32"
	UINT64 = "UInt64"
	UINTPTR = "UIntptr"
	FLOAT32 = "Float32"
	FLOAT64 = "Float64"
	COMPLEX64 = "Complex64"
	COMPLEX128 = "Complex128"
	STRING = "String"
	UNSAFE_POINTER = "UnsafePointer"
	UNTYPED_BOOL = "UntypedBool"
	UNTYPED_INT = "UntypedInt"
	UNTYPED_RUNE = "UntypedRune"
	UNTYPED_FLOAT = "UntypedFloat"
	UNTYPED_COMPLEX = "UntypedComplex"
	UNTYPED_STRING = "UntypedString"
	UNTYPED_NIL = "UntypedNil"


FLOAT_KINDS = frozenset({BasicKind.FLOAT32, BasicKind.FLOAT64, BasicKind.UNTYPED_FLOAT})
COMPLEX_KINDS = frozenset({BasicKind.COMPLEX64, BasicKind.COMPLEX128, BasicKind.UNTYPED_COMPLEX})


class ChanDir(Enum):
	SEND_RECV = "SendRecv"
	SEND_ONLY = "SendOnly"
	RECV_ONLY = "RecvOnly"


class Type:
	"""Base class of every semantic type."""


def is_exported(name: str) -> bool:
	return bool(name) and name[0].isupper()


@dataclass(eq=False)
class Var:
	"""A variable, parameter, result or struct field."""

	name: str
	type: Optional[Type]
	package: Optional[str] = None  # import path of the declaring package
	embedded: bool = False

	@property
	def id(self) -> str:
		"""
		Go's object identifier: exported names are global, unexported ones are
		qualified by the package path (`_` when there is none).
		"""
		if is_exported(self.name):
			return self.name
		path = self.package or "_"
		return f"{path}.{self.name}"


@dataclass(eq=False)
class Method:
	name: str
	type: "Signature"


@dataclass(eq=False)
class Basic(Type):
	kind: BasicKind


@dataclass(eq=False)
class Array(Type):
	elem: Type
	length: int


@dataclass(eq=False)
class Slice(Type):
	elem: Type


@dataclass(eq=False)
class Pointer(Type):
	elem: Type


@dataclass(eq=False)
class Map(Type):
	key: Type
	elem: Type


@dataclass(eq=False)
class Chan(Type):
	dir: ChanDir
	elem: Type


@dataclass(eq=False)
class Tuple(Type):
	vars: List[Var] = field(default_factory=list)


@dataclass(eq=False)
class Signature(Type):
	params: Tuple = field(default_factory=Tuple)
	results: Tuple = field(default_factory=Tuple)
	recv: Optional[Var] = None
	variadic: bool = False


@dataclass(eq=False)
class Struct(Type):
	fields: List[Var] = field(default_factory=list)
	tags: List[str] = field(default_factory=list)


@dataclass(eq=False)
class Interface(Type):
	methods: List[Method] = field(default_factory=list)


@dataclass(eq=False)
class Named(Type):
	name: str
	package: Optional[str] = None
	underlying: Optional[Type] = None


# Predeclared basic types, keyed like `types.Typ`.
TYP = {kind: Basic(kind) for kind in BasicKind}


__all__ = [
	"BasicKind",
	"FLOAT_KINDS",
	"COMPLEX_KINDS",
	"ChanDir",
	"Type",
	"Var",
	"Method",
	"Basic",
	"Array",
	"Slice",
	"Pointer",
	"Map",
	"Chan",
	"Tuple",
	"Signature",
	"Struct",
	"Interface",
	"Named",
	"TYP",
	"is_exported",
]
