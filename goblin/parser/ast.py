# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Go syntax tree.

The node set mirrors Go's `go/ast` closely so the lowering rules can be stated
in the same terms as the upstream tooling. Types are expressions (`ArrayType`,
`StarExpr`, `MapType`, ...), exactly as in `go/ast`; deciding whether an
expression denotes a type or a value is the lowering engine's job.

Nodes compare and hash by identity (`eq=False`): semantic facts are side tables
keyed by node, just like `types.Info` keys on `ast.Expr`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from enum import Flag
from typing import List, Optional

from goblin.core.position import Position


class ChanDir(Flag):
	"""Channel direction bits (`ast.SEND`, `ast.RECV`)."""

	SEND = 1
	RECV = 2


BOTH = ChanDir.SEND | ChanDir.RECV


class Node:
	pos: Position


class Expr(Node):
	pass


class Stmt(Node):
	pass


class Decl(Node):
	pass


class Spec(Node):
	pass


@dataclass(eq=False)
class Comment(Node):
	pos: Position
	text: str


@dataclass(eq=False)
class CommentGroup(Node):
	pos: Position
	comments: List[Comment]

	@property
	def end_line(self) -> int:
		last = self.comments[-1]
		return last.pos.line + last.text.count("\n")


@dataclass(eq=False)
class Field(Node):
	pos: Position
	names: List["Ident"]
	type: Expr
	tag: Optional["BasicLit"] = None
	doc: Optional[CommentGroup] = None
	comment: Optional[CommentGroup] = None


@dataclass(eq=False)
class FieldList(Node):
	pos: Position
	fields: List[Field] = field(default_factory=list)


# Expressions

@dataclass(eq=False)
class BadExpr(Expr):
	pos: Position


@dataclass(eq=False)
class Ident(Expr):
	pos: Position
	name: str


@dataclass(eq=False)
class Ellipsis(Expr):
	pos: Position
	elt: Optional[Expr] = None


@dataclass(eq=False)
class BasicLit(Expr):
	pos: Position
	kind: str  # INT, FLOAT, IMAG, CHAR or STRING
	value: str


@dataclass(eq=False)
class FuncLit(Expr):
	pos: Position
	type: "FuncType"
	body: "BlockStmt"


@dataclass(eq=False)
class CompositeLit(Expr):
	pos: Position
	type: Optional[Expr]
	elts: List[Expr]
	incomplete: bool = False


@dataclass(eq=False)
class ParenExpr(Expr):
	pos: Position
	x: Expr


@dataclass(eq=False)
class SelectorExpr(Expr):
	pos: Position
	x: Expr
	sel: Ident


@dataclass(eq=False)
class IndexExpr(Expr):
	pos: Position
	x: Expr
	index: Expr


@dataclass(eq=False)
class SliceExpr(Expr):
	pos: Position
	x: Expr
	low: Optional[Expr] = None
	high: Optional[Expr] = None
	max: Optional[Expr] = None
	slice3: bool = False


@dataclass(eq=False)
class TypeAssertExpr(Expr):
	pos: Position
	x: Expr
	type: Optional[Expr]  # None for the `x.(type)` switch guard


@dataclass(eq=False)
class CallExpr(Expr):
	pos: Position
	fun: Expr
	args: List[Expr]
	has_ellipsis: bool = False


@dataclass(eq=False)
class StarExpr(Expr):
	pos: Position
	x: Expr


@dataclass(eq=False)
class UnaryExpr(Expr):
	pos: Position
	op: str
	x: Expr


@dataclass(eq=False)
class BinaryExpr(Expr):
	pos: Position
	x: Expr
	op: str
	y: Expr


@dataclass(eq=False)
class KeyValueExpr(Expr):
	pos: Position
	key: Expr
	value: Expr


# Type expressions

@dataclass(eq=False)
class ArrayType(Expr):
	pos: Position
	length: Optional[Expr]  # None for slices, Ellipsis for [...]T
	elt: Expr


@dataclass(eq=False)
class StructType(Expr):
	pos: Position
	fields: FieldList
	incomplete: bool = False


@dataclass(eq=False)
class FuncType(Expr):
	pos: Position
	params: FieldList
	results: Optional[FieldList] = None


@dataclass(eq=False)
class InterfaceType(Expr):
	pos: Position
	methods: FieldList
	incomplete: bool = False


@dataclass(eq=False)
class MapType(Expr):
	pos: Position
	key: Expr
	value: Expr


@dataclass(eq=False)
class ChanType(Expr):
	pos: Position
	dir: ChanDir
	value: Expr


# Statements

@dataclass(eq=False)
class BadStmt(Stmt):
	pos: Position


@dataclass(eq=False)
class DeclStmt(Stmt):
	pos: Position
	decl: Decl


@dataclass(eq=False)
class EmptyStmt(Stmt):
	pos: Position
	implicit: bool = False


@dataclass(eq=False)
class LabeledStmt(Stmt):
	pos: Position
	label: Ident
	stmt: Stmt


@dataclass(eq=False)
class ExprStmt(Stmt):
	pos: Position
	x: Expr


@dataclass(eq=False)
class SendStmt(Stmt):
	pos: Position
	chan: Expr
	value: Expr


@dataclass(eq=False)
class IncDecStmt(Stmt):
	pos: Position
	x: Expr
	tok: str  # "++" or "--"


@dataclass(eq=False)
class AssignStmt(Stmt):
	pos: Position
	lhs: List[Expr]
	tok: str  # "=", ":=", "+=", ...
	rhs: List[Expr]


@dataclass(eq=False)
class GoStmt(Stmt):
	pos: Position
	call: CallExpr


@dataclass(eq=False)
class DeferStmt(Stmt):
	pos: Position
	call: CallExpr


@dataclass(eq=False)
class ReturnStmt(Stmt):
	pos: Position
	results: List[Expr] = field(default_factory=list)


@dataclass(eq=False)
class BranchStmt(Stmt):
	pos: Position
	tok: str  # break, continue, goto, fallthrough
	label: Optional[Ident] = None


@dataclass(eq=False)
class BlockStmt(Stmt):
	pos: Position
	stmts: List[Stmt] = field(default_factory=list)


@dataclass(eq=False)
class IfStmt(Stmt):
	pos: Position
	init: Optional[Stmt]
	cond: Expr
	body: BlockStmt
	else_: Optional[Stmt] = None


@dataclass(eq=False)
class CaseClause(Stmt):
	pos: Position
	exprs: Optional[List[Expr]]  # None for `default`
	body: List[Stmt]


@dataclass(eq=False)
class SwitchStmt(Stmt):
	pos: Position
	init: Optional[Stmt]
	tag: Optional[Expr]
	body: BlockStmt


@dataclass(eq=False)
class TypeSwitchStmt(Stmt):
	pos: Position
	init: Optional[Stmt]
	assign: Stmt  # `x := y.(type)` or `y.(type)`
	body: BlockStmt


@dataclass(eq=False)
class CommClause(Stmt):
	pos: Position
	comm: Optional[Stmt]  # None for `default`
	body: List[Stmt]


@dataclass(eq=False)
class SelectStmt(Stmt):
	pos: Position
	body: BlockStmt


@dataclass(eq=False)
class ForStmt(Stmt):
	pos: Position
	init: Optional[Stmt]
	cond: Optional[Expr]
	post: Optional[Stmt]
	body: BlockStmt


@dataclass(eq=False)
class RangeStmt(Stmt):
	pos: Position
	key: Optional[Expr]
	value: Optional[Expr]
	tok: Optional[str]  # ":=", "=" or None for `for range x`
	x: Expr
	body: BlockStmt


# Specs and declarations

@dataclass(eq=False)
class ImportSpec(Spec):
	pos: Position
	name: Optional[Ident]
	path: BasicLit
	doc: Optional[CommentGroup] = None
	comment: Optional[CommentGroup] = None


@dataclass(eq=False)
class ValueSpec(Spec):
	pos: Position
	names: List[Ident]
	type: Optional[Expr] = None
	values: List[Expr] = field(default_factory=list)
	doc: Optional[CommentGroup] = None
	comment: Optional[CommentGroup] = None


@dataclass(eq=False)
class TypeSpec(Spec):
	pos: Position
	name: Ident
	type: Expr
	assign: bool = False
	doc: Optional[CommentGroup] = None
	comment: Optional[CommentGroup] = None


@dataclass(eq=False)
class BadDecl(Decl):
	pos: Position


@dataclass(eq=False)
class GenDecl(Decl):
	pos: Position
	tok: str  # import, const, type or var
	specs: List[Spec]
	grouped: bool = False
	doc: Optional[CommentGroup] = None


@dataclass(eq=False)
class FuncDecl(Decl):
	pos: Position
	recv: Optional[FieldList]
	name: Ident
	type: FuncType
	body: Optional[BlockStmt] = None
	doc: Optional[CommentGroup] = None


@dataclass(eq=False)
class File(Node):
	pos: Position
	name: Ident
	decls: List[Decl] = field(default_factory=list)
	doc: Optional[CommentGroup] = None
	comments: List[CommentGroup] = field(default_factory=list)
	imports: List[ImportSpec] = field(default_factory=list)


def shape_name(node: object) -> str:
	"""Runtime shape name used in `unexpected_node` diagnostics."""
	return f"*ast.{type(node).__name__}"


def format_tree(node: object, indent: str = ".  ") -> str:
	"""
	Render a syntax tree as an indented listing (the `--builtin-dump` mode).

	Positions are printed inline; empty lists and `None` children are shown so
	the shape of the tree is explicit.
	"""
	lines: List[str] = []

	def visit(value: object, depth: int, label: str) -> None:
		pad = indent * depth
		if isinstance(value, Node) and is_dataclass(value):
			lines.append(f"{pad}{label}{shape_name(value)} {{")
			for f in fields(value):
				child = getattr(value, f.name)
				if f.name == "pos":
					lines.append(f"{pad}{indent}pos: {child}")
					continue
				visit(child, depth + 1, f"{f.name}: ")
			lines.append(f"{pad}}}")
		elif isinstance(value, list):
			lines.append(f"{pad}{label}[]{{ ({len(value)})")
			for i, item in enumerate(value):
				visit(item, depth + 1, f"{i}: ")
			lines.append(f"{pad}}}")
		elif isinstance(value, ChanDir):
			lines.append(f"{pad}{label}{value.value}")
		else:
			lines.append(f"{pad}{label}{value!r}")

	visit(node, 0, "")
	return "\n".join(lines)
