# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Go source -> `goblin.parser.ast`.

The grammar lives in `grammar.lark` next to this module and is driven by lark's
LALR parser. Two things happen around the grammar:

- `TerminatorInserter` (the post-lexer) implements Go's semicolon insertion
  and records comments, which the grammar never sees.
- `_Builder` turns the lark tree into dataclass nodes, applies operator
  precedence to the flat binary chains, groups parameters, and attaches doc and
  line comments.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from goblin.core.diagnostics import InputError
from goblin.core.position import Position, SourceOffsets

from .ast import (
	BOTH,
	ArrayType,
	AssignStmt,
	BasicLit,
	BinaryExpr,
	BlockStmt,
	BranchStmt,
	CallExpr,
	CaseClause,
	ChanDir,
	ChanType,
	CommClause,
	Comment,
	CommentGroup,
	CompositeLit,
	DeclStmt,
	DeferStmt,
	Ellipsis,
	EmptyStmt,
	Expr,
	ExprStmt,
	Field,
	FieldList,
	File,
	ForStmt,
	FuncDecl,
	FuncLit,
	FuncType,
	GenDecl,
	GoStmt,
	Ident,
	IfStmt,
	ImportSpec,
	IncDecStmt,
	IndexExpr,
	InterfaceType,
	KeyValueExpr,
	LabeledStmt,
	MapType,
	ParenExpr,
	RangeStmt,
	ReturnStmt,
	SelectorExpr,
	SelectStmt,
	SendStmt,
	SliceExpr,
	StarExpr,
	Stmt,
	StructType,
	SwitchStmt,
	TypeAssertExpr,
	TypeSpec,
	TypeSwitchStmt,
	UnaryExpr,
	ValueSpec,
)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")

# Go operator precedence (higher binds tighter).
_PRECEDENCE = {
	"||": 1,
	"&&": 2,
	"==": 3, "!=": 3, "<": 3, "<=": 3, ">": 3, ">=": 3,
	"+": 4, "-": 4, "|": 4, "^": 4,
	"*": 5, "/": 5, "%": 5, "<<": 5, ">>": 5, "&": 5, "&^": 5,
}

_LITERAL_KINDS = {
	"INT": "INT",
	"FLOAT": "FLOAT",
	"IMAG": "IMAG",
	"CHAR": "CHAR",
	"STRING": "STRING",
	"RAW_STRING": "STRING",
}


@dataclass
class _RawComment:
	text: str
	offset: int
	line: int
	column: int
	end_line: int
	tok_index: int  # number of significant tokens seen before the comment
	prev_line: int  # end line of the preceding significant token (0 at file start)


class TerminatorInserter:
	"""
	Post-lexer implementing Go's automatic semicolon insertion.

	A newline becomes a `_TERM` token when the last significant token was an
	identifier, a literal, one of `break continue fallthrough return`, `++`,
	`--`, `)`, `]` or `}`. A block comment spanning lines counts as a newline.
	An explicit `;` is always a terminator, and the end of input terminates a
	pending line.

	Comments are swallowed here and recorded (with their position relative to
	the significant tokens) so the builder can group them afterwards.
	"""

	always_accept = ("NEWLINE", "SEMI", "LINE_COMMENT", "BLOCK_COMMENT")

	TERMINABLE = {"NAME", "INT", "FLOAT", "IMAG", "CHAR", "STRING", "RAW_STRING", "INC_DEC"}
	TERMINABLE_VALUES = {")", "]", "}", "break", "continue", "fallthrough", "return"}

	def __init__(self) -> None:
		self._reset()

	def _reset(self) -> None:
		self.can_terminate = False
		self.comments: List[_RawComment] = []
		self.offsets: List[int] = []
		self.last_line = 0

	def process(self, stream):
		self._reset()
		last: Optional[Token] = None

		for token in stream:
			ttype = token.type

			if ttype == "NEWLINE":
				if self.can_terminate:
					yield Token.new_borrow_pos("_TERM", token.value, token)
					self.can_terminate = False
				continue

			if ttype == "SEMI":
				yield Token.new_borrow_pos("_TERM", token.value, token)
				self.can_terminate = False
				continue

			if ttype in ("LINE_COMMENT", "BLOCK_COMMENT"):
				self.comments.append(
					_RawComment(
						text=token.value,
						offset=token.start_pos,
						line=token.line,
						column=token.column,
						end_line=token.end_line,
						tok_index=len(self.offsets),
						prev_line=self.last_line,
					)
				)
				if ttype == "BLOCK_COMMENT" and "\n" in token.value and self.can_terminate:
					yield Token.new_borrow_pos("_TERM", "\n", token)
					self.can_terminate = False
				continue

			self.offsets.append(token.start_pos)
			self.last_line = token.end_line
			last = token
			yield token
			self.can_terminate = self._is_terminable(token)

		if self.can_terminate and last is not None:
			yield Token.new_borrow_pos("_TERM", "", last)
			self.can_terminate = False

	def _is_terminable(self, token: Token) -> bool:
		return token.type in self.TERMINABLE or token.value in self.TERMINABLE_VALUES


@dataclass
class _Group:
	group: CommentGroup
	tok_index: int
	trailing: bool
	first_line: int
	last_line: int


class _CommentIndex:
	"""
	Comment groups of one file plus the lookups for doc and line comments.

	Grouping follows `go/parser`: a group that starts on the line of the
	preceding token only extends along that line (it is a trailing group);
	otherwise consecutive comments group while they are at most one line apart.
	Groups never span a significant token.
	"""

	def __init__(self, raw: List[_RawComment], offsets: List[int], filename: str, source: SourceOffsets) -> None:
		self.offsets = offsets
		self.groups: List[_Group] = []
		self._by_token: Dict[int, List[_Group]] = {}

		i = 0
		while i < len(raw):
			first = raw[i]
			trailing = first.tok_index > 0 and first.prev_line == first.line
			members = [first]
			end = first.end_line
			j = i + 1
			while j < len(raw):
				nxt = raw[j]
				if nxt.tok_index != first.tok_index:
					break
				if trailing and nxt.line != end:
					break
				if not trailing and nxt.line > end + 1:
					break
				members.append(nxt)
				end = nxt.end_line
				j += 1
			comments = [
				Comment(pos=source.position(filename, c.offset, c.line, c.column), text=c.text)
				for c in members
			]
			entry = _Group(
				group=CommentGroup(pos=comments[0].pos, comments=comments),
				tok_index=first.tok_index,
				trailing=trailing,
				first_line=first.line,
				last_line=end,
			)
			self.groups.append(entry)
			self._by_token.setdefault(first.tok_index, []).append(entry)
			i = j

	def all(self) -> List[CommentGroup]:
		return [g.group for g in self.groups]

	def lead(self, offset: int, line: int) -> Optional[CommentGroup]:
		"""The group ending on the line directly above the token at `offset`."""
		k = bisect.bisect_left(self.offsets, offset)
		candidates = self._by_token.get(k)
		if not candidates:
			return None
		last = candidates[-1]
		if last.trailing or last.last_line + 1 != line:
			return None
		return last.group

	def line_comment(self, end_offset: int, end_line: int) -> Optional[CommentGroup]:
		"""The trailing group starting on `end_line`, right after the node ending at `end_offset`."""
		k = bisect.bisect_left(self.offsets, end_offset)
		for entry in self._by_token.get(k, ()):
			if entry.trailing and entry.first_line == end_line:
				return entry.group
		return None


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	return node.type


def _strip_nc(name: str) -> str:
	return name[:-3] if name.endswith("_nc") else name


class _Builder:
	"""Lark tree -> ast nodes for one source buffer."""

	def __init__(self, filename: str, source: SourceOffsets, comments: Optional[_CommentIndex] = None) -> None:
		self.filename = filename
		self.source = source
		self.comments = comments

	# Positions and errors

	def pos(self, node: Tree | Token) -> Position:
		if isinstance(node, Token):
			return self.source.position(self.filename, node.start_pos or 0, node.line or 0, node.column or 0)
		meta = node.meta
		if meta.empty:
			return Position(self.filename)
		return self.source.position(self.filename, meta.start_pos, meta.line, meta.column)

	def error(self, node: Tree | Token, info: str) -> InputError:
		return InputError(info, position=self.pos(node))

	def lead(self, tree: Tree) -> Optional[CommentGroup]:
		if self.comments is None or tree.meta.empty:
			return None
		return self.comments.lead(tree.meta.start_pos, tree.meta.line)

	def line_comment(self, tree: Tree) -> Optional[CommentGroup]:
		if self.comments is None or tree.meta.empty:
			return None
		return self.comments.line_comment(tree.meta.end_pos, tree.meta.end_line)

	def ident(self, tok: Token) -> Ident:
		return Ident(pos=self.pos(tok), name=tok.value)

	# File and declarations

	def build_file(self, tree: Tree) -> File:
		package_clause, top_decls = tree.children
		decls = [self.build_decl(c) for c in top_decls.children]
		imports = [
			spec
			for d in decls
			if isinstance(d, GenDecl) and d.tok == "import"
			for spec in d.specs
		]
		return File(
			pos=self.pos(package_clause),
			name=self.ident(package_clause.children[0]),
			decls=decls,
			doc=self.lead(package_clause),
			comments=self.comments.all() if self.comments is not None else [],
			imports=imports,
		)

	def build_decl(self, tree: Tree):
		name = _name(tree)
		if name == "func_decl":
			kids = tree.children
			body = self.build_block(kids[2]) if len(kids) > 2 else None
			return FuncDecl(
				pos=self.pos(tree),
				recv=None,
				name=self.ident(kids[0]),
				type=self.build_signature(kids[1], self.pos(tree)),
				body=body,
				doc=self.lead(tree),
			)
		if name == "method_decl":
			kids = tree.children
			body = self.build_block(kids[3]) if len(kids) > 3 else None
			return FuncDecl(
				pos=self.pos(tree),
				recv=self.build_params(kids[0]),
				name=self.ident(kids[1]),
				type=self.build_signature(kids[2], self.pos(tree)),
				body=body,
				doc=self.lead(tree),
			)
		return self.build_gen_decl(tree)

	def build_gen_decl(self, tree: Tree) -> GenDecl:
		tok, _, form = _name(tree).partition("_")
		grouped = form == "group"
		spec_builders = {
			"import": self.build_import_spec,
			"const": self.build_value_spec,
			"var": self.build_value_spec,
			"type": self.build_type_spec,
		}
		if tok not in spec_builders:
			raise self.error(tree, f"unexpected declaration {_name(tree)}")
		build = spec_builders[tok]
		specs = [build(c, grouped) for c in tree.children]
		return GenDecl(pos=self.pos(tree), tok=tok, specs=specs, grouped=grouped, doc=self.lead(tree))

	def build_import_spec(self, tree: Tree, grouped: bool) -> ImportSpec:
		kids = tree.children
		name: Optional[Ident] = None
		if len(kids) == 2:
			first = kids[0]
			if isinstance(first, Token):
				name = self.ident(first)
			else:
				name = Ident(pos=self.pos(first), name=".")
		return ImportSpec(
			pos=self.pos(tree),
			name=name,
			path=self.build_string_lit(kids[-1]),
			doc=self.lead(tree) if grouped else None,
			comment=self.line_comment(tree),
		)

	def build_value_spec(self, tree: Tree, grouped: bool) -> ValueSpec:
		kids = tree.children
		names = self.build_name_list(kids[0])
		typ: Optional[Expr] = None
		values: List[Expr] = []
		for kid in kids[1:]:
			if _name(kid) == "expr_list":
				values = self.build_expr_list(kid)
			else:
				typ = self.node(kid)
		return ValueSpec(
			pos=self.pos(tree),
			names=names,
			type=typ,
			values=values,
			doc=self.lead(tree) if grouped else None,
			comment=self.line_comment(tree),
		)

	def build_type_spec(self, tree: Tree, grouped: bool) -> TypeSpec:
		name_tok, type_node = tree.children
		return TypeSpec(
			pos=self.pos(tree),
			name=self.ident(name_tok),
			type=self.node(type_node),
			assign=_name(tree) == "alias_spec",
			doc=self.lead(tree) if grouped else None,
			comment=self.line_comment(tree),
		)

	def build_name_list(self, tree: Tree) -> List[Ident]:
		return [self.ident(tok) for tok in tree.children]

	def build_string_lit(self, tree: Tree) -> BasicLit:
		tok = tree.children[0]
		return BasicLit(pos=self.pos(tok), kind="STRING", value=tok.value)

	# Signatures and fields

	def build_signature(self, tree: Tree, pos: Position) -> FuncType:
		kids = tree.children
		params = self.build_params(kids[0])
		results: Optional[FieldList] = None
		if len(kids) > 1:
			result = kids[1]
			if _name(result) == "parameters":
				results = self.build_params(result)
			else:
				typ = self.node(result)
				results = FieldList(pos=typ.pos, fields=[Field(pos=typ.pos, names=[], type=typ)])
		return FuncType(pos=pos, params=params, results=results)

	def build_params(self, tree: Tree) -> FieldList:
		"""
		Group a parenthesized parameter list into fields.

		Either every parameter is named or none is. In the named form, bare
		identifiers are names sharing the type of the next typed entry
		(`a, b int`).
		"""
		entries: List[Tuple[Tree, Optional[Token], Expr]] = []
		for param in tree.children:
			kids = list(param.children)
			name_tok = kids.pop(0) if _name(param) == "named_param" else None
			if len(kids) == 2:
				typ: Expr = Ellipsis(pos=self.pos(kids[0]), elt=self.node(kids[1]))
			else:
				typ = self.node(kids[0])
			entries.append((param, name_tok, typ))

		fields: List[Field] = []
		if not any(name_tok is not None for _, name_tok, _ in entries):
			fields = [Field(pos=typ.pos, names=[], type=typ) for _, _, typ in entries]
			return FieldList(pos=self.pos(tree), fields=fields)

		pending: List[Ident] = []
		for param, name_tok, typ in entries:
			if name_tok is None:
				if not isinstance(typ, Ident):
					raise self.error(param, "mixed named and unnamed parameters")
				pending.append(typ)
				continue
			names = pending + [self.ident(name_tok)]
			fields.append(Field(pos=names[0].pos, names=names, type=typ))
			pending = []
		if pending:
			raise self.error(tree, "mixed named and unnamed parameters")
		return FieldList(pos=self.pos(tree), fields=fields)

	def build_struct_type(self, tree: Tree) -> StructType:
		fields: List[Field] = []
		for decl in tree.children:
			kids = decl.children
			tag: Optional[BasicLit] = None
			if _name(kids[0]) == "name_list":
				names = self.build_name_list(kids[0])
				typ = self.node(kids[1])
				rest = kids[2:]
			else:
				names = []
				typ = self.build_embedded(kids[0])
				rest = kids[1:]
			if rest:
				tag = self.build_string_lit(rest[0])
			fields.append(
				Field(
					pos=self.pos(decl),
					names=names,
					type=typ,
					tag=tag,
					doc=self.lead(decl),
					comment=self.line_comment(decl),
				)
			)
		return StructType(pos=self.pos(tree), fields=FieldList(pos=self.pos(tree), fields=fields))

	def build_embedded(self, tree: Tree) -> Expr:
		inner = self.node(tree.children[0])
		if _name(tree) == "embedded_pointer":
			return StarExpr(pos=self.pos(tree), x=inner)
		return inner

	def build_interface_type(self, tree: Tree) -> InterfaceType:
		methods: List[Field] = []
		for elem in tree.children:
			if _name(elem) == "method_spec":
				name_tok, signature = elem.children
				name = self.ident(name_tok)
				methods.append(
					Field(
						pos=name.pos,
						names=[name],
						type=self.build_signature(signature, name.pos),
						doc=self.lead(elem),
						comment=self.line_comment(elem),
					)
				)
			else:
				embedded = self.node(elem)
				methods.append(Field(pos=embedded.pos, names=[], type=embedded))
		return InterfaceType(pos=self.pos(tree), methods=FieldList(pos=self.pos(tree), fields=methods))

	# Statements

	def build_block(self, tree: Tree) -> BlockStmt:
		(stmt_list,) = tree.children
		return BlockStmt(pos=self.pos(tree), stmts=self.build_stmt_list(stmt_list))

	def build_stmt_list(self, tree: Tree) -> List[Stmt]:
		return [self.stmt(c) for c in tree.children]

	def stmt(self, tree: Tree) -> Stmt:
		name = _strip_nc(_name(tree))
		pos = self.pos(tree)
		kids = tree.children

		if name == "expr_stmt":
			return ExprStmt(pos=pos, x=self.node(kids[0]))
		if name == "send_stmt":
			return SendStmt(pos=pos, chan=self.node(kids[0]), value=self.node(kids[1]))
		if name == "inc_dec_stmt":
			return IncDecStmt(pos=pos, x=self.node(kids[0]), tok=kids[1].value)
		if name == "assignment":
			op = kids[1].children[0].value
			return AssignStmt(pos=pos, lhs=self.build_expr_list(kids[0]), tok=op, rhs=self.build_expr_list(kids[2]))
		if name == "short_var_decl":
			return AssignStmt(pos=pos, lhs=self.build_expr_list(kids[0]), tok=":=", rhs=self.build_expr_list(kids[1]))
		if name == "block":
			return self.build_block(tree)
		if name == "empty_stmt":
			return EmptyStmt(pos=pos)
		if name == "decl_stmt":
			return DeclStmt(pos=pos, decl=self.build_gen_decl(kids[0]))
		if name == "labeled_stmt":
			inner = self.stmt(kids[1]) if len(kids) > 1 else EmptyStmt(pos=pos, implicit=True)
			return LabeledStmt(pos=pos, label=self.ident(kids[0]), stmt=inner)
		if name in ("go_stmt", "defer_stmt"):
			call = self.node(kids[0])
			if not isinstance(call, CallExpr):
				keyword = name.split("_")[0]
				raise self.error(tree, f"expression in {keyword} must be function call")
			if name == "go_stmt":
				return GoStmt(pos=pos, call=call)
			return DeferStmt(pos=pos, call=call)
		if name == "return_stmt":
			results = self.build_expr_list(kids[0]) if kids else []
			return ReturnStmt(pos=pos, results=results)
		if name in ("break_stmt", "continue_stmt", "goto_stmt", "fallthrough_stmt"):
			label = self.ident(kids[0]) if kids else None
			return BranchStmt(pos=pos, tok=name[: -len("_stmt")], label=label)
		if name == "if_stmt":
			return self.build_if(tree)
		if name == "switch_stmt":
			return self.build_switch(tree)
		if name == "select_stmt":
			return self.build_select(tree)
		if name in ("for_forever", "for_cond", "for_stmt", "for_range"):
			return self.build_for(tree)
		raise self.error(tree, f"unexpected statement {_name(tree)}")

	def build_if(self, tree: Tree) -> IfStmt:
		kids = list(tree.children)
		init: Optional[Stmt] = None
		if _name(kids[1]) != "block":
			init = self.stmt(kids.pop(0))
		cond = self.node(kids[0])
		body = self.build_block(kids[1])
		else_: Optional[Stmt] = None
		if len(kids) > 2:
			(branch,) = kids[2].children
			else_ = self.stmt(branch)
		return IfStmt(pos=self.pos(tree), init=init, cond=cond, body=body, else_=else_)

	def build_switch(self, tree: Tree) -> Stmt:
		kids = list(tree.children)
		init: Optional[Stmt] = None
		tag_stmt: Optional[Stmt] = None
		if kids and _name(kids[0]).startswith("switch_"):
			header = kids.pop(0)
			parts = [self.stmt(c) for c in header.children]
			form = _name(header)
			if form == "switch_init_tag":
				init, tag_stmt = parts
			elif form == "switch_init":
				init = parts[0]
			elif form == "switch_tag":
				tag_stmt = parts[0]

		clauses: List[Stmt] = []
		for clause in kids:
			if _name(clause) == "default_clause":
				clauses.append(CaseClause(pos=self.pos(clause), exprs=None, body=self.build_stmt_list(clause.children[0])))
			else:
				exprs, body = clause.children
				clauses.append(
					CaseClause(pos=self.pos(clause), exprs=self.build_expr_list(exprs), body=self.build_stmt_list(body))
				)
		body = BlockStmt(pos=self.pos(tree), stmts=clauses)

		if tag_stmt is not None and _is_type_guard(tag_stmt):
			return TypeSwitchStmt(pos=self.pos(tree), init=init, assign=tag_stmt, body=body)
		tag: Optional[Expr] = None
		if tag_stmt is not None:
			if not isinstance(tag_stmt, ExprStmt):
				raise self.error(tree, "expected switch expression")
			tag = tag_stmt.x
		return SwitchStmt(pos=self.pos(tree), init=init, tag=tag, body=body)

	def build_select(self, tree: Tree) -> SelectStmt:
		clauses: List[Stmt] = []
		for clause in tree.children:
			if _name(clause) == "comm_default":
				clauses.append(CommClause(pos=self.pos(clause), comm=None, body=self.build_stmt_list(clause.children[0])))
			else:
				comm, body = clause.children
				clauses.append(CommClause(pos=self.pos(clause), comm=self.stmt(comm), body=self.build_stmt_list(body)))
		return SelectStmt(pos=self.pos(tree), body=BlockStmt(pos=self.pos(tree), stmts=clauses))

	def build_for(self, tree: Tree) -> Stmt:
		name = _name(tree)
		kids = tree.children
		pos = self.pos(tree)
		body = self.build_block(kids[-1])

		if name == "for_forever":
			return ForStmt(pos=pos, init=None, cond=None, post=None, body=body)
		if name == "for_cond":
			return ForStmt(pos=pos, init=None, cond=self.node(kids[0]), post=None, body=body)
		if name == "for_range":
			clause = kids[0]
			form = _name(clause)
			if form == "range_bare":
				return RangeStmt(pos=pos, key=None, value=None, tok=None, x=self.node(clause.children[0]), body=body)
			targets = self.build_expr_list(clause.children[0])
			if len(targets) > 2:
				raise self.error(clause, "range clause permits at most two iteration variables")
			key = targets[0]
			value = targets[1] if len(targets) > 1 else None
			tok = ":=" if form == "range_define" else "="
			return RangeStmt(pos=pos, key=key, value=value, tok=tok, x=self.node(clause.children[1]), body=body)

		init: Optional[Stmt] = None
		cond: Optional[Expr] = None
		post: Optional[Stmt] = None
		for part in kids[0].children:
			(inner,) = part.children
			kind = _name(part)
			if kind == "for_init":
				init = self.stmt(inner)
			elif kind == "for_cond_expr":
				cond = self.node(inner)
			else:
				post = self.stmt(inner)
		return ForStmt(pos=pos, init=init, cond=cond, post=post, body=body)

	# Expressions and types

	def build_expr_list(self, tree: Tree) -> List[Expr]:
		return [self.node(c) for c in tree.children]

	def node(self, tree: Tree) -> Expr:
		name = _name(tree)
		handler = _EXPR_HANDLERS.get(_strip_nc(name))
		if handler is None:
			raise self.error(tree, f"unexpected syntax {name}")
		return handler(self, tree)

	def _binary(self, tree: Tree) -> Expr:
		kids = tree.children
		operands: List[Expr] = [self.node(kids[0])]
		ops: List[str] = []

		def reduce() -> None:
			y = operands.pop()
			x = operands.pop()
			operands.append(BinaryExpr(pos=x.pos, x=x, op=ops.pop(), y=y))

		for i in range(1, len(kids), 2):
			op = kids[i].children[0].value
			while ops and _PRECEDENCE[ops[-1]] >= _PRECEDENCE[op]:
				reduce()
			ops.append(op)
			operands.append(self.node(kids[i + 1]))
		while ops:
			reduce()
		return operands[0]

	def _unary(self, tree: Tree) -> Expr:
		op_tree, operand = tree.children
		op = op_tree.children[0].value
		x = self.node(operand)
		if op == "*":
			return StarExpr(pos=self.pos(tree), x=x)
		if op == "<-" and isinstance(x, ChanType) and x.dir == BOTH:
			# `<-chan T` in expression position is a receive-only channel type
			return ChanType(pos=self.pos(tree), dir=ChanDir.RECV, value=x.value)
		return UnaryExpr(pos=self.pos(tree), op=op, x=x)

	def _name_expr(self, tree: Tree) -> Expr:
		return self.ident(tree.children[0])

	def _basic_lit(self, tree: Tree) -> Expr:
		tok = tree.children[0]
		return BasicLit(pos=self.pos(tok), kind=_LITERAL_KINDS[tok.type], value=tok.value)

	def _paren(self, tree: Tree) -> Expr:
		return ParenExpr(pos=self.pos(tree), x=self.node(tree.children[0]))

	def _selector(self, tree: Tree) -> Expr:
		x, sel = tree.children
		return SelectorExpr(pos=self.pos(tree), x=self.node(x), sel=self.ident(sel))

	def _type_assert(self, tree: Tree) -> Expr:
		x, typ = tree.children
		return TypeAssertExpr(pos=self.pos(tree), x=self.node(x), type=self.node(typ))

	def _type_guard(self, tree: Tree) -> Expr:
		return TypeAssertExpr(pos=self.pos(tree), x=self.node(tree.children[0]), type=None)

	def _index(self, tree: Tree) -> Expr:
		x, index = tree.children
		return IndexExpr(pos=self.pos(tree), x=self.node(x), index=self.node(index))

	def _slice(self, tree: Tree) -> Expr:
		x, bounds = tree.children
		parts: List[Optional[Expr]] = [None]
		for kid in bounds.children:
			if isinstance(kid, Token):
				parts.append(None)
			else:
				parts[-1] = self.node(kid)
		colons = len(parts) - 1
		parts += [None] * (3 - len(parts))
		return SliceExpr(
			pos=self.pos(tree),
			x=self.node(x),
			low=parts[0],
			high=parts[1],
			max=parts[2],
			slice3=colons == 2,
		)

	def _call(self, tree: Tree) -> Expr:
		fun, arguments = tree.children
		args = [self.node(c) for c in arguments.children if not isinstance(c, Token)]
		return CallExpr(
			pos=self.pos(tree),
			fun=self.node(fun),
			args=args,
			has_ellipsis=_name(arguments) == "arguments_spread",
		)

	def _composite(self, tree: Tree) -> Expr:
		typ, value = tree.children
		return CompositeLit(pos=self.pos(tree), type=self.node(typ), elts=self._elements(value))

	def _elements(self, tree: Tree) -> List[Expr]:
		return [self._element(c) for c in tree.children]

	def _element(self, tree: Tree) -> Expr:
		name = _name(tree)
		if name == "key_value":
			key, value = tree.children
			return KeyValueExpr(pos=self.pos(tree), key=self._element(key), value=self._element(value))
		if name == "literal_value":
			return CompositeLit(pos=self.pos(tree), type=None, elts=self._elements(tree))
		return self.node(tree)

	def _func_lit(self, tree: Tree) -> Expr:
		signature, block = tree.children
		pos = self.pos(tree)
		return FuncLit(pos=pos, type=self.build_signature(signature, pos), body=self.build_block(block))

	def _type_name(self, tree: Tree) -> Expr:
		return self.ident(tree.children[0])

	def _qualified_type(self, tree: Tree) -> Expr:
		pkg, name = tree.children
		return SelectorExpr(pos=self.pos(tree), x=self.ident(pkg), sel=self.ident(name))

	def _array_type(self, tree: Tree) -> Expr:
		length, elt = tree.children
		if isinstance(length, Token):
			size: Expr = Ellipsis(pos=self.pos(length))
		else:
			size = self.node(length)
		return ArrayType(pos=self.pos(tree), length=size, elt=self.node(elt))

	def _slice_type(self, tree: Tree) -> Expr:
		return ArrayType(pos=self.pos(tree), length=None, elt=self.node(tree.children[0]))

	def _pointer_type(self, tree: Tree) -> Expr:
		return StarExpr(pos=self.pos(tree), x=self.node(tree.children[0]))

	def _func_type(self, tree: Tree) -> Expr:
		return self.build_signature(tree.children[0], self.pos(tree))

	def _map_type(self, tree: Tree) -> Expr:
		key, value = tree.children
		return MapType(pos=self.pos(tree), key=self.node(key), value=self.node(value))

	def _chan_type(self, tree: Tree) -> Expr:
		direction = {
			"chan_type": BOTH,
			"send_chan_type": ChanDir.SEND,
			"recv_chan_type": ChanDir.RECV,
		}[_name(tree)]
		return ChanType(pos=self.pos(tree), dir=direction, value=self.node(tree.children[0]))

	def _struct_type(self, tree: Tree) -> Expr:
		return self.build_struct_type(tree)

	def _interface_type(self, tree: Tree) -> Expr:
		return self.build_interface_type(tree)


_EXPR_HANDLERS = {
	"expr": _Builder._binary,
	"unary": _Builder._unary,
	"name": _Builder._name_expr,
	"basic_lit": _Builder._basic_lit,
	"paren": _Builder._paren,
	"selector": _Builder._selector,
	"type_assert": _Builder._type_assert,
	"type_guard": _Builder._type_guard,
	"index": _Builder._index,
	"slice": _Builder._slice,
	"call": _Builder._call,
	"composite": _Builder._composite,
	"func_lit": _Builder._func_lit,
	"type_name": _Builder._type_name,
	"qualified_type": _Builder._qualified_type,
	"array_type": _Builder._array_type,
	"slice_type": _Builder._slice_type,
	"pointer_type": _Builder._pointer_type,
	"func_type": _Builder._func_type,
	"map_type": _Builder._map_type,
	"chan_type": _Builder._chan_type,
	"send_chan_type": _Builder._chan_type,
	"recv_chan_type": _Builder._chan_type,
	"struct_type": _Builder._struct_type,
	"interface_type": _Builder._interface_type,
}


def _is_type_guard(stmt: Stmt) -> bool:
	if isinstance(stmt, ExprStmt):
		x = stmt.x
	elif isinstance(stmt, AssignStmt) and stmt.tok == ":=" and len(stmt.lhs) == 1 and len(stmt.rhs) == 1:
		x = stmt.rhs[0]
	else:
		return False
	return isinstance(x, TypeAssertExpr) and x.type is None


def _describe(exc: UnexpectedInput) -> str:
	if isinstance(exc, UnexpectedToken):
		tok = exc.token
		if tok.type == "$END":
			return "unexpected end of input"
		if tok.type == "_TERM":
			return "unexpected newline" if tok.value == "\n" else "unexpected semicolon or end of input"
		return f"unexpected {tok.value!r}"
	if isinstance(exc, UnexpectedCharacters):
		return f"illegal character {exc.char!r}"
	if isinstance(exc, UnexpectedEOF):
		return "unexpected end of input"
	return str(exc)


class Parser:
	"""
	A Go parser instance.

	Each instance owns its lark parser and the post-lexer's comment buffer, so
	one instance must not be shared between concurrent parses.
	"""

	def __init__(self) -> None:
		self._postlex = TerminatorInserter()
		self._lark = Lark(
			_GRAMMAR_PATH.read_text(),
			parser="lalr",
			start=["source_file", "expr_start"],
			propagate_positions=True,
			maybe_placeholders=False,
			postlex=self._postlex,
			cache=True,
		)

	def parse_file(self, source: str, filename: str = "") -> File:
		tree = self._parse(source, filename, "source_file")
		offsets = SourceOffsets(source)
		index = _CommentIndex(self._postlex.comments, self._postlex.offsets, filename, offsets)
		return _Builder(filename, offsets, index).build_file(tree)

	def parse_expr(self, source: str, filename: str = "") -> Expr:
		tree = self._parse(source, filename, "expr_start")
		return _Builder(filename, SourceOffsets(source)).node(tree.children[0])

	def _parse(self, source: str, filename: str, start: str) -> Tree:
		try:
			return self._lark.parse(source, start=start)
		except UnexpectedInput as exc:
			line = getattr(exc, "line", -1)
			column = getattr(exc, "column", -1)
			offset = getattr(exc, "pos_in_stream", None)
			if isinstance(exc, UnexpectedEOF) or line is None or line < 1:
				line, column, offset = -1, -1, -1
			position = SourceOffsets(source).position(filename, offset if offset is not None else -1, line, column)
			raise InputError(_describe(exc), position=position) from exc


__all__ = ["Parser", "TerminatorInserter"]
