# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Exact compile-time constants (the `go/constant` model).

Numeric values are exact: integers are Python ints, floats are `Fraction`s and
complex values are pairs of `Fraction`s. As in `go/constant`, a float value
that happens to be integral is stored with the Int kind; consumers that know
the constant's type is floating point convert it back with `to_float`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Tuple, Union


class ConstKind(Enum):
	UNKNOWN = "Unknown"
	BOOL = "Bool"
	STRING = "String"
	INT = "Int"
	FLOAT = "Float"
	COMPLEX = "Complex"


Number = Union[int, Fraction]


@dataclass(frozen=True)
class Constant:
	kind: ConstKind
	value: object = None

	def exact_string(self) -> str:
		"""Go's `ExactString` for the kinds the IR prints verbatim."""
		if self.kind is ConstKind.BOOL:
			return "true" if self.value else "false"
		if self.kind is ConstKind.STRING:
			return go_quote(self.value)
		if self.kind is ConstKind.INT:
			return str(self.value)
		if self.kind is ConstKind.FLOAT:
			frac: Fraction = self.value
			if frac.denominator == 1:
				return str(frac.numerator)
			return f"{frac.numerator}/{frac.denominator}"
		if self.kind is ConstKind.COMPLEX:
			re, im = self.value
			return f"({make_float(re).exact_string()} + {make_float(im).exact_string()}i)"
		return "unknown"


UNKNOWN = Constant(ConstKind.UNKNOWN)


def make_bool(value: bool) -> Constant:
	return Constant(ConstKind.BOOL, bool(value))


def make_string(value: str) -> Constant:
	return Constant(ConstKind.STRING, value)


def make_int(value: int) -> Constant:
	return Constant(ConstKind.INT, int(value))


def make_float(value: Number) -> Constant:
	frac = Fraction(value)
	if frac.denominator == 1:
		return make_int(frac.numerator)
	return Constant(ConstKind.FLOAT, frac)


def make_complex(re: Number, im: Number) -> Constant:
	if Fraction(im) == 0:
		return make_float(re)
	return Constant(ConstKind.COMPLEX, (Fraction(re), Fraction(im)))


def to_float(c: Constant) -> Constant:
	"""Convert a numeric constant to the Float kind (Unknown if impossible)."""
	if c.kind is ConstKind.INT:
		return Constant(ConstKind.FLOAT, Fraction(c.value))
	if c.kind is ConstKind.FLOAT:
		return c
	if c.kind is ConstKind.COMPLEX:
		re, im = c.value
		if im == 0:
			return Constant(ConstKind.FLOAT, re)
	return UNKNOWN


def to_complex(c: Constant) -> Constant:
	"""Convert a numeric constant to the Complex kind (Unknown if impossible)."""
	if c.kind in (ConstKind.INT, ConstKind.FLOAT):
		return Constant(ConstKind.COMPLEX, (Fraction(c.value), Fraction(0)))
	if c.kind is ConstKind.COMPLEX:
		return c
	return UNKNOWN


def real(c: Constant) -> Constant:
	if c.kind is ConstKind.COMPLEX:
		return Constant(ConstKind.FLOAT, c.value[0])
	return to_float(c)


def imag(c: Constant) -> Constant:
	if c.kind is ConstKind.COMPLEX:
		return Constant(ConstKind.FLOAT, c.value[1])
	if c.kind in (ConstKind.INT, ConstKind.FLOAT):
		return Constant(ConstKind.FLOAT, Fraction(0))
	return UNKNOWN


def num(c: Constant) -> Constant:
	"""Numerator of an Int or Float constant, as an Int."""
	if c.kind is ConstKind.INT:
		return c
	if c.kind is ConstKind.FLOAT:
		return make_int(c.value.numerator)
	return UNKNOWN


def denom(c: Constant) -> Constant:
	"""Denominator of an Int or Float constant, as an Int (1 for integers)."""
	if c.kind is ConstKind.INT:
		return make_int(1)
	if c.kind is ConstKind.FLOAT:
		return make_int(c.value.denominator)
	return UNKNOWN


# Literal text -> constant


_SIMPLE_ESCAPES = {
	"a": 0x07,
	"b": 0x08,
	"f": 0x0C,
	"n": 0x0A,
	"r": 0x0D,
	"t": 0x09,
	"v": 0x0B,
	"\\": 0x5C,
	"'": 0x27,
	'"': 0x22,
}


def _unescape(body: str, quote: str) -> Tuple[bytes, list]:
	"""
	Decode the body of an interpreted Go string or rune literal.

	Returns the UTF-8 bytes and the list of code points (escapes `\\x` and
	octal produce single bytes, `\\u`/`\\U` produce code points).
	"""
	out = bytearray()
	points: list = []
	i = 0
	while i < len(body):
		ch = body[i]
		if ch != "\\":
			out += ch.encode("utf-8")
			points.append(ord(ch))
			i += 1
			continue
		esc = body[i + 1]
		if esc in _SIMPLE_ESCAPES:
			if esc in "'\"" and esc != quote:
				raise ValueError(f"unknown escape sequence \\{esc}")
			out.append(_SIMPLE_ESCAPES[esc])
			points.append(_SIMPLE_ESCAPES[esc])
			i += 2
		elif esc == "x":
			value = int(body[i + 2 : i + 4], 16)
			out.append(value)
			points.append(value)
			i += 4
		elif esc in "01234567":
			value = int(body[i + 1 : i + 4], 8)
			if value > 255:
				raise ValueError("octal escape value > 255")
			out.append(value)
			points.append(value)
			i += 4
		elif esc in "uU":
			width = 4 if esc == "u" else 8
			value = int(body[i + 2 : i + 2 + width], 16)
			out += chr(value).encode("utf-8")
			points.append(value)
			i += 2 + width
		else:
			raise ValueError(f"unknown escape sequence \\{esc}")
	return bytes(out), points


def _parse_int(text: str) -> int:
	text = text.replace("_", "")
	if len(text) > 1 and text[0] == "0" and text[1] in "0123456789":
		return int(text, 8)
	return int(text, 0)


def _parse_hex_float(text: str) -> Fraction:
	"""`0x` mantissa with a binary exponent, e.g. `0x1.8p-3`, kept exact."""
	mantissa, sep, exponent = text[2:].lower().partition("p")
	if not sep:
		raise ValueError("hexadecimal mantissa requires a 'p' exponent")
	whole, _, frac = mantissa.partition(".")
	if not whole and not frac:
		raise ValueError("hexadecimal literal has no digits")
	return int(whole + frac, 16) * Fraction(2) ** (int(exponent) - 4 * len(frac))


def _parse_float(text: str) -> Fraction:
	text = text.replace("_", "")
	if text[:2] in ("0x", "0X"):
		return _parse_hex_float(text)
	return Fraction(text)


def make_from_literal(text: str, kind: str) -> Constant:
	"""
	The exact constant denoted by a literal token (`go/constant.MakeFromLiteral`).

	`kind` is the literal's token kind: INT, FLOAT, IMAG, CHAR or STRING.
	"""
	try:
		if kind == "INT":
			return make_int(_parse_int(text))
		if kind == "FLOAT":
			return make_float(_parse_float(text))
		if kind == "IMAG":
			body = text[:-1].replace("_", "")
			if body[:2].lower() in ("0x", "0b", "0o"):
				im = _parse_float(body) if "p" in body.lower() else Fraction(int(body, 0))
			elif any(c in body for c in ".eE"):
				im = _parse_float(body)
			else:
				# a leading zero does not make an imaginary literal octal
				im = Fraction(int(body, 10))
			return make_complex(0, im)
		if kind == "CHAR":
			_, points = _unescape(text[1:-1], "'")
			if len(points) != 1:
				return UNKNOWN
			return make_int(points[0])
		if kind == "STRING":
			if text.startswith("`"):
				return make_string(text[1:-1].replace("\r", ""))
			data, _ = _unescape(text[1:-1], '"')
			# bytes that are not valid UTF-8 survive as lone surrogates for go_quote
			return make_string(data.decode("utf-8", errors="surrogateescape"))
	except (ValueError, IndexError, ZeroDivisionError):
		return UNKNOWN
	return UNKNOWN


def go_quote(s: str) -> str:
	"""
	`strconv.Quote`: a double-quoted Go string literal for `s`.

	Raw bytes decoded with `surrogateescape` (U+DC80..U+DCFF) print as `\\xNN`,
	the way Go prints bytes that are not valid UTF-8.
	"""
	out = ['"']
	for ch in s:
		code = ord(ch)
		if 0xDC80 <= code <= 0xDCFF:
			out.append(f"\\x{code - 0xDC00:02x}")
		elif ch == '"' or ch == "\\":
			out.append("\\" + ch)
		elif ch == "\a":
			out.append("\\a")
		elif ch == "\b":
			out.append("\\b")
		elif ch == "\f":
			out.append("\\f")
		elif ch == "\n":
			out.append("\\n")
		elif ch == "\r":
			out.append("\\r")
		elif ch == "\t":
			out.append("\\t")
		elif ch == "\v":
			out.append("\\v")
		elif ch.isprintable():
			out.append(ch)
		elif code < 0x20 or code == 0x7F:
			out.append(f"\\x{code:02x}")
		elif code < 0x10000:
			out.append(f"\\u{code:04x}")
		else:
			out.append(f"\\U{code:08x}")
	out.append('"')
	return "".join(out)


__all__ = [
	"ConstKind",
	"Constant",
	"UNKNOWN",
	"make_bool",
	"make_string",
	"make_int",
	"make_float",
	"make_complex",
	"make_from_literal",
	"to_float",
	"to_complex",
	"real",
	"imag",
	"num",
	"denom",
	"go_quote",
]
