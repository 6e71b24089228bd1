"""Decoding of Go basic literal spellings."""
from __future__ import annotations

_SIMPLE_ESCAPES = {
    "a": "\a", "b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t", "v": "\v",
    "\\": "\\", "'": "'", '"': '"',
}


def parse_int(text: str) -> int:
    digits = text.replace("_", "")
    if len(digits) > 1 and digits[0] == "0" and digits.isdigit():
        return int(digits, 8)  # legacy octal: 0755
    return int(digits, 0)


def parse_float(text: str) -> float:
    return float(text.replace("_", ""))


def parse_imag(text: str) -> complex:
    return complex(0, float(text[:-1].replace("_", "")))


def unescape(body: str) -> str:
    """Interpret Go escape sequences in the body of a string or rune literal."""
    out = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue
        esc = body[i + 1]
        if esc in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[esc])
            i += 2
        elif esc == "x":
            out.append(chr(int(body[i + 2:i + 4], 16)))
            i += 4
        elif esc == "u":
            out.append(chr(int(body[i + 2:i + 6], 16)))
            i += 6
        elif esc == "U":
            out.append(chr(int(body[i + 2:i + 10], 16)))
            i += 10
        elif esc in "01234567":
            out.append(chr(int(body[i + 1:i + 4], 8)))
            i += 4
        else:
            raise ValueError(f"unknown escape sequence: \\{esc}")
    return "".join(out)


def parse_string(text: str) -> str:
    if text.startswith("`"):
        return text[1:-1].replace("\r", "")
    return unescape(text[1:-1])


def parse_rune(text: str) -> int:
    value = unescape(text[1:-1])
    if len(value) != 1:
        raise ValueError(f"more than one character in rune literal: {text}")
    return ord(value)
