"""
Minimal PEM framing: a base64 body between BEGIN/END lines naming a type.
"""

import re
import base64
import binascii
from dataclasses import dataclass, field

from .errors import FormatError

_BLOCK_RE = re.compile(
    rb"-----BEGIN (?P<type>[^\r\n-]+)-----\r?\n"
    rb"(?P<content>.*?)"
    rb"-----END (?P=type)-----[ \t]*(?:\r?\n)?",
    re.DOTALL,
)

LINE_LENGTH = 64


@dataclass
class PemBlock:
    """A decoded PEM block."""
    type: str
    body: bytes
    headers: dict[str, str] = field(default_factory=dict)
    rest: bytes = b""


def encode_pem(pem_type: str, body: bytes) -> bytes:
    """
    Frame binary data as a PEM block.

    Args:
        pem_type: The type tag, e.g. "PUBLIC KEY"
        body: The binary payload

    Returns:
        The PEM text as bytes, newline terminated
    """
    encoded = base64.b64encode(body).decode("ascii")
    lines = [f"-----BEGIN {pem_type}-----"]
    lines.extend(encoded[i:i + LINE_LENGTH] for i in range(0, len(encoded), LINE_LENGTH))
    lines.append(f"-----END {pem_type}-----")
    return ("\n".join(lines) + "\n").encode("ascii")


def decode_pem(data: bytes) -> PemBlock:
    """
    Decode the first PEM block in data.

    Text before the block is ignored and text after it is returned in
    ``rest``. RFC 1421 style headers ("Name: value" lines before a blank
    line) are collected into ``headers``.

    Raises:
        FormatError: If no well-formed block is present
    """
    if isinstance(data, str):
        data = data.encode("utf-8")

    match = _BLOCK_RE.search(data)
    if match is None:
        raise FormatError("invalid pem block")

    pem_type = match.group("type").decode("ascii", errors="replace")
    lines = match.group("content").splitlines()

    headers = {}
    if lines and b":" in lines[0]:
        while lines and lines[0].strip():
            name, sep, value = lines.pop(0).partition(b":")
            if not sep:
                raise FormatError(f"malformed header in {pem_type} block")
            headers[name.strip().decode("ascii", errors="replace")] = (
                value.strip().decode("ascii", errors="replace")
            )
        if lines:
            lines.pop(0)  # blank separator

    try:
        body = base64.b64decode(b"".join(line.strip() for line in lines), validate=True)
    except binascii.Error as e:
        raise FormatError(f"invalid base64 in {pem_type} block") from e

    return PemBlock(type=pem_type, body=body, headers=headers, rest=data[match.end():])
