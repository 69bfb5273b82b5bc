"""PEM text containers: the textual wrapping around DER encoded key material.

A PEM block is a `-----BEGIN <LABEL>-----` line, optional RFC 1421 style `Key: Value` headers, a base64 body and the
matching `-----END <LABEL>-----` line. Decoding looks for the first well-formed block anywhere in the input, so keys
pasted with surrounding text (emails, configuration files) are still found.

Typical usage example:

    text = encode_pem(PEM_TYPES["PUBLIC"], der)
    block = read_pem(text)
    assert block.data == der
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import base64
import binascii
import typing

from rsasign.errors import MalformedPEMError

PEM_TYPES = {
    "PKCS1_PRIV": "RSA PRIVATE KEY",
    "PUBLIC": "PUBLIC KEY",
}

_BEGIN = "-----BEGIN "
_END = "-----END "
_TAIL = "-----"
_LINE_LENGTH = 64


class PemBlock(typing.NamedTuple):
    """A single decoded PEM block."""
    label: str
    headers: dict[str, str]
    data: bytes


def _as_text(text: str | bytes) -> str:
    if isinstance(text, bytes):
        return text.decode("utf-8", errors="replace")
    return text


def _boundary_label(line: str, marker: str) -> str | None:
    """Returns the label of a BEGIN/END boundary line, or None if the line is not one."""
    if line.startswith(marker) and line.endswith(_TAIL) and len(line) >= len(marker) + len(_TAIL):
        return line[len(marker):-len(_TAIL)]
    return None


def _parse_block(lines: list[str], start: int) -> tuple[PemBlock, int] | None:
    """Attempts to parse a block whose BEGIN line is `lines[start]`.

    Args:
        lines: The input split into lines, line endings kept.
        start: Index of the BEGIN line.

    Returns:
        The block and the index of the first line after its END line, or None if the candidate is not well-formed.
    """
    label = _boundary_label(lines[start].strip(), _BEGIN)
    if label is None:
        return None
    headers: dict[str, str] = {}
    parcel = []
    idx = start + 1
    while idx < len(lines):
        line = lines[idx].strip()
        idx += 1
        end_label = _boundary_label(line, _END)
        if end_label is not None:
            if end_label != label:
                return None
            try:
                data = base64.b64decode("".join(parcel), validate=True)
            except binascii.Error:
                return None
            return PemBlock(label, headers, data), idx
        if not line:
            continue
        # Base64 never contains a colon, so this can only be a header line.
        if ":" in line and not parcel:
            key, _, value = line.partition(":")
            headers[key.strip()] = value.strip()
            continue
        parcel.append(line)
    return None


def find_pem_block(text: str | bytes) -> tuple[PemBlock | None, str]:
    """Finds the first well-formed PEM block in `text`.

    Candidates with a mismatched or missing END line, or with a body that is not valid base64, are skipped and the
    search resumes on the line after their BEGIN line.

    Args:
        text: The text to search.

    Returns:
        Tuple of (block, rest), where rest is the text following the block. If no block is found, block is None and
        rest is the whole input.
    """
    text = _as_text(text)
    lines = text.splitlines(keepends=True)
    for start, line in enumerate(lines):
        if not line.lstrip().startswith(_BEGIN):
            continue
        parsed = _parse_block(lines, start)
        if parsed is not None:
            block, after = parsed
            return block, "".join(lines[after:])
    return None, text


def read_pem(text: str | bytes) -> PemBlock:
    """Reads the first PEM block out of `text`.

    Args:
        text: PEM text, possibly surrounded by other content.

    Returns:
        The decoded block.

    Raises:
        MalformedPEMError: If the text contains no valid PEM block.
    """
    block, _ = find_pem_block(text)
    if block is None:
        raise MalformedPEMError("No valid PEM block found.")
    return block


def encode_pem(label: str, data: bytes, headers: dict[str, str] | None = None) -> str:
    """Encodes `data` into a PEM block.

    Args:
        label: The block label, e.g. "PUBLIC KEY".
        data: The DER payload.
        headers: Optional `Key: Value` headers placed before the body.

    Returns:
        The PEM text, ending with a newline.

    Raises:
        ValueError: If the label could not be read back.
    """
    if "\n" in label or "\r" in label or _TAIL in label:
        raise ValueError(f"Invalid PEM label: {label!r}")
    payload = base64.b64encode(data).decode("ascii")
    res = f"{_BEGIN}{label}{_TAIL}\n"
    if headers:
        res += "".join(f"{key}: {value}\n" for key, value in headers.items())
        res += "\n"
    body = "\n".join(payload[i:i + _LINE_LENGTH] for i in range(0, len(payload), _LINE_LENGTH))
    res += body + "\n" if body else ""
    res += f"{_END}{label}{_TAIL}\n"
    return res
