"""Badge code parsing and resolution to a child.

Badge payload conventions:

* ``<prefix><code_qr_id>`` (default ``LPRDS-``), printed on plain badges.
* ``<secure_prefix><base64(xor(child_id ":" ...))>`` (default ``LPRDS:``),
  printed on secure badges. The XOR key is a shared setting; the child id is
  the part of the decoded text before the first ``:``.
* Older badges carry a JSON object ``{"code": ...}`` or ``{"code_qr_id": ...}``;
  those are normalised to the prefixed form before lookup.
"""

from __future__ import annotations

import base64
import binascii
import json
import re
from dataclasses import dataclass
from typing import Optional

from ..children.model import Child
from ..children.repository import ChildRepository
from ..core.constants import (
    DEFAULT_SCAN_CODE_PREFIX,
    DEFAULT_SECURE_CODE_KEY,
    DEFAULT_SECURE_CODE_PREFIX,
    LEGACY_TOKEN_LENGTH,
)
from ..core.exceptions import ChildNotFoundOrInactive, InvalidCodeFormat

_TOKEN_RE = re.compile(r"^[A-Za-z0-9]+$")
_NON_ALNUM_RE = re.compile(r"[^A-Z0-9]")


@dataclass(frozen=True)
class BadgeRef:
    """What a badge points at: a badge code, or a child id for secure badges."""

    code_qr_id: Optional[str] = None
    child_id: Optional[int] = None


def xor_with_key(data: bytes, key: str) -> bytes:
    key_bytes = key.encode("latin-1")
    if not key_bytes:
        return data
    return bytes(b ^ key_bytes[i % len(key_bytes)] for i, b in enumerate(data))


@dataclass(frozen=True)
class ScanCodeParser:
    prefix: str = DEFAULT_SCAN_CODE_PREFIX
    secure_prefix: str = DEFAULT_SECURE_CODE_PREFIX
    secure_key: str = DEFAULT_SECURE_CODE_KEY

    def payload_for(self, code_qr_id: str) -> str:
        return f"{self.prefix}{code_qr_id}"

    def _normalize_legacy(self, raw: str) -> str:
        try:
            parsed = json.loads(raw)
        except ValueError:
            return raw
        if not isinstance(parsed, dict):
            return raw

        value = parsed.get("code") or parsed.get("code_qr_id")
        if not value:
            return raw
        token = _NON_ALNUM_RE.sub("", str(value).upper())[:LEGACY_TOKEN_LENGTH]
        return self.payload_for(token)

    def _decode_secure(self, encoded: str) -> int:
        try:
            raw = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidCodeFormat("Unreadable code") from e

        child_id = xor_with_key(raw, self.secure_key).decode("latin-1").split(":", 1)[0]
        if not child_id.isdecimal() or int(child_id) <= 0:
            raise InvalidCodeFormat("Unreadable code")
        return int(child_id)

    def parse(self, raw: str) -> BadgeRef:
        """Return the reference carried by a scanned payload."""
        code = (raw or "").strip()
        if not code:
            raise InvalidCodeFormat("Scanned code is empty")

        if self.secure_prefix and code.startswith(self.secure_prefix):
            return BadgeRef(child_id=self._decode_secure(code[len(self.secure_prefix):]))

        code = self._normalize_legacy(code)
        if not code.startswith(self.prefix):
            raise InvalidCodeFormat("Unrecognized code format")

        token = code[len(self.prefix):]
        if not _TOKEN_RE.match(token):
            raise InvalidCodeFormat("Unreadable code")
        return BadgeRef(code_qr_id=token)


class CodeResolver:
    """Use case: scanned payload -> active child. No side effects."""

    def __init__(self, children: ChildRepository, parser: ScanCodeParser | None = None):
        self._children = children
        self._parser = parser or ScanCodeParser()

    @property
    def parser(self) -> ScanCodeParser:
        return self._parser

    def resolve(self, raw: str) -> Child:
        ref = self._parser.parse(raw)
        if ref.child_id is not None:
            child = self._children.get_by_id(ref.child_id)
            if child and not child.is_active:
                child = None
        else:
            child = self._children.get_active_by_code(ref.code_qr_id)
        if not child:
            raise ChildNotFoundOrInactive("Child not found or inactive")
        return child
