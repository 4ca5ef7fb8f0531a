"""
Header Parser - Recover natives from a C-style header file.

The RDR header does not label namespace or hash as fields. Instead:

    namespace WEAPON
    {
        static void _0x1234(int a)
        {
            Invoke<0xABCD1234, void>(a);
        }
    }

Namespace membership comes from the enclosing `namespace` block and the hash
comes from the Invoke<> call in the body right below the declaration. The
parser is a two-state machine (outside / inside a namespace) plus a bounded
lookahead for the hash. The lookahead only runs when both following lines
exist, so a declaration on one of the last two lines keeps the default hash.

Known limitation: any line that is exactly "}" leaves the namespace. The
headers this targets never nest namespaces, so nested blocks are not tracked.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional

from .models import DEFAULT_HASH, Parameter

logger = logging.getLogger(__name__)

# Group label used while outside any namespace; never returned
OUTSIDE_GROUP = "UNK"

# Lines inspected after a declaration when looking for Invoke<0x...>
LOOKAHEAD_LINES = 2

ANONYMOUS_PREFIX = "_0x"

NAMESPACE_RE = re.compile(r"^namespace\s+(\w+)")
DECLARATION_RE = re.compile(
    r"^\s*static\s+(?P<returns>[\w*&<>:\s]+)\s+(?P<name>\w+)\s*\((?P<params>.*?)\)"
)
INVOKE_HASH_RE = re.compile(r"Invoke\s*<\s*(0x[A-F0-9]{1,16})", re.IGNORECASE)


class ScopeState(Enum):
    OUTSIDE = "outside"
    INSIDE = "inside"


@dataclass
class NamespaceScope:
    """
    Tracks which namespace the parser is currently in.

    Transitions:
        OUTSIDE --namespace X--> INSIDE(X)
        INSIDE  --namespace Y--> INSIDE(Y)
        any     --"}"----------> OUTSIDE
    """
    state: ScopeState = ScopeState.OUTSIDE
    group: str = OUTSIDE_GROUP
    declared: list[str] = field(default_factory=list)

    def enter(self, name: str):
        self.state = ScopeState.INSIDE
        self.group = name
        if name not in self.declared:
            self.declared.append(name)

    def leave(self):
        self.state = ScopeState.OUTSIDE
        self.group = OUTSIDE_GROUP

    @property
    def is_inside(self) -> bool:
        return self.state is ScopeState.INSIDE


def find_invoke_hash(lines: Iterable[str]) -> Optional[str]:
    """
    Return the first Invoke<0x...> hash found in the given lines.

    Args:
        lines: The few lines following a declaration (the lookahead window)

    Returns:
        Hash literal as written (e.g. "0xABCD1234"), or None
    """
    for line in lines:
        match = INVOKE_HASH_RE.search(line)
        if match:
            return match.group(1)
    return None


def split_params(text: str) -> list[Parameter]:
    """
    Split "int a, Vector3* pos" into Parameters.

    Each piece is split on its last whitespace: everything before is the
    type, the last token is the name. Empty text gives an empty list.
    """
    if not text or not text.strip():
        return []

    params = []
    for piece in text.split(","):
        parts = piece.strip().split()
        if not parts:
            continue
        name = parts.pop()
        params.append(Parameter(type=" ".join(parts), name=name))
    return params


def parse_header(text: str) -> tuple[list[dict[str, Any]], list[str]]:
    """
    Parse header text into raw native records.

    Args:
        text: Full header file contents

    Returns:
        (records, declared_groups). Records are plain dicts with canonical
        field names. Declarations outside any namespace are dropped.
    """
    lines = text.splitlines()
    scope = NamespaceScope()
    records = []
    dropped = 0

    for i, raw_line in enumerate(lines):
        line = raw_line.strip()

        ns_match = NAMESPACE_RE.match(line)
        if ns_match:
            scope.enter(ns_match.group(1))
            continue

        if line == "}":
            scope.leave()
            continue

        decl = DECLARATION_RE.match(line)
        if not decl:
            continue

        # Only a full window is scanned; a declaration in the last two lines keeps the default hash
        window = []
        if i + LOOKAHEAD_LINES < len(lines):
            window = [l.strip() for l in lines[i + 1:i + 1 + LOOKAHEAD_LINES]]
        hash_value = find_invoke_hash(window) or DEFAULT_HASH

        name = decl.group("name")
        key = hash_value if name.startswith(ANONYMOUS_PREFIX) else name

        if not scope.is_inside:
            dropped += 1
            continue

        records.append({
            "key": key,
            "hash": hash_value,
            "parameters": split_params(decl.group("params")),
            "return_type": decl.group("returns").strip(),
            "groups": [scope.group],
        })

    if dropped:
        logger.debug(f"Dropped {dropped} declaration(s) outside any namespace")

    return records, scope.declared
