"""
Node Name Parser
Splits a node name such as rpc-asset-hub-polkadot-01 into its fields and
resolves them against the port tables. Any malformed or unknown part aborts
the whole parse with a NodeNameError.
"""

import logging
import os
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from port_engine.port_tables import (
    INSTANCE_DIGITS,
    RELAY_CHAIN_NAMES,
    ROLE_ALIASES,
    ROLE_INSTANCE_RANGES,
    ChainInfo,
    Network,
    Role,
    chain_names_for,
    compact_chain_name,
    lookup_chain,
    lookup_network,
    lookup_role,
)

logger = logging.getLogger(__name__)

DELIMITER = "-"
FILE_SUFFIXES = (".yaml", ".yml")
MIN_TOKENS = 3


# ============================================================================
# Error Reporting
# ============================================================================

class ErrorKind(Enum):
    INVALID_FORMAT = "InvalidFormat"
    UNKNOWN_IDENTIFIER = "UnknownIdentifier"
    OUT_OF_RANGE = "OutOfRange"


class NodeNameError(Exception):
    """A node name that cannot be turned into a port"""
    kind = ErrorKind.INVALID_FORMAT

    def __init__(self, message: str, token: str = "", suggestion: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.token = token
        self.suggestion = suggestion

    def __str__(self):
        return self.message

    def format(self, color: bool = True) -> str:
        red = "\033[91m" if color else ""
        reset = "\033[0m" if color else ""

        result = f"{red}{self.kind.value}{reset}: {self.message}"
        if self.suggestion:
            result += f"\n  Fix: {self.suggestion}"
        return result


class InvalidFormatError(NodeNameError):
    kind = ErrorKind.INVALID_FORMAT


class UnknownIdentifierError(NodeNameError):
    kind = ErrorKind.UNKNOWN_IDENTIFIER


class OutOfRangeError(NodeNameError):
    kind = ErrorKind.OUT_OF_RANGE


# ============================================================================
# Parsed Structures
# ============================================================================

@dataclass(frozen=True)
class NameFields:
    """Raw tokens of a node name, before any lookup"""
    role: str
    chain: Optional[str]
    network: str
    instance: str


@dataclass(frozen=True)
class NodeConfig:
    network: Network
    chain: Optional[ChainInfo]
    role: Role
    instance: int

    @property
    def is_custom(self) -> bool:
        return self.chain is not None and self.chain.custom


# ============================================================================
# Splitter and Classifier
# ============================================================================

def strip_suffix(name: str) -> str:
    for suffix in FILE_SUFFIXES:
        if name.endswith(suffix):
            return name[:-len(suffix)]
    return name


def split_name(name: str) -> List[str]:
    """
    Split a node name into tokens.
    Empty tokens are kept so that stray delimiters fail later in classification.
    """
    tokens = strip_suffix(name).split(DELIMITER)
    if len(tokens) < MIN_TOKENS:
        raise InvalidFormatError(
            f"Node name '{name}' has {len(tokens)} part(s), expected at least {MIN_TOKENS}",
            name,
            "Use <role>[-<chain>]-<network>-<instance>, e.g. rpc-asset-hub-polkadot-01",
        )
    return tokens


def classify_tokens(tokens: List[str]) -> NameFields:
    """Assign role, optional chain, network and instance positions"""
    if len(tokens) < MIN_TOKENS:
        raise InvalidFormatError(
            f"Expected at least {MIN_TOKENS} parts, got {len(tokens)}",
            DELIMITER.join(tokens),
        )

    role, middle, instance = tokens[0], tokens[1:-1], tokens[-1]
    # Network always sits right before the instance; anything before it is the chain
    network = middle[-1]
    chain_tokens = middle[:-1]

    for label, token in (("role", role), ("network", network), ("instance", instance)):
        if not token:
            raise InvalidFormatError(
                f"Missing {label} in '{DELIMITER.join(tokens)}'",
                DELIMITER.join(tokens),
                f"Remove the stray '{DELIMITER}'",
            )
    if any(not token for token in chain_tokens):
        raise InvalidFormatError(
            f"Empty chain segment in '{DELIMITER.join(tokens)}'",
            DELIMITER.join(tokens),
            f"Remove the doubled '{DELIMITER}'",
        )

    chain = DELIMITER.join(chain_tokens) if chain_tokens else None
    return NameFields(role=role, chain=chain, network=network, instance=instance)


# ============================================================================
# Resolution and Validation
# ============================================================================

class NodeNameParser:
    """Resolves a node name to a NodeConfig, validating every field"""

    INSTANCE_PATTERN = re.compile(r"[0-9]+")

    def parse(self, name: str) -> NodeConfig:
        fields = classify_tokens(split_name(name))
        logger.debug("Classified %r as %s", name, fields)

        role = self._resolve_role(fields.role)
        network = self._resolve_network(fields.network)
        chain = self._resolve_chain(network, fields.chain)
        instance = self._resolve_instance(role, fields.instance)

        config = NodeConfig(network=network, chain=chain, role=role, instance=instance)
        logger.debug("Resolved %r to %s", name, config)
        return config

    def _resolve_role(self, token: str) -> Role:
        role = lookup_role(token)
        if role is None:
            accepted = sorted([r.value for r in Role] + list(ROLE_ALIASES))
            raise UnknownIdentifierError(
                f"Unknown role '{token}'",
                token,
                f"Use one of: {', '.join(accepted)}",
            )
        return role

    def _resolve_network(self, token: str) -> Network:
        network = lookup_network(token)
        if network is None:
            raise UnknownIdentifierError(
                f"Unknown network '{token}'",
                token,
                f"Use one of: {', '.join(n.value for n in Network)}",
            )
        return network

    def _resolve_chain(self, network: Network, token: Optional[str]) -> Optional[ChainInfo]:
        if token is None or compact_chain_name(token) in RELAY_CHAIN_NAMES:
            return None

        chain = lookup_chain(network, token)
        if chain is None:
            raise UnknownIdentifierError(
                f"Unknown chain '{token}' on {network.value}",
                token,
                f"Chains on {network.value}: {', '.join(chain_names_for(network))}",
            )
        return chain

    def _resolve_instance(self, role: Role, token: str) -> int:
        if not self.INSTANCE_PATTERN.fullmatch(token):
            raise InvalidFormatError(
                f"Instance '{token}' is not a number",
                token,
                "Use a zero-padded number such as 01",
            )
        if len(token) != INSTANCE_DIGITS:
            raise OutOfRangeError(
                f"Instance '{token}' must have exactly {INSTANCE_DIGITS} digits",
                token,
                f"Use {int(token):0{INSTANCE_DIGITS}d}" if len(token) < INSTANCE_DIGITS else None,
            )

        instance = int(token)
        low, high = ROLE_INSTANCE_RANGES[role]
        if not low <= instance <= high:
            raise OutOfRangeError(
                f"Instance {instance} is out of range for role '{role.value}'",
                token,
                f"Use an instance between {low:02d} and {high:02d}",
            )
        return instance


# ============================================================================
# Main Parse Functions
# ============================================================================

def parse_node_name(name: str) -> NodeConfig:
    """Parse a node name; raises NodeNameError on any failure"""
    return NodeNameParser().parse(name)


def parse_file(filepath: str) -> NodeConfig:
    """Parse a node definition path such as nodes/rpc-polkadot-01.yaml by its file name"""
    return parse_node_name(os.path.basename(filepath))
