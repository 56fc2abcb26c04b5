"""
Node Name to Port/Address Converter

Turns a resolved NodeConfig into its TCP port and private IPv4 address, and
maps ports back to the node they belong to.
"""

import logging
from dataclasses import dataclass
from ipaddress import IPv4Address
from typing import Any, Dict, Optional

from node_parser.node_parser import (
    DELIMITER,
    NodeConfig,
    NodeNameParser,
    OutOfRangeError,
    UnknownIdentifierError,
    parse_file,
)
from port_engine.port_tables import (
    CUSTOM_NETWORK_BASES,
    INSTANCE_DIGITS,
    NETWORK_BASES,
    NETWORK_ORDINALS,
    PORT_MAX,
    PORT_MIN,
    ROLE_INSTANCE_RANGES,
    ROLE_IP_DIGITS,
    ROLE_OFFSETS,
    SYSTEM_CHAINS,
    ChainInfo,
    Network,
    custom_chains_for,
)

logger = logging.getLogger(__name__)

ADDRESS_PREFIX = "192.168"
CHAIN_OCTET_BASE = 10


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class NodeAddress:
    """Everything derived from one node name"""
    name: str
    config: NodeConfig
    port: int
    ip: IPv4Address

    @property
    def endpoint(self) -> str:
        return f"{self.ip}:{self.port}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'role': self.config.role.value,
            'chain': self.config.chain.name if self.config.chain else None,
            'custom': self.config.is_custom,
            'network': self.config.network.value,
            'instance': self.config.instance,
            'port': self.port,
            'ip': str(self.ip),
        }


# ============================================================================
# Converter
# ============================================================================

class PortConverter:
    """Encodes node configs into ports and addresses"""

    def __init__(self):
        self.parser = NodeNameParser()
        # port block base -> (network, custom?)
        self._blocks = {base: (network, False) for network, base in NETWORK_BASES.items()}
        self._blocks.update(
            {base: (network, True) for network, base in CUSTOM_NETWORK_BASES.items()}
        )

    def base_port(self, config: NodeConfig) -> int:
        if config.is_custom:
            return CUSTOM_NETWORK_BASES[config.network]
        return NETWORK_BASES[config.network]

    def generate_port(self, config: NodeConfig) -> int:
        offset = config.chain.offset if config.chain else 0
        port = self.base_port(config) + offset + ROLE_OFFSETS[config.role] + config.instance

        if not PORT_MIN <= port <= PORT_MAX:
            raise OutOfRangeError(
                f"Port {port} is outside {PORT_MIN}-{PORT_MAX}",
                str(port),
            )
        return port

    def generate_ip(self, config: NodeConfig) -> IPv4Address:
        """
        Derive 192.168.X.Y where X = role*100 + network*10 + instance and
        Y = 10 + chain id (0 for the relay chain).
        """
        third = (
            ROLE_IP_DIGITS[config.role] * 100
            + NETWORK_ORDINALS[config.network] * 10
            + config.instance
        )
        fourth = CHAIN_OCTET_BASE + (config.chain.chain_id if config.chain else 0)

        if third > 255 or fourth > 255:
            raise OutOfRangeError(
                f"Address octets {third}.{fourth} exceed 255",
                f"{third}.{fourth}",
            )
        return IPv4Address(f"{ADDRESS_PREFIX}.{third}.{fourth}")

    def convert_config(self, config: NodeConfig) -> NodeAddress:
        port = self.generate_port(config)
        ip = self.generate_ip(config)
        logger.debug("Encoded %s as %s:%d", config, ip, port)
        return NodeAddress(
            name=format_name(config),
            config=config,
            port=port,
            ip=ip,
        )

    def convert_name(self, name: str) -> NodeAddress:
        return self.convert_config(self.parser.parse(name))

    def convert_file(self, filepath: str) -> NodeAddress:
        config = parse_file(filepath)
        return self.convert_config(config)

    def decode_port(self, port: int) -> NodeConfig:
        """Map a port back to the node config that produces it"""
        block = self._blocks.get(port - port % 1000)
        if block is None:
            raise OutOfRangeError(
                f"Port {port} is not in any node port block",
                str(port),
                f"Known blocks: {', '.join(str(b) for b in sorted(self._blocks))}",
            )
        network, custom = block

        remainder = port % 1000
        offset = remainder - remainder % 100
        role_offset = remainder % 100 - remainder % 10
        instance = remainder % 10

        role = next((r for r, o in ROLE_OFFSETS.items() if o == role_offset), None)
        if role is None:
            raise UnknownIdentifierError(f"Port {port} has no role in slot {role_offset}", str(port))

        low, high = ROLE_INSTANCE_RANGES[role]
        if not low <= instance <= high:
            raise OutOfRangeError(
                f"Port {port} encodes instance {instance}, outside {low}-{high}",
                str(port),
            )

        # Slot 0 of a system block is the relay chain itself
        chain = None
        if custom or offset:
            chain = self._decode_chain(network, custom, offset)
            if chain is None:
                raise UnknownIdentifierError(
                    f"Port {port} uses unassigned chain slot {offset} on {network.value}",
                    str(port),
                )

        return NodeConfig(network=network, chain=chain, role=role, instance=instance)

    def _decode_chain(self, network: Network, custom: bool, offset: int) -> Optional[ChainInfo]:
        if custom:
            candidates = custom_chains_for(network).values()
        else:
            candidates = SYSTEM_CHAINS.values()
        return next((info for info in candidates if info.offset == offset), None)


# ============================================================================
# Helpers
# ============================================================================

def format_name(config: NodeConfig) -> str:
    """Canonical node name, e.g. rpc-asset-hub-polkadot-01"""
    parts = [config.role.value]
    if config.chain:
        parts.append(config.chain.name)
    parts.append(config.network.value)
    parts.append(f"{config.instance:0{INSTANCE_DIGITS}d}")
    return DELIMITER.join(parts)


def derive_port(name: str) -> int:
    """Port for a node name; raises NodeNameError on any failure"""
    return PortConverter().convert_name(name).port


def derive_address(name: str) -> NodeAddress:
    return PortConverter().convert_name(name)
