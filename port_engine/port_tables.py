"""
Port Symbol Tables

Compiled-in lookup tables mapping networks, roles and chains to the numeric
offsets that make up a node port and address. Everything here is read-only.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple


# ============================================================================
# Networks
# ============================================================================

class Network(Enum):
    POLKADOT = "polkadot"
    KUSAMA = "kusama"
    WESTEND = "westend"
    PASEO = "paseo"


# Lowest port of the derived range; network N occupies PORT_FLOOR + N*1000
PORT_FLOOR = 30000
PORT_MIN = 1024
PORT_MAX = 65535

NETWORK_ORDINALS: Mapping[Network, int] = MappingProxyType({
    Network.POLKADOT: 1,
    Network.KUSAMA: 2,
    Network.WESTEND: 3,
    Network.PASEO: 4,
})

NETWORK_BASES: Mapping[Network, int] = MappingProxyType({
    network: PORT_FLOOR + 1000 * ordinal
    for network, ordinal in NETWORK_ORDINALS.items()
})

# Custom chains live in their own block above the system chains.
# Westend carries no custom chains, so it has no block here.
CUSTOM_NETWORK_BASES: Mapping[Network, int] = MappingProxyType({
    Network.POLKADOT: 35000,
    Network.KUSAMA: 36000,
    Network.PASEO: 38000,
})


# ============================================================================
# Roles
# ============================================================================

class Role(Enum):
    BOOT = "boot"
    VAL = "val"
    RPC = "rpc"


ROLE_ALIASES: Mapping[str, Role] = MappingProxyType({
    "validator": Role.VAL,
})

ROLE_OFFSETS: Mapping[Role, int] = MappingProxyType({
    Role.BOOT: 10,
    Role.VAL: 20,
    Role.RPC: 30,
})

# Hundreds digit of the third IP octet
ROLE_IP_DIGITS: Mapping[Role, int] = MappingProxyType({
    Role.BOOT: 0,
    Role.VAL: 1,
    Role.RPC: 2,
})

# Inclusive (low, high). The instance is the units digit of the port, so no
# range may leave 1..9.
ROLE_INSTANCE_RANGES: Mapping[Role, Tuple[int, int]] = MappingProxyType({
    Role.BOOT: (1, 9),
    Role.VAL: (1, 9),
    Role.RPC: (1, 9),
})

INSTANCE_DIGITS = 2


# ============================================================================
# Chains
# ============================================================================

@dataclass(frozen=True)
class ChainInfo:
    """A resolved parachain: canonical name plus its slot in the port block"""
    name: str
    offset: int
    custom: bool = False
    network: Optional[Network] = None  # owning network, custom chains only

    @property
    def chain_id(self) -> int:
        """Numeric id used for the last IP octet; custom ids start at 10"""
        slot = self.offset // 100
        return 10 + slot if self.custom else slot

    @property
    def key(self) -> str:
        return compact_chain_name(self.name)


def compact_chain_name(name: str) -> str:
    """Lowercase and drop delimiters so 'Asset-Hub' and 'assethub' compare equal"""
    return name.lower().replace("-", "")


RELAY_CHAIN_NAMES = frozenset({"relay"})


def _system(name: str, offset: int) -> Tuple[str, ChainInfo]:
    info = ChainInfo(name=name, offset=offset)
    return info.key, info


def _custom(network: Network, name: str, offset: int) -> Tuple[Tuple[Network, str], ChainInfo]:
    info = ChainInfo(name=name, offset=offset, custom=True, network=network)
    return (network, info.key), info


SYSTEM_CHAINS: Mapping[str, ChainInfo] = MappingProxyType(dict([
    _system("asset-hub", 100),
    _system("bridge-hub", 200),
    _system("collectives", 300),
    _system("people", 400),
    _system("coretime", 500),
    _system("encointer", 600),
]))

# Keyed by (network, chain) so the same name never leaks across ecosystems
CUSTOM_CHAINS: Mapping[Tuple[Network, str], ChainInfo] = MappingProxyType(dict([
    _custom(Network.POLKADOT, "moonbeam", 0),
    _custom(Network.POLKADOT, "hyperbridge", 100),
    _custom(Network.POLKADOT, "interlay", 200),
    _custom(Network.POLKADOT, "acala", 300),
    _custom(Network.POLKADOT, "kilt", 400),
    _custom(Network.POLKADOT, "hydration", 500),
    _custom(Network.KUSAMA, "kintsugi", 200),
    _custom(Network.KUSAMA, "karura", 300),
    _custom(Network.PASEO, "gargantua", 100),
]))

# Historical or alternate names, in compact form, to canonical compact names
CHAIN_ALIASES: Mapping[str, str] = MappingProxyType({
    "statemint": "assethub",
    "statemine": "assethub",
    "nexus": "hyperbridge",
    "hydradx": "hydration",
    "spiritnet": "kilt",
})


# ============================================================================
# Lookups
# ============================================================================

def lookup_network(name: str) -> Optional[Network]:
    try:
        return Network(name.lower())
    except ValueError:
        return None


def lookup_role(name: str) -> Optional[Role]:
    lowered = name.lower()
    if lowered in ROLE_ALIASES:
        return ROLE_ALIASES[lowered]
    try:
        return Role(lowered)
    except ValueError:
        return None


def lookup_chain(network: Network, name: str) -> Optional[ChainInfo]:
    """
    Resolve a chain name under a network.
    Custom chains are checked against the network's own table first, then the
    network-agnostic system table. Returns None when neither knows the name.
    """
    key = compact_chain_name(name)
    key = CHAIN_ALIASES.get(key, key)

    custom = CUSTOM_CHAINS.get((network, key))
    if custom is not None:
        return custom
    return SYSTEM_CHAINS.get(key)


def custom_chains_for(network: Network) -> Dict[str, ChainInfo]:
    return {
        info.name: info
        for (owner, _), info in CUSTOM_CHAINS.items()
        if owner is network
    }


def chain_names_for(network: Network) -> Tuple[str, ...]:
    """All chain names accepted under a network, for error hints"""
    system = [info.name for info in SYSTEM_CHAINS.values()]
    return tuple(sorted(system + list(custom_chains_for(network))))
