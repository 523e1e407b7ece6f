"""
ABI-backed signature lookup.

Builds selector and topic tables from contract ABIs (plain ABI arrays or
Forge/Hardhat artifacts) and decodes event logs with eth_abi.
"""

import json
from typing import Any, Dict, List, Mapping, Optional

from eth_abi.abi import decode
from eth_utils import decode_hex, encode_hex
from web3 import Web3

from tracestitch.core.enricher import EventDescriptor, SignatureLookup
from tracestitch.utils.exceptions import AbiLoadError, EventDecodeError
from tracestitch.utils.logging import get_logger

logger = get_logger('abi')


def format_abi_type(abi_input: Dict[str, Any]) -> str:
    """Format ABI type, handling tuples correctly."""
    if abi_input['type'] == 'tuple':
        components = abi_input.get('components', [])
        component_types = [format_abi_type(comp) for comp in components]
        return f"({','.join(component_types)})"
    elif abi_input['type'].startswith('tuple['):
        # Array of tuples, keep the array suffix
        components = abi_input.get('components', [])
        component_types = [format_abi_type(comp) for comp in components]
        return f"({','.join(component_types)}){abi_input['type'][len('tuple'):]}"
    return abi_input['type']


def abi_signature(item: Dict[str, Any]) -> str:
    """Canonical ``name(type,...)`` signature of a function or event."""
    input_types = ','.join(format_abi_type(inp) for inp in item.get('inputs', []))
    return f"{item['name']}({input_types})"


def _to_bytes(value) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return decode_hex(value or '0x')


def _is_hashed_topic_type(param_type: str) -> bool:
    # Indexed dynamic values and arrays/tuples are stored as their keccak hash
    return (
        param_type in ('string', 'bytes') or
        param_type.endswith(']') or
        param_type.startswith('(')
    )


def decode_event_log(event_abi: Dict[str, Any], log: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Decode the parameters of ``log`` with ``event_abi``.

    Indexed parameters come from topics 1..n, the rest from ``data``.
    Indexed values that the EVM hashed are returned as the raw topic hex.

    Raises:
        EventDecodeError: if topics or data do not fit the ABI
    """
    name = event_abi.get('name', '?')
    inputs = event_abi.get('inputs', [])
    indexed_inputs = [inp for inp in inputs if inp.get('indexed', False)]
    data_inputs = [inp for inp in inputs if not inp.get('indexed', False)]

    topics = list(log.get('topics') or [])
    offset = 0 if event_abi.get('anonymous') else 1
    indexed_topics = topics[offset:]
    if len(indexed_topics) != len(indexed_inputs):
        raise EventDecodeError(
            name, f"expected {len(indexed_inputs)} indexed topic(s), got {len(indexed_topics)}"
        )

    values: Dict[str, Any] = {}
    try:
        for i, (topic, inp) in enumerate(zip(indexed_topics, indexed_inputs)):
            param_name = inp.get('name') or f"arg{i}"
            param_type = format_abi_type(inp)
            topic_bytes = _to_bytes(topic)
            if _is_hashed_topic_type(param_type):
                values[param_name] = encode_hex(topic_bytes)
            else:
                values[param_name] = decode([param_type], topic_bytes)[0]

        if data_inputs:
            data_types = [format_abi_type(inp) for inp in data_inputs]
            decoded = decode(data_types, _to_bytes(log.get('data')))
            for i, (inp, value) in enumerate(zip(data_inputs, decoded)):
                values[inp.get('name') or f"arg{len(indexed_inputs) + i}"] = value
    except Exception as e:
        raise EventDecodeError(name, str(e))

    return values


class AbiSignatureLookup(SignatureLookup):
    """
    Signature lookup built from contract ABIs.

    Method names resolve to the bare function name unless
    ``full_signatures`` is set, in which case ``name(types)`` is returned.
    """

    def __init__(self, full_signatures: bool = False):
        self.full_signatures = full_signatures
        self.function_signatures: Dict[str, str] = {}  # selector -> signature
        self.function_abis: Dict[str, Dict[str, Any]] = {}  # selector -> ABI item
        self.event_signatures: Dict[str, str] = {}  # topic hash -> signature
        self.event_abis: Dict[str, Dict[str, Any]] = {}  # topic hash -> ABI item

    def load_abi(self, abi_path: str) -> None:
        """Load an ABI file (plain array or artifact with an ``abi`` key)."""
        try:
            with open(abi_path, 'r') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise AbiLoadError(f"Could not load ABI: {e}", abi_path=abi_path)

        if isinstance(data, list):
            abi = data
        elif isinstance(data, dict) and 'abi' in data:
            abi = data['abi']
        else:
            raise AbiLoadError(f"Unknown ABI format in {abi_path}", abi_path=abi_path)

        self.add_abi(abi)
        logger.debug(f"Loaded ABI from {abi_path}")

    def add_abi(self, abi: List[Dict[str, Any]]) -> None:
        """Register every function and event of an ABI."""
        for item in abi:
            if item.get('type') == 'function':
                signature = abi_signature(item)
                selector = encode_hex(Web3.keccak(text=signature)[:4])
                self.function_signatures[selector] = signature
                self.function_abis[selector] = item

            elif item.get('type') == 'event' and not item.get('anonymous'):
                signature = abi_signature(item)
                topic_hash = encode_hex(Web3.keccak(text=signature))
                self.event_signatures[topic_hash] = signature
                self.event_abis[topic_hash] = item

    def method_name(self, selector: str) -> Optional[str]:
        signature = self.function_signatures.get(selector.lower())
        if signature is None:
            return None
        if self.full_signatures:
            return signature
        return self.function_abis[selector.lower()]['name']

    def event_descriptor(self, topic_hash: str) -> Optional[EventDescriptor]:
        event_abi = self.event_abis.get(topic_hash.lower())
        if event_abi is None:
            return None

        def parser(log):
            try:
                return decode_event_log(event_abi, log)
            except EventDecodeError as e:
                logger.warning(e.message)
                return {"error": e.message}

        return EventDescriptor(name=event_abi['name'], parser=parser)
