"""
Chain-facing clients: the transaction aggregation service and the Solana
JSON-RPC endpoint used to read address lookup tables.
"""

from txdecoder.chain.lookup_tables import LookupTableClient, resolve_account_keys
from txdecoder.chain.models import AddressTableLookup, RawInstruction, RawTransaction, extract_memo
from txdecoder.chain.upstream import UpstreamClient

__all__ = [
    "AddressTableLookup",
    "LookupTableClient",
    "RawInstruction",
    "RawTransaction",
    "UpstreamClient",
    "extract_memo",
    "resolve_account_keys",
]
