"""
Chain - On-chain interaction layer for Tessera.

Provides the JSON-RPC transport, ABI encoding, contract bindings, chain
context resolution, read-only queries, transfers and the raw contract-call
pipeline.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
