"""
Command implementations for the Tessera CLI.

- wallet:   Create, recover, inspect, encrypt and decrypt accounts
- query:    Balances, token metadata and transaction lookups
- send:     Native/token transfers and raw contract invocations
"""
