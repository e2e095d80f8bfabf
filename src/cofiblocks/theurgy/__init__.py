"""
Theurgy - Command implementations for cofiblocks.

Each module corresponds to top-level CLI commands:
- deploy:   Deploy the ERC-1155 contract from a TOML specification
- show:     Query one token balance of an account
- show-all: Query every token of a specification for an account
"""
