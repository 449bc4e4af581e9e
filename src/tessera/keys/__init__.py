"""
Keys - account resolution from private keys, mnemonics and keystores.
"""
