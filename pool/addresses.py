# pool/addresses.py
import base58

PUBLIC_KEY_LENGTH = 32

def is_valid_address(address: str) -> bool:
    """Check that an address is base58 text decoding to a 32-byte public key"""
    try:
        decoded = base58.b58decode(address)
    except ValueError:
        return False
    return len(decoded) == PUBLIC_KEY_LENGTH
