from cryptography.hazmat.primitives.hashes import Hash, SHA3_512

GENESIS_HASH = "0" * 128


def sha3_512_hex(data: str) -> str:
    h = Hash(SHA3_512())
    h.update(data.encode())
    return h.finalize().hex()


def chain_hash(previous: str, current: str) -> str:
    return sha3_512_hex(f"{previous}::{current}")
