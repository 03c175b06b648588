"""
Awaitable wrappers for callers running on an event loop. Each call runs the
synchronous operation in the loop's default executor; none of them suspend
partway through the cryptography itself.
"""
import asyncio
import functools

from . import crypto, envelope, signing


async def _run(func, *args):
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(func, *args))


async def compute_shared_secret(private_key, public_key) -> bytes:
    return await _run(crypto.compute_shared_secret, private_key, public_key)


async def derive_symmetric_key(private_key, public_key) -> bytes:
    return await _run(crypto.derive_symmetric_key, private_key, public_key)


async def encrypt_a(key: bytes, plaintext) -> bytes:
    return await _run(envelope.encrypt_a, key, plaintext)


async def decrypt_a(key: bytes, data: bytes) -> bytes:
    return await _run(envelope.decrypt_a, key, data)


async def encrypt_a64(key: bytes, plaintext) -> str:
    return await _run(envelope.encrypt_a64, key, plaintext)


async def decrypt_a64(key: bytes, text) -> bytes:
    return await _run(envelope.decrypt_a64, key, text)


async def encrypt_b(key: bytes, plaintext) -> bytes:
    return await _run(envelope.encrypt_b, key, plaintext)


async def decrypt_b(key: bytes, blob: bytes) -> bytes:
    return await _run(envelope.decrypt_b, key, blob)


async def get_sig_data(sig_version, private_key, note, message) -> str:
    return await _run(signing.get_sig_data, sig_version, private_key, note, message)


async def verify_sig_data(sig_version, public_key, note, message, signature_hex) -> None:
    return await _run(signing.verify_sig_data, sig_version, public_key, note, message, signature_hex)
