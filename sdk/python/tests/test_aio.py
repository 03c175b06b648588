import asyncio

import pytest

from lokicrypt import aio
from lokicrypt.crypto import Curve25519KeyPair
from lokicrypt.errors import SignatureError
from lokicrypt.signing import get_sig_data, signing_public_key

KEY = bytes(range(32))


def test_async_envelopes_roundtrip():
    """Async envelope wrappers round-trip like the sync ones."""
    async def scenario():
        envelope_a = await aio.encrypt_a(KEY, b"hello")
        envelope_b = await aio.encrypt_b(KEY, b"hello")
        text = await aio.encrypt_a64(KEY, b"hello")
        return (
            await aio.decrypt_a(KEY, envelope_a),
            await aio.decrypt_b(KEY, envelope_b),
            await aio.decrypt_a64(KEY, text),
        )

    assert asyncio.run(scenario()) == (b"hello", b"hello", b"hello")


def test_async_derive_and_sign_match_sync():
    """Async derivation and signing match the sync results."""
    alice = Curve25519KeyPair.generate()
    bob = Curve25519KeyPair.generate()
    note = {"timestamp": 100}
    message = {"text": " hi "}

    async def scenario():
        return await asyncio.gather(
            aio.derive_symmetric_key(alice.private_bytes(), bob.public_bytes()),
            aio.derive_symmetric_key(bob.private_bytes(), alice.public_bytes()),
            aio.get_sig_data(1, KEY, note, message),
        )

    key_ab, key_ba, signature = asyncio.run(scenario())

    assert key_ab == key_ba
    assert signature == get_sig_data(1, KEY, note, message)


def test_async_shared_secret_and_verify():
    """Async agreement and verification match their sync counterparts."""
    alice = Curve25519KeyPair.generate()
    bob = Curve25519KeyPair.generate()
    note = {"timestamp": 100}
    message = {"text": "hi"}
    signature = get_sig_data(1, KEY, note, message)

    async def scenario():
        secret_ab = await aio.compute_shared_secret(alice.private_bytes(), bob.public_bytes())
        secret_ba = await aio.compute_shared_secret(bob.private_bytes(), alice.public_bytes())
        await aio.verify_sig_data(1, signing_public_key(KEY), note, message, signature)
        return secret_ab, secret_ba

    secret_ab, secret_ba = asyncio.run(scenario())

    assert secret_ab == secret_ba


def test_async_verify_propagates_errors():
    """Verification failures surface unchanged through the async wrapper."""
    signature = get_sig_data(1, KEY, {"timestamp": 100}, {"text": "hi"})

    with pytest.raises(SignatureError):
        asyncio.run(aio.verify_sig_data(1, signing_public_key(KEY), {"timestamp": 100}, {"text": "ho"}, signature))
