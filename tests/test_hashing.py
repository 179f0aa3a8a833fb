import hashlib
import hmac
import io
import unittest
from unittest import mock

from s3sig.errors import CryptoUnavailable, InvalidSigningInput
from s3sig.hashing import (
    EMPTY_SHA256_HASH,
    UNSIGNED_PAYLOAD,
    hmac_sha256,
    hmac_sha256_hex,
    payload_hash,
    sha256_hex,
)


class TestHashing(unittest.TestCase):

    def test_empty_sha256(self) -> None:
        self.assertEqual(
            'e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855',
            sha256_hex(b''),
        )
        self.assertEqual(EMPTY_SHA256_HASH, sha256_hex(''))

    def test_hmac_known_vectors(self) -> None:
        self.assertEqual(
            'f7bc83f430538424b13298e6aa6fb143ef4d59a14946175997479dbc2d1a3cd8',
            hmac_sha256_hex(b'key', 'The quick brown fox jumps over the lazy dog'),
        )
        # RFC 4231, test case 2
        self.assertEqual(
            '5bdcc146bf60754e6a042426089575c75a003f089d2739839dec58b964ec3843',
            hmac_sha256_hex(b'Jefe', b'what do ya want for nothing?'),
        )

    def test_hmac_is_raw_32_bytes(self) -> None:
        digest = hmac_sha256(b'key', 'data')

        self.assertIsInstance(digest, bytes)
        self.assertEqual(32, len(digest))

    def test_digests_with_zero_bytes_survive_chaining(self) -> None:
        with_zero = [
            digest for digest in (hmac_sha256(b'key', str(i)) for i in range(500))
            if b'\x00' in digest
        ]
        self.assertTrue(with_zero, "expected some digests to contain a zero byte")

        for digest in with_zero:
            with self.subTest(digest=digest.hex()):
                self.assertEqual(32, len(digest))
                self.assertEqual(64, len(digest.hex()))
                self.assertEqual(64, len(hmac_sha256_hex(b'key', digest)))
                chained = hmac_sha256(digest, 'aws4_request')
                self.assertEqual(hmac.new(digest, b'aws4_request', hashlib.sha256).digest(), chained)
                zero = digest.index(b'\x00')
                if digest[zero:].strip(b'\x00'):
                    # HMAC zero-pads short keys, so only a truncation that
                    # drops non-zero bytes yields a different key.
                    self.assertNotEqual(hmac_sha256(digest[:zero], 'aws4_request'), chained)

    def test_payload_hash(self) -> None:
        self.assertEqual(EMPTY_SHA256_HASH, payload_hash(None))
        self.assertEqual(EMPTY_SHA256_HASH, payload_hash(b''))
        self.assertEqual(UNSIGNED_PAYLOAD, payload_hash(UNSIGNED_PAYLOAD))
        self.assertEqual(sha256_hex(b'abc'), payload_hash('abc'))
        self.assertEqual(sha256_hex(b'abc'), payload_hash(bytearray(b'abc')))

    def test_file_payload_hashed_in_chunks(self) -> None:
        body = io.BytesIO(b'x' * 10)

        with mock.patch('s3sig.hashing.PAYLOAD_BUFFER', 3):
            self.assertEqual(sha256_hex(b'x' * 10), payload_hash(body))
        self.assertEqual(0, body.tell())

    def test_non_seekable_payload(self) -> None:
        class _Pipe(io.RawIOBase):
            def readable(self) -> bool:
                return True

            def readinto(self, buffer) -> int:
                return 0

        with self.assertRaises(InvalidSigningInput):
            payload_hash(_Pipe())

    def test_sha256_backend_missing(self) -> None:
        with mock.patch('hashlib.new', side_effect=ValueError('unsupported hash type sha256')):
            with self.assertRaises(CryptoUnavailable) as ctx:
                sha256_hex(b'data')
        self.assertIsInstance(ctx.exception.__cause__, ValueError)

    def test_hmac_backend_missing(self) -> None:
        with mock.patch('s3sig.hashing.hmac.new', side_effect=ValueError('digest disabled')):
            with self.assertRaises(CryptoUnavailable):
                hmac_sha256(b'key', b'data')


if __name__ == '__main__':
    unittest.main(verbosity=2)
