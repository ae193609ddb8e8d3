# Test PKCE verifier/challenge generation
import base64
import hashlib
import re

from src.myitmo.pkce import (
    generate_code_challenge,
    generate_code_verifier,
    generate_pkce,
)

URL_SAFE = re.compile(r"^[A-Za-z0-9_-]+$")


class TestPKCE:
    def test_verifier_is_url_safe_without_padding(self):
        for _ in range(200):
            verifier = generate_code_verifier()
            assert URL_SAFE.match(verifier)
            assert "=" not in verifier

    def test_verifier_carries_32_bytes(self):
        # 32 bytes -> 43 base64url characters once padding is stripped
        assert len(generate_code_verifier()) == 43

    def test_verifiers_are_random(self):
        assert len({generate_code_verifier() for _ in range(50)}) == 50

    def test_challenge_matches_sha256_of_verifier(self):
        verifier = "dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk"
        expected = (
            base64.urlsafe_b64encode(hashlib.sha256(verifier.encode()).digest())
            .decode()
            .rstrip("=")
        )
        assert generate_code_challenge(verifier) == expected

    def test_challenge_rfc7636_vector(self):
        """Appendix B of RFC 7636."""
        verifier = "dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk"
        assert (
            generate_code_challenge(verifier)
            == "E9Melhoa2OwvFrEMTJguCHaoeK1t8URWbuGJSstw-cM"
        )

    def test_pair_is_consistent(self):
        for _ in range(50):
            pair = generate_pkce()
            assert URL_SAFE.match(pair.challenge)
            assert "=" not in pair.challenge
            assert pair.challenge == generate_code_challenge(pair.verifier)

    def test_repr_hides_verifier(self):
        pair = generate_pkce()
        assert pair.verifier not in repr(pair)
