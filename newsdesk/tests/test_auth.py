import importlib.util
import time
import unittest
from pathlib import Path

import jwt

from newsdesk.auth import TokenClaims, TokenVerifier, provision_identity
from newsdesk.db import InMemoryDbClient
from newsdesk.errors import AuthenticationRequired, TransportFailure
from newsdesk.identity import Role

SECRET = "test-secret-with-enough-length-for-hs256"


class FlakyRoleDbClient(InMemoryDbClient):
    """The first role assignment fails after the profile was written."""

    def __init__(self):
        super().__init__()
        self.failures = 1

    def add_role(self, user_id, role):
        if self.failures:
            self.failures -= 1
            raise TransportFailure("connection reset")
        super().add_role(user_id, role)


class TokenVerifierTests(unittest.TestCase):
    def setUp(self):
        self.verifier = TokenVerifier(SECRET)

    def test_round_trip_claims(self):
        token = self.verifier.issue("user-1", "ann@example.com", "Ann")
        claims = self.verifier.verify(token)
        self.assertEqual(claims, TokenClaims("user-1", "ann@example.com", "Ann"))

    def test_expired_token(self):
        token = self.verifier.issue("user-1", "ann@example.com", ttl=-10)
        with self.assertRaises(AuthenticationRequired) as ctx:
            self.verifier.verify(token)
        self.assertEqual(ctx.exception.message, "Session expired")

    def test_wrong_secret_or_audience(self):
        forged = TokenVerifier("another-secret-of-sufficient-length").issue("user-1", "x@example.com")
        with self.assertRaises(AuthenticationRequired):
            self.verifier.verify(forged)

        other_audience = jwt.encode(
            {"sub": "user-1", "aud": "service_role", "exp": int(time.time()) + 60},
            SECRET,
            algorithm="HS256",
        )
        with self.assertRaises(AuthenticationRequired):
            self.verifier.verify(other_audience)

    def test_garbage_token(self):
        with self.assertRaises(AuthenticationRequired):
            self.verifier.verify("not-a-token")


class ProvisionIdentityTests(unittest.TestCase):
    def test_first_sign_in_creates_user_profile(self):
        db = InMemoryDbClient()
        identity = provision_identity(db, TokenClaims("user-1", "ann@example.com", "Ann"))
        self.assertEqual(identity.roles, frozenset({Role.USER}))
        self.assertFalse(identity.is_admin)
        self.assertEqual(db.get_profile("user-1").full_name, "Ann")

    def test_listed_email_becomes_admin(self):
        db = InMemoryDbClient()
        identity = provision_identity(
            db,
            TokenClaims("user-1", "Editor@Example.com"),
            admin_emails=["editor@example.com"],
        )
        self.assertTrue(identity.is_admin)

    def test_existing_profile_keeps_roles(self):
        db = InMemoryDbClient()
        provision_identity(db, TokenClaims("user-1", "ann@example.com"))
        db.add_role("user-1", Role.ADMIN)
        identity = provision_identity(
            db, TokenClaims("user-1", "ann@example.com"), admin_emails=[]
        )
        self.assertEqual(identity.roles, frozenset({Role.USER, Role.ADMIN}))
        self.assertEqual(len(db.profiles), 1)

    def test_roleless_profile_gets_role_on_next_sign_in(self):
        db = FlakyRoleDbClient()
        claims = TokenClaims("user-1", "editor@example.com", "Ed")
        with self.assertRaises(TransportFailure):
            provision_identity(db, claims, admin_emails=["editor@example.com"])
        self.assertIsNotNone(db.get_profile("user-1"))
        self.assertEqual(db.get_roles("user-1"), set())

        identity = provision_identity(db, claims, admin_emails=["editor@example.com"])
        self.assertEqual(identity.roles, frozenset({Role.ADMIN}))


def _load_grant_role():
    path = Path(__file__).resolve().parents[2] / "scripts" / "grant_role.py"
    spec = importlib.util.spec_from_file_location("grant_role", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class GrantRoleScriptTests(unittest.TestCase):
    def test_grant_and_revoke_by_email(self):
        grant_role = _load_grant_role()
        db = InMemoryDbClient()
        provision_identity(db, TokenClaims("user-1", "ann@example.com"))

        self.assertTrue(grant_role.apply_role(db, "ANN@example.com", Role.ADMIN, revoke=False))
        self.assertIn(Role.ADMIN, db.get_roles("user-1"))
        self.assertTrue(grant_role.apply_role(db, "user-1", Role.ADMIN, revoke=True))
        self.assertNotIn(Role.ADMIN, db.get_roles("user-1"))
        self.assertFalse(grant_role.apply_role(db, "nobody@example.com", Role.ADMIN, revoke=False))


if __name__ == "__main__":
    unittest.main()
