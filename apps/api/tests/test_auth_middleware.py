"""Session resolution, account state and token adapter tests."""

from __future__ import annotations

import os
import sys
import types
import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from workbench.adapters.auth.base import AuthVerificationError
from workbench.adapters.auth.firebase_auth import FirebaseTokenVerifier
from workbench.adapters.auth.mock_auth import MockTokenVerifier
from workbench.core.config import Settings, get_settings
from workbench.errors import ErrorKind, PipelineFailure
from workbench.main import create_app
from workbench.repositories.memory import InMemoryStore
from workbench.routes.dependencies import get_token_verifier, get_workspace_type_service
from workbench.schemas.auth import AnonymousPrincipal, AuthenticatedPrincipal, Role
from workbench.schemas.workspace_type import CreateWorkspaceTypeRequest, WorkspaceType
from workbench.services.session import SessionResolver, check_account_state


class _CapturingWorkspaceTypeService:
    def __init__(self) -> None:
        self.calls: list[tuple[AuthenticatedPrincipal, CreateWorkspaceTypeRequest]] = []

    def create_workspace_type(
        self,
        principal: AuthenticatedPrincipal,
        request: CreateWorkspaceTypeRequest,
    ) -> WorkspaceType:
        self.calls.append((principal, request))
        return WorkspaceType(
            id=request.id,
            rev=0,
            created_by=principal.user_id,
            created_at="2026-10-19T00:00:00Z",
        )


class _SettingsEnvCase(unittest.TestCase):
    _env_keys = (
        "WORKBENCH_AUTH_PROVIDER",
        "WORKBENCH_ROOT_USER_ID",
        "WORKBENCH_FIREBASE_PROJECT_ID",
        "WORKBENCH_FIREBASE_AUDIENCE",
    )

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        os.environ["WORKBENCH_AUTH_PROVIDER"] = "mock"
        os.environ["WORKBENCH_ROOT_USER_ID"] = "root-admin"
        os.environ["WORKBENCH_FIREBASE_PROJECT_ID"] = "test-project"
        os.environ["WORKBENCH_FIREBASE_AUDIENCE"] = "test-audience"
        get_settings.cache_clear()

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()


class AuthApiTests(_SettingsEnvCase):
    def test_root_account_is_seeded_from_settings(self) -> None:
        app = create_app()

        account = app.state.store.get_account("root-admin")

        self.assertIsNotNone(account)
        assert account is not None
        self.assertEqual(account.role, Role.ADMIN)
        self.assertTrue(account.active)

    def test_non_bearer_scheme_returns_401_and_no_side_effect(self) -> None:
        app = create_app()
        client = TestClient(app)

        response = client.post(
            "/api/v1/workspace-types",
            headers={"Authorization": "Basic cm9vdDpwYXNz"},
            json={"id": "workspace-test-basic"},
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["code"], "unauthorized")
        self.assertEqual(response.json()["details"]["error_kind"], "AuthenticationError")
        self.assertEqual(app.state.store.resource_write_count, 0)

    def test_invalid_bearer_token_returns_401(self) -> None:
        app = create_app()
        client = TestClient(app)

        response = client.post(
            "/api/v1/workspace-types",
            headers={"Authorization": "Bearer not-a-valid-token"},
            json={"id": "workspace-test-invalid-token"},
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["code"], "unauthorized")
        self.assertEqual(app.state.store.resource_write_count, 0)

    def test_expired_bearer_token_returns_401(self) -> None:
        app = create_app()
        client = TestClient(app)

        response = client.post(
            "/api/v1/workspace-types",
            headers={"Authorization": "Bearer test:root-admin:1"},
            json={"id": "workspace-test-expired"},
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Bearer token expired")
        self.assertEqual(app.state.store.resource_write_count, 0)

    def test_token_for_unknown_account_returns_401(self) -> None:
        app = create_app()
        client = TestClient(app)

        response = client.post(
            "/api/v1/workspace-types",
            headers={"Authorization": "Bearer test:ghost"},
            json={"id": "workspace-test-ghost"},
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["details"]["error_kind"], "AuthenticationError")

    def test_empty_authorization_header_is_not_treated_as_anonymous(self) -> None:
        app = create_app()
        client = TestClient(app)

        response = client.post(
            "/api/v1/workspace-types",
            headers={"Authorization": "Bearer "},
            json={"id": "workspace-test-empty"},
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["code"], "unauthorized")

    def test_valid_bearer_token_resolves_account_for_downstream_handler(self) -> None:
        app = create_app()
        client = TestClient(app)

        capturing_service = _CapturingWorkspaceTypeService()
        app.dependency_overrides[get_workspace_type_service] = lambda: capturing_service

        response = client.post(
            "/api/v1/workspace-types",
            headers={"Authorization": "Bearer test:root-admin"},
            json={"id": "workspace-test-captured", "name": "Captured"},
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(len(capturing_service.calls), 1)
        principal, request = capturing_service.calls[0]
        self.assertEqual(principal.user_id, "root-admin")
        self.assertEqual(principal.role, Role.ADMIN)
        self.assertEqual(request.id, "workspace-test-captured")
        self.assertEqual(request.name, "Captured")

    def test_rejections_log_hashed_identifiers_only(self) -> None:
        app = create_app()
        client = TestClient(app)
        app.state.store.create_account(uid="sensitive-user", role=Role.STANDARD_USER)

        with self.assertLogs("workbench.services.pipeline", level="WARNING") as logs:
            response = client.post(
                "/api/v1/workspace-types",
                headers={
                    "Authorization": "Bearer test:sensitive-user",
                    "X-Correlation-Id": "corr-sensitive-1",
                },
                json={"id": "workspace-test-secret-value"},
            )

        self.assertEqual(response.status_code, 403)
        output = "\n".join(logs.output)
        self.assertIn("pipeline.rejected", output)
        self.assertIn("stage=authorize", output)
        self.assertIn("error_kind=AuthorizationError", output)
        self.assertNotIn("sensitive-user", output)
        self.assertNotIn("corr-sensitive-1", output)
        self.assertNotIn("workspace-test-secret-value", output)


class SessionResolverUnitTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryStore()
        self.store.create_account(uid="admin-1", role=Role.ADMIN)
        self.resolver = SessionResolver(verifier=MockTokenVerifier(), accounts=self.store)

    def test_absent_credentials_resolve_to_anonymous(self) -> None:
        self.assertEqual(self.resolver.resolve(None), AnonymousPrincipal())

    def test_principal_is_populated_from_account_store(self) -> None:
        principal = self.resolver.resolve("Bearer test:admin-1")

        self.assertIsInstance(principal, AuthenticatedPrincipal)
        assert isinstance(principal, AuthenticatedPrincipal)
        self.assertEqual(principal.user_id, "admin-1")
        self.assertEqual(principal.role, Role.ADMIN)
        self.assertTrue(principal.active)

    def test_scheme_is_case_insensitive(self) -> None:
        principal = self.resolver.resolve("bearer test:admin-1")

        self.assertIsInstance(principal, AuthenticatedPrincipal)

    def test_principal_is_a_snapshot(self) -> None:
        principal = self.resolver.resolve("Bearer test:admin-1")
        self.store.set_account_active("admin-1", False)

        assert isinstance(principal, AuthenticatedPrincipal)
        self.assertTrue(principal.active)
        with self.assertRaises(Exception):
            principal.active = False  # type: ignore[misc]

    def test_malformed_credentials_fail_with_authentication_error(self) -> None:
        for credentials in ("", "Bearer", "Token test:admin-1", "Bearer invalid"):
            with self.subTest(credentials=credentials):
                outcome = self.resolver.resolve(credentials)
                self.assertIsInstance(outcome, PipelineFailure)
                assert isinstance(outcome, PipelineFailure)
                self.assertEqual(outcome.kind, ErrorKind.AUTHENTICATION)

    def test_inactive_account_is_rejected_regardless_of_role(self) -> None:
        for role in Role:
            with self.subTest(role=role):
                principal = AuthenticatedPrincipal(user_id="user-1", role=role, active=False)
                outcome = check_account_state(principal)
                self.assertIsInstance(outcome, PipelineFailure)
                assert isinstance(outcome, PipelineFailure)
                self.assertEqual(outcome.kind, ErrorKind.INACTIVE_ACCOUNT)

    def test_active_and_anonymous_principals_pass_account_state_check(self) -> None:
        active = AuthenticatedPrincipal(user_id="user-1", role=Role.STANDARD_USER, active=True)

        self.assertIs(check_account_state(active), active)
        anonymous = AnonymousPrincipal()
        self.assertIs(check_account_state(anonymous), anonymous)


class AuthAdapterUnitTests(unittest.TestCase):
    def test_mock_token_verifier_extracts_user_id(self) -> None:
        verifier = MockTokenVerifier()

        claims = verifier.verify_token("test:user-999")

        self.assertEqual(claims.user_id, "user-999")

    def test_mock_token_verifier_honours_expiry(self) -> None:
        verifier = MockTokenVerifier(clock=lambda: 1_000.0)

        self.assertEqual(verifier.verify_token("test:user-1:1001").user_id, "user-1")
        with self.assertRaises(AuthVerificationError) as context:
            verifier.verify_token("test:user-1:1000")
        self.assertEqual(str(context.exception), "Bearer token expired")

    def test_mock_token_verifier_rejects_invalid_token(self) -> None:
        verifier = MockTokenVerifier()

        for token in ("invalid", "test:", "test:user-1:soon", "prod:user-1"):
            with self.subTest(token=token):
                with self.assertRaises(AuthVerificationError):
                    verifier.verify_token(token)

    def test_dependency_selects_firebase_verifier(self) -> None:
        settings = Settings(
            auth_provider="firebase",
            firebase_project_id="project-a",
            firebase_audience="aud-a",
        )

        verifier = get_token_verifier(settings)

        self.assertIsInstance(verifier, FirebaseTokenVerifier)

    def test_dependency_selects_mock_verifier(self) -> None:
        verifier = get_token_verifier(Settings(auth_provider="mock"))

        self.assertIsInstance(verifier, MockTokenVerifier)


class FirebaseVerifierUnitTests(unittest.TestCase):
    @staticmethod
    def _fake_firebase_modules(decoded_token: dict[str, str]) -> dict[str, types.ModuleType]:
        fake_admin = types.ModuleType("firebase_admin")
        fake_auth = types.ModuleType("firebase_admin.auth")

        fake_admin._apps = []

        class ExpiredIdTokenError(Exception):
            pass

        def initialize_app() -> object:
            app_handle = object()
            fake_admin._apps.append(app_handle)
            return app_handle

        def verify_id_token(token: str, check_revoked: bool = True) -> dict[str, str]:
            if token == "expired-jwt":
                raise ExpiredIdTokenError("token expired")
            if token != "valid-jwt":
                raise ValueError("invalid token")
            if not check_revoked:
                raise ValueError("must validate revoked tokens")
            return decoded_token

        fake_admin.initialize_app = initialize_app
        fake_admin.auth = fake_auth
        fake_auth.verify_id_token = verify_id_token
        fake_auth.ExpiredIdTokenError = ExpiredIdTokenError

        return {
            "firebase_admin": fake_admin,
            "firebase_admin.auth": fake_auth,
        }

    def test_firebase_verifier_extracts_user_id(self) -> None:
        fake_modules = self._fake_firebase_modules(
            {
                "uid": "firebase-user-1",
                "aud": "aud-a",
                "iss": "https://securetoken.google.com/project-a",
                "role": "admin",
            }
        )

        with patch.dict(sys.modules, fake_modules):
            verifier = FirebaseTokenVerifier(project_id="project-a", audience="aud-a")
            claims = verifier.verify_token("valid-jwt")

        self.assertEqual(claims.user_id, "firebase-user-1")
        self.assertNotIn("role", claims.model_dump())

    def test_firebase_verifier_rejects_invalid_audience(self) -> None:
        fake_modules = self._fake_firebase_modules(
            {
                "uid": "firebase-user-1",
                "aud": "unexpected-aud",
                "iss": "https://securetoken.google.com/project-a",
            }
        )

        with patch.dict(sys.modules, fake_modules):
            verifier = FirebaseTokenVerifier(project_id="project-a", audience="aud-a")
            with self.assertRaises(AuthVerificationError):
                verifier.verify_token("valid-jwt")

    def test_firebase_verifier_reports_expired_tokens(self) -> None:
        fake_modules = self._fake_firebase_modules({"uid": "firebase-user-1"})

        with patch.dict(sys.modules, fake_modules):
            verifier = FirebaseTokenVerifier(project_id=None, audience=None)
            with self.assertRaises(AuthVerificationError) as context:
                verifier.verify_token("expired-jwt")

        self.assertEqual(str(context.exception), "Bearer token expired")


if __name__ == "__main__":
    unittest.main()
