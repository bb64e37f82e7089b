from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.gis.geos import Point
from rest_framework import status
from rest_framework.test import APITestCase

from posts.models import Post

User = get_user_model()


class TestAuth(APITestCase):
    def register(self, **overrides):
        payload = {
            "username": "dana",
            "email": "dana@example.org",
            "password": "s3cure-Passw0rd",
            "password2": "s3cure-Passw0rd",
            "name": "Dana",
        }
        payload.update(overrides)
        return self.client.post("/api/auth/register", payload, format="json")

    def test_register_returns_tokens_and_citizen_role(self):
        response = self.register()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["user"]["role"], "citizen")
        self.assertEqual(response.data["user"]["name"], "Dana")
        self.assertIn("access", response.data["tokens"])
        self.assertIn("refresh", response.data["tokens"])

    def test_register_rejects_mismatched_passwords(self):
        response = self.register(password2="something-else-1")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("password", response.data["error"])
        self.assertFalse(User.objects.exists())

    def test_login_by_email_and_bearer_token(self):
        self.register()
        # Promotion happens in the admin
        User.objects.filter(username="dana").update(role=User.ROLE_MUNICIPAL, department="Parks")

        login = self.client.post(
            "/api/auth/login",
            {"email": "dana@example.org", "password": "s3cure-Passw0rd"},
            format="json",
        )
        self.assertEqual(login.status_code, status.HTTP_200_OK)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['tokens']['access']}")
        me = self.client.get("/api/auth/me")

        self.assertEqual(me.status_code, status.HTTP_200_OK)
        self.assertEqual(me.data["role"], "municipal")
        self.assertTrue(me.data["is_municipal"])
        self.assertEqual(me.data["department"], "Parks")

    def test_bad_credentials(self):
        self.register()
        response = self.client.post(
            "/api/auth/login", {"username": "dana", "password": "wrong"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data, {"message": "Invalid credentials"})

    def test_invalid_token_is_unauthorized(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")
        response = self.client.get("/api/auth/me")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIn("message", response.data)

    def test_me_requires_token(self):
        response = self.client.get("/api/auth/me")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_register_cannot_claim_municipal_role(self):
        response = self.register(role="municipal", department="Parks")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["user"]["role"], "citizen")
        self.assertFalse(response.data["user"]["is_municipal"])
        self.assertEqual(response.data["user"]["department"], "")

        owner = User.objects.create_user(username="owner", password="pw-owner-123")
        post = Post.objects.create(
            author=owner, title="Flooded underpass", description="Knee deep",
            category="water", location=Point(-75.0, 40.0, srid=4326),
        )
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['tokens']['access']}")
        update = self.client.put(f"/api/posts/{post.id}", {"status": "resolved"}, format="json")

        self.assertEqual(update.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(update.data, {"message": "Not authorized"})
        post.refresh_from_db()
        self.assertEqual(post.status, "reported")
