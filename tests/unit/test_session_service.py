"""
Unit tests for the admin session check.

Run: pytest tests/unit/test_session_service.py -v
"""

from services.session_service import AdminSession, StaticSession


class TestAdminSession:

    def test_matching_token(self):
        assert AdminSession("s3cret", expected_token="s3cret").is_admin() is True

    def test_wrong_token(self):
        assert AdminSession("guess", expected_token="s3cret").is_admin() is False

    def test_missing_token(self):
        assert AdminSession(None, expected_token="s3cret").is_admin() is False

    def test_unconfigured_token_denies_everyone(self):
        """With no admin token configured nobody is admin."""
        assert AdminSession("", expected_token="").is_admin() is False
        assert AdminSession("anything", expected_token="").is_admin() is False


class TestStaticSession:

    def test_fixed_answer(self):
        assert StaticSession(True).is_admin() is True
        assert StaticSession(False).is_admin() is False
