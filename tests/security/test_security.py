"""
Security and static analysis tests for the Account Tracker application.
"""
import pytest
import subprocess
import json
from models import LoginRecord


def _post_json(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type='application/json')


class TestSecurity:
    """A collection of security-focused tests."""

    def test_bandit_scan(self):
        """
        Runs the Bandit static analysis tool to find common security issues.
        Fails if any medium or high severity issues are found.
        """
        try:
            result = subprocess.run(
                ['bandit', '-r', 'app.py', 'models', 'routes', 'services', '-f', 'json', '-ll'],
                capture_output=True,
                text=True,
                check=False  # Don't raise an exception if bandit finds issues
            )
            report = json.loads(result.stdout)
            assert len(report['results']) == 0, f"Bandit found issues: {json.dumps(report['results'], indent=2)}"

        except (FileNotFoundError, json.JSONDecodeError) as e:
            pytest.fail(f"Bandit scan failed to run or produced invalid output: {e}")

    @pytest.mark.parametrize('username', ["' OR '1'='1", "admin'--", 'testuser" OR ""="'])
    def test_sql_injection_in_login(self, client, test_user, username):
        """
        The login endpoint must treat injection payloads as unknown accounts.
        """
        response = _post_json(client, '/api/login', {'username': username, 'password': 'anypassword'})

        assert response.status_code == 401
        assert response.get_json()['error'] == 'Invalid username or password'
        with client.session_transaction() as sess:
            assert 'user_id' not in sess

    def test_password_hash_never_returned(self, client, sample_user_data):
        response = _post_json(client, '/api/register', sample_user_data)
        assert b'password' not in response.data.lower()

        response = client.get('/api/user')
        assert b'password' not in response.data.lower()

    def test_login_errors_do_not_reveal_which_field_failed(self, client, test_user):
        unknown = _post_json(client, '/api/login', {'username': 'nobody', 'password': 'password123'})
        wrong = _post_json(client, '/api/login', {'username': 'testuser', 'password': 'wrong-password'})

        assert unknown.status_code == wrong.status_code == 401
        assert unknown.get_json() == wrong.get_json()

    def test_failed_login_does_not_store_password(self, client, test_user, db_session):
        _post_json(client, '/api/login', {'username': 'testuser', 'password': 'guessed-secret'})

        record = LoginRecord.query.one()
        assert 'guessed-secret' not in json.dumps(record.to_dict())

    def test_session_cookie_is_http_only(self, client, test_user):
        response = _post_json(client, '/api/login', {'username': 'testuser', 'password': 'password123'})
        cookie = response.headers.get('Set-Cookie', '')
        assert 'HttpOnly' in cookie
        assert 'SameSite=Lax' in cookie

    def test_users_cannot_read_admin_report(self, logged_in_client, admin_user):
        response = logged_in_client.get('/api/admin/recent-logins')
        assert response.status_code == 403
        assert response.get_json()['error'] == 'Unauthorized: Admin access required'
