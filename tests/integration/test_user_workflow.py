"""
Integration tests for complete user workflows through the JSON API.
"""
import json
from app import db
from models import User, LoginRecord, UserActivity
from tests.conftest import CHROME_WINDOWS_UA

IPHONE_SAFARI_UA = (
    'Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 '
    '(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1'
)


def _post_json(client, url, payload, **kwargs):
    return client.post(url, data=json.dumps(payload), content_type='application/json', **kwargs)


class TestUserRegistrationAndLogin:
    """Tests the full registration and login flow."""

    def test_register_logout_login_then_stats(self, client):
        """A fresh account logs in once and sees that login in its statistics."""
        response = _post_json(client, '/api/register', {
            'username': 'alice', 'password': 'wonderland', 'email': 'alice@example.com',
        })
        assert response.status_code == 201
        user_id = response.get_json()['id']

        assert client.post('/api/logout').status_code == 200

        response = _post_json(client, '/api/login', {'username': 'alice', 'password': 'wonderland'},
                              headers={'User-Agent': CHROME_WINDOWS_UA},
                              environ_base={'REMOTE_ADDR': '1.2.3.4'})
        assert response.status_code == 200

        stats = client.get('/api/user/stats').get_json()
        assert stats['userId'] == user_id
        assert stats['loginCount'] == 1
        assert stats['uniqueIps'] == ['1.2.3.4']
        assert stats['lastFailedLoginAt'] is None
        # register and logout precede the stats request
        assert stats['activityCount'] == 2

        record = db.session.execute(
            db.select(LoginRecord).filter_by(user_id=user_id)
        ).scalar_one()
        assert record.browser == 'Chrome'
        assert record.os == 'Windows'
        assert record.device == 'Desktop'
        assert record.login_method.value == 'password'

        activity_types = [a['activityType'] for a in client.get('/api/user/activity').get_json()]
        assert activity_types == ['view_stats', 'logout', 'register']

    def test_failed_then_successful_login(self, client, test_user):
        _post_json(client, '/api/login', {'username': 'testuser', 'password': 'nope'},
                   environ_base={'REMOTE_ADDR': '5.6.7.8'})
        _post_json(client, '/api/login', {'username': 'testuser', 'password': 'password123'},
                   headers={'User-Agent': IPHONE_SAFARI_UA},
                   environ_base={'REMOTE_ADDR': '1.2.3.4'})

        history = client.get('/api/user/login-history').get_json()
        assert [entry['success'] for entry in history] == [True, False]
        assert history[0]['device'] == 'iPhone'
        assert history[0]['browser'] == 'Safari'
        assert history[1]['failureReason'] == 'invalid_password'

        stats = client.get('/api/user/stats').get_json()
        assert stats['loginCount'] == 2
        assert stats['lastFailedLoginAt'] == history[1]['timestamp']
        assert sorted(stats['uniqueIps']) == ['1.2.3.4', '5.6.7.8']

    def test_remember_me_makes_session_permanent(self, client, test_user):
        _post_json(client, '/api/login', {'username': 'testuser', 'password': 'password123',
                                          'rememberMe': True})
        with client.session_transaction() as sess:
            assert sess.permanent is True

    def test_logout_ends_session(self, client, test_user):
        _post_json(client, '/api/login', {'username': 'testuser', 'password': 'password123'})
        client.post('/api/logout')

        assert client.get('/api/user/stats').status_code == 401
        assert db.session.execute(
            db.select(UserActivity).filter_by(user_id=test_user.id, activity_type='logout')
        ).scalar_one() is not None


class TestAccountLifecycle:

    def test_profile_changes_are_tracked(self, client, test_user):
        _post_json(client, '/api/login', {'username': 'testuser', 'password': 'password123'})

        response = client.patch('/api/user', data=json.dumps({
            'email': 'New@Example.com', 'password': 'changed-password',
        }), content_type='application/json')
        assert response.status_code == 200
        assert response.get_json()['email'] == 'new@example.com'

        client.post('/api/logout')
        response = _post_json(client, '/api/login', {'username': 'new@example.com',
                                                     'password': 'changed-password'})
        assert response.status_code == 200

        activity = db.session.execute(
            db.select(UserActivity).filter_by(activity_type='profile_update')
        ).scalar_one()
        assert activity.details == {'fields': ['email', 'password']}

    def test_deleting_user_removes_history(self, client, services, test_user):
        _post_json(client, '/api/login', {'username': 'testuser', 'password': 'password123'})
        client.get('/api/user/stats')

        assert services.users.delete_user(test_user.id) is not None

        assert db.session.execute(db.select(db.func.count(LoginRecord.id))).scalar() == 0
        assert db.session.execute(db.select(db.func.count(UserActivity.id))).scalar() == 0
        assert db.session.get(User, test_user.id) is None
