"""
Property-based tests for key functionalities using Hypothesis.
"""
from datetime import datetime, timedelta

from hypothesis import assume, given, strategies as st, settings, HealthCheck

from app import db
from models import LoginRecord
from services.user_agent_service import classify_user_agent

# Increase deadline for database-intensive tests
settings.register_profile("db", deadline=timedelta(milliseconds=1000))
settings.load_profile("db")

# Arbitrary user-agent fragments that cannot spell out a Firefox marker,
# which outranks every other browser rule
fragment_strategy = st.text(
    alphabet=st.characters(min_codepoint=32, max_codepoint=126),
    max_size=40,
).filter(lambda s: 'Firefox' not in s)

ip_strategy = st.sampled_from(['', '10.0.0.1', '10.0.0.2', '192.168.1.1', '::1', None])


class TestPropertyBased:
    """A collection of property-based tests."""

    @given(prefix=fragment_strategy, suffix=fragment_strategy)
    def test_chrome_without_edge_marker_is_chrome(self, prefix, suffix):
        user_agent = f'{prefix}Chrome/120.0{suffix}'
        assume('Edg' not in user_agent and 'Firefox' not in user_agent)
        assert classify_user_agent(user_agent).browser == 'Chrome'

    @given(prefix=fragment_strategy, middle=fragment_strategy, suffix=fragment_strategy)
    def test_chrome_with_edge_marker_is_edge(self, prefix, middle, suffix):
        user_agent = f'{prefix}Chrome/120.0{middle}Edg/120.0{suffix}'
        assume('Firefox' not in user_agent)
        assert classify_user_agent(user_agent).browser == 'Edge'

    @given(user_agent=st.one_of(st.none(), st.text(max_size=300)))
    def test_classifier_always_returns_labels(self, user_agent):
        info = classify_user_agent(user_agent)
        assert all(isinstance(label, str) and label for label in info)

    @settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
    @given(ips=st.lists(ip_strategy, max_size=12))
    def test_unique_ips_have_no_duplicates_or_blanks(self, app, services, test_user, ips):
        """
        Whatever mix of repeated, empty and missing addresses a user logs in
        from, the statistics list each real address exactly once.
        """
        with app.app_context():
            LoginRecord.query.filter_by(user_id=test_user.id).delete()
            db.session.commit()

            base = datetime(2024, 1, 1)
            for i, ip in enumerate(ips):
                db.session.add(LoginRecord(user_id=test_user.id, ip_address=ip,
                                           timestamp=base + timedelta(seconds=i)))
            db.session.commit()

            stats = services.stats.get_user_stats(test_user.id)

            assert len(stats['uniqueIps']) == len(set(stats['uniqueIps']))
            assert '' not in stats['uniqueIps']
            assert None not in stats['uniqueIps']
            assert set(stats['uniqueIps']) == {ip for ip in ips if ip}
            assert stats['uniqueIpCount'] == len(stats['uniqueIps'])
            assert stats['loginCount'] == len(ips)
