"""Wiring of the service layer.

The services are built once per application around the database handle and
stored on ``app.extensions``; request handlers fetch them with
``get_services()``.
"""
from dataclasses import dataclass

from flask import current_app

from services.activity_service import ActivityService
from services.identity_service import IdentityService
from services.login_history_service import LoginHistoryService
from services.stats_service import StatsService
from services.user_service import UserService


@dataclass
class Services:
    users: UserService
    logins: LoginHistoryService
    activity: ActivityService
    stats: StatsService
    identity: IdentityService


def build_services(db) -> Services:
    users = UserService(db)
    return Services(
        users=users,
        logins=LoginHistoryService(db, users),
        activity=ActivityService(db),
        stats=StatsService(db),
        identity=IdentityService(db, users),
    )


def init_services(app, db) -> Services:
    services = build_services(db)
    app.extensions['services'] = services
    return services


def get_services() -> Services:
    return current_app.extensions['services']
