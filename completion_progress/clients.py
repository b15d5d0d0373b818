"""
slumber client for the analytics learner engagement API.
"""

import logging

import requests
from django.conf import settings
from slumber import API, serialize

log = logging.getLogger(__name__)


class TokenAuth(requests.auth.AuthBase):
    """A requests auth class for DRF-style token-based authentication."""

    def __init__(self, token):
        self.token = token

    def __call__(self, r):
        r.headers['Authorization'] = f'Token {self.token}'
        return r


class LearnerAPIClient(API):
    """
    Client for per-learner engagement data of a course.
    """

    def __init__(self, timeout=5):
        """
        Constructor.
        """
        session = requests.session()
        session.timeout = timeout

        log.info('base url: %s', settings.ANALYTICS_API_CLIENT.get('url'))
        super().__init__(
            settings.ANALYTICS_API_CLIENT.get('url'),
            session=session,
            auth=TokenAuth(settings.ANALYTICS_API_CLIENT.get('token')),
            serializer=serialize.Serializer(default='json'),
        )

    def last_access(self, course_id):
        """
        Return a dictionary of username: date the learner was last active in the course.
        """
        engagement = self.courses(str(course_id)).user_engagement().get()
        return {row['username']: row.get('date_last_active') for row in engagement}
