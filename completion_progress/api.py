"""
Completion progress aggregation API.
"""

import logging
from datetime import datetime, timezone

from django.apps import apps
from django.contrib.auth import get_user_model
from opaque_keys.edx.keys import CourseKey, UsageKey

from .constants import (
    COMPLETED_STATES,
    COMPLETION_COMPLETE,
    COMPLETION_COMPLETE_FAIL,
    COMPLETION_COMPLETE_PASS,
    COMPLETION_INCOMPLETE,
    STAFF_ROLES
)
from .defaults import plugin_setting
from .models import BlockConfig

__all__ = ('CompletionProgress', 'get_enrollments', 'is_course_staff', 'mark_complete')

log = logging.getLogger(__name__)

# Undated activities sort after dated ones when ordering by time.
_NO_DUE_DATE = datetime.max.replace(tzinfo=timezone.utc)


def _course_key(course_id):
    if not isinstance(course_id, CourseKey):
        course_id = CourseKey.from_string(course_id)
    return course_id


def get_enrollments(course_id, active_only=False, roles=None):
    """
    Return iterator of learner enrollment dictionaries, ordered by username.

    {
        'user': user object
        'user_id': user id
        'username': username
        'full_name': user's full name
        'enrolled': bool
        'track': enrollment mode
    }

    Course staff are left out unless ``roles`` asks for them.
    """
    course_id = str(course_id)
    enrollments = apps.get_model('student', 'CourseEnrollment').objects.filter(
        course_id=course_id).select_related('user', 'user__profile').order_by('user__username')
    access_roles = apps.get_model('student', 'CourseAccessRole').objects.filter(course_id=course_id)
    if roles:
        enrollments = enrollments.filter(
            user__id__in=access_roles.filter(role__in=roles).values('user_id'))
    else:
        enrollments = enrollments.exclude(
            user__id__in=access_roles.filter(role__in=STAFF_ROLES).values('user_id'))
    if active_only:
        enrollments = enrollments.filter(is_active=True)
    for enrollment in enrollments:
        profile = getattr(enrollment.user, 'profile', None)
        yield {
            'user': enrollment.user,
            'user_id': enrollment.user.id,
            'username': enrollment.user.username,
            'full_name': profile.name if profile else enrollment.user.username,
            'enrolled': enrollment.is_active,
            'track': enrollment.mode,
        }


def is_enrolled(user, course_id):
    """
    Return whether ``user`` holds an active enrollment in the course.
    """
    return apps.get_model('student', 'CourseEnrollment').objects.filter(
        user=user, course_id=str(course_id), is_active=True).exists()


def is_course_staff(user, course_id):
    """
    Return whether ``user`` may see every learner's progress in the course.
    """
    if user.is_staff:
        return True
    return apps.get_model('student', 'CourseAccessRole').objects.filter(
        user=user, course_id=str(course_id), role__in=STAFF_ROLES).exists()


class CompletionProgress:
    """
    Completion states of a course's activities, for one learner or for every learner.

    Built per request::

        progress = CompletionProgress(course_id).for_user(user).for_block_instance(block)
        progress.get_completions()
    """

    def __init__(self, course_id):
        self.course_key = _course_key(course_id)
        self.user = None
        self.overview = False
        self.block_instance = None
        self._activities = None
        self._users = None
        self._completions = {}
        self._grades = {}
        self._loaded_users = set()

    @property
    def config(self):
        if self.block_instance is None:
            return BlockConfig()
        return self.block_instance.config

    def for_user(self, user):
        """
        Scope the progress to a single learner.
        """
        self.user = user
        self.overview = False
        self._users = None
        return self

    def for_overview(self):
        """
        Scope the progress to every learner enrolled in the course.
        """
        self.user = None
        self.overview = True
        self._users = None
        return self

    def for_block_instance(self, block_instance):
        """
        Use the configuration of ``block_instance`` to choose and order activities.
        """
        self.block_instance = block_instance
        self._activities = None
        return self

    def get_activities(self):
        """
        Return the activities included by the block, in display order.
        """
        if self._activities is None:
            modules = apps.get_model('courseware', 'CourseModule').objects.filter(
                course_id=self.course_key,
            ).exclude(completion_mode='none')
            activities = list(modules)
            if self.config.activitiesincluded == 'selectedactivities':
                selected = {str(key) for key in self.config.selectactivities}
                activities = [activity for activity in activities if str(activity.usage_key) in selected]
            if self.config.orderby == 'orderbytime':
                activities.sort(key=lambda activity: (activity.due or _NO_DUE_DATE, activity.position))
            else:
                activities.sort(key=lambda activity: activity.position)
            self._activities = activities
        return self._activities

    def get_users(self):
        """
        Return the enrollment dictionaries of the learners in scope.
        """
        if self._users is None:
            if self.overview:
                self._users = list(get_enrollments(
                    self.course_key, active_only=not plugin_setting('showinactive')))
            elif self.user is not None:
                self._users = [{
                    'user': self.user,
                    'user_id': self.user.id,
                    'username': self.user.username,
                    'full_name': self.user.username,
                    'enrolled': True,
                    'track': None,
                }]
            else:
                self._users = []
        return self._users

    def _load(self, user_ids):
        """
        Fetch completion and grade records for ``user_ids`` in bulk.
        """
        user_ids = set(user_ids) - self._loaded_users
        if not user_ids:
            return
        block_keys = [activity.usage_key for activity in self.get_activities()]
        for user_id in user_ids:
            self._completions[user_id] = {}
            self._grades[user_id] = {}
        completions = apps.get_model('completion', 'BlockCompletion').objects.filter(
            context_key=self.course_key,
            block_key__in=block_keys,
            user_id__in=user_ids,
        )
        for record in completions:
            self._completions[record.user_id][str(record.block_key)] = record.completion
        grades = apps.get_model('courseware', 'StudentModule').objects.filter(
            course_id=self.course_key,
            module_state_key__in=block_keys,
            student_id__in=user_ids,
        )
        for record in grades:
            self._grades[record.student_id][str(record.module_state_key)] = record
        self._loaded_users |= user_ids
        log.debug('Loaded %d completion and %d grade records for %d users in %s',
                  len(completions), len(grades), len(user_ids), self.course_key)

    def _user_id(self, user_id):
        if user_id is not None:
            return user_id
        if self.user is None:
            raise ValueError('A user is required outside single-user mode')
        return self.user.id

    def _preload(self, user_id):
        if self.overview:
            self._load([enrollment['user_id'] for enrollment in self.get_users()] + [user_id])
        else:
            self._load([user_id])

    def get_visible_activities(self, user_id=None):
        """
        Return the included activities the learner can see.

        Hidden activities, and activities whose grade is excluded for the learner, are left out.
        """
        user_id = self._user_id(user_id)
        self._preload(user_id)
        grades = self._grades[user_id]
        visible = []
        for activity in self.get_activities():
            if not activity.visible:
                continue
            grade = grades.get(str(activity.usage_key))
            if grade is not None and grade.excluded:
                continue
            visible.append(activity)
        return visible

    def has_visible_activities(self, user_id=None):
        return bool(self.get_visible_activities(user_id))

    def _state(self, activity, user_id):
        key = str(activity.usage_key)
        grade = self._grades[user_id].get(key)
        if activity.completion_pass_grade is not None and grade is not None and grade.grade is not None:
            if grade.max_grade and grade.grade / grade.max_grade >= activity.completion_pass_grade:
                return COMPLETION_COMPLETE_PASS
            return COMPLETION_COMPLETE_FAIL
        if self._completions[user_id].get(key, 0.0) >= 1.0:
            return COMPLETION_COMPLETE
        return COMPLETION_INCOMPLETE

    def get_completions(self, user_id=None):
        """
        Return a dictionary of activity usage key: completion state for the learner.
        """
        user_id = self._user_id(user_id)
        return {
            str(activity.usage_key): self._state(activity, user_id)
            for activity in self.get_visible_activities(user_id)
        }

    def get_completed_count(self, user_id=None):
        return sum(1 for state in self.get_completions(user_id).values() if state in COMPLETED_STATES)

    def get_percentage(self, user_id=None):
        """
        Return the integer percentage of visible activities the learner completed.

        Returns None when the learner has no visible activities.
        """
        completions = self.get_completions(user_id)
        if not completions:
            return None
        completed = sum(1 for state in completions.values() if state in COMPLETED_STATES)
        return int(round(100 * completed / len(completions)))


def mark_complete(usage_key, user_ids):
    """
    Mark a manually-completed activity complete for each of ``user_ids``.

    Returns the number of learners updated.
    """
    if not isinstance(usage_key, UsageKey):
        usage_key = UsageKey.from_string(usage_key)
    activity = apps.get_model('courseware', 'CourseModule').objects.get(usage_key=usage_key)
    if activity.completion_mode != 'manual':
        raise ValueError(f'{usage_key} is not completed manually')
    block_completions = apps.get_model('completion', 'BlockCompletion').objects
    count = 0
    for user in get_user_model().objects.filter(id__in=user_ids):
        block_completions.submit_completion(user, usage_key, 1.0)
        count += 1
    log.info('Marked %s complete for %d learners', usage_key, count)
    return count
