#!/usr/bin/env python
"""
Tests for the `edx-completion-progress` api module.
"""

from datetime import datetime, timedelta, timezone

import ddt
from completion.models import BlockCompletion
from django.test import override_settings

from completion_progress import api
from completion_progress.constants import (
    COMPLETION_COMPLETE,
    COMPLETION_COMPLETE_FAIL,
    COMPLETION_COMPLETE_PASS,
    COMPLETION_INCOMPLETE
)

from .base import BaseTests


class TestCompletions(BaseTests):
    """
    Tests of the completion states collected for one learner.
    """

    def test_grade_excluded(self):
        block = self._make_block()
        assign = self._make_activity('assign1')

        # Set student 1's grade to be excluded.
        self._grade(assign, self.students[1], excluded=True)

        # Student 0 ought to see the activity.
        progress = api.CompletionProgress(self.course_id).for_user(self.students[0]).for_block_instance(block)
        assert progress.get_completions() == {str(assign.usage_key): COMPLETION_INCOMPLETE}

        # Student 1 ought not see the activity.
        progress = api.CompletionProgress(self.course_id).for_user(self.students[1]).for_block_instance(block)
        assert progress.get_completions() == {}

    def test_selected_activities(self):
        first = self._make_activity('assign1', position=1)
        second = self._make_activity('assign2', position=2)
        block = self._make_block(activitiesincluded='selectedactivities', selectactivities=[str(second.usage_key)])

        progress = api.CompletionProgress(self.course_key).for_user(self.students[0]).for_block_instance(block)
        completions = progress.get_completions()
        assert str(first.usage_key) not in completions
        assert list(completions) == [str(second.usage_key)]

    def test_untracked_and_hidden_activities(self):
        block = self._make_block()
        tracked = self._make_activity('assign1')
        self._make_activity('page1', completion_mode='none', module_type='page')
        self._make_activity('assign2', visible=False)

        progress = api.CompletionProgress(self.course_id).for_user(self.students[0]).for_block_instance(block)
        assert len(progress.get_activities()) == 2
        assert progress.get_completions() == {str(tracked.usage_key): COMPLETION_INCOMPLETE}

    def test_states(self):
        block = self._make_block(orderby='orderbycourse')
        done = self._make_activity('assign1', position=1)
        partial = self._make_activity('assign2', position=2)
        passed = self._make_activity('quiz1', module_type='quiz', position=3, completion_pass_grade=0.5)
        failed = self._make_activity('quiz2', module_type='quiz', position=4, completion_pass_grade=0.5)
        ungraded = self._make_activity('quiz3', module_type='quiz', position=5, completion_pass_grade=0.5)
        student = self.students[0]
        self._complete(done, student)
        self._complete(partial, student, completion=0.5)
        self._grade(passed, student, grade=8, max_grade=10)
        self._grade(failed, student, grade=2, max_grade=10)
        self._complete(ungraded, student)

        progress = api.CompletionProgress(self.course_id).for_user(student).for_block_instance(block)
        assert progress.get_completions() == {
            str(done.usage_key): COMPLETION_COMPLETE,
            str(partial.usage_key): COMPLETION_INCOMPLETE,
            str(passed.usage_key): COMPLETION_COMPLETE_PASS,
            str(failed.usage_key): COMPLETION_COMPLETE_FAIL,
            str(ungraded.usage_key): COMPLETION_COMPLETE,
        }
        assert progress.get_completed_count() == 3
        assert progress.get_percentage() == 60

    def test_percentage(self):
        block = self._make_block()
        progress = api.CompletionProgress(self.course_id).for_user(self.students[0]).for_block_instance(block)
        assert progress.get_percentage() is None
        assert not progress.has_visible_activities()

        first = self._make_activity('page1', completion_mode='manual', module_type='page')
        self._make_activity('page2', completion_mode='manual', module_type='page')
        self._complete(first, self.students[0])
        progress = api.CompletionProgress(self.course_id).for_user(self.students[0]).for_block_instance(block)
        assert progress.has_visible_activities()
        assert progress.get_percentage() == 50

    def test_overview_needs_user_id(self):
        block = self._make_block()
        self._make_activity('assign1')
        progress = api.CompletionProgress(self.course_id).for_overview().for_block_instance(block)
        with self.assertRaises(ValueError):
            progress.get_completions()
        assert len(progress.get_completions(self.students[2].id)) == 1

    def test_default_config_without_block(self):
        assign = self._make_activity('assign1')
        progress = api.CompletionProgress(self.course_id).for_user(self.students[0])
        assert progress.get_completions() == {str(assign.usage_key): COMPLETION_INCOMPLETE}


@ddt.ddt
class TestActivityOrder(BaseTests):
    """
    Tests of activity ordering.
    """

    def setUp(self):
        super().setUp()
        now = datetime.now(timezone.utc)
        self.late = self._make_activity('assign1', position=1, due=now + timedelta(days=7))
        self.undated = self._make_activity('assign2', position=2)
        self.early = self._make_activity('assign3', position=3, due=now + timedelta(days=1))

    @ddt.data(
        ('orderbytime', ['early', 'late', 'undated']),
        ('orderbycourse', ['late', 'undated', 'early']),
    )
    @ddt.unpack
    def test_order(self, orderby, expected):
        block = self._make_block(orderby=orderby)
        progress = api.CompletionProgress(self.course_id).for_user(self.students[0]).for_block_instance(block)
        expected_keys = [getattr(self, name).usage_key for name in expected]
        assert [activity.usage_key for activity in progress.get_activities()] == expected_keys


@ddt.ddt
class TestOverviewUsers(BaseTests):
    """
    Tests of the overview roster.
    """

    @ddt.data(True, False)
    def test_show_inactive(self, showinactive):
        block = self._make_block()
        with override_settings(COMPLETION_PROGRESS={'showinactive': showinactive}):
            progress = api.CompletionProgress(self.course_id).for_overview().for_block_instance(block)
            usernames = [enrollment['username'] for enrollment in progress.get_users()]
        expected = [student.username for student in self.students]
        if not showinactive:
            expected = expected[:3]
        assert usernames == expected
        assert self.teacher.username not in usernames

    def test_get_enrollments_roles(self):
        enrollments = list(api.get_enrollments(self.course_id, roles=['instructor']))
        assert [enrollment['user_id'] for enrollment in enrollments] == [self.teacher.id]
        assert enrollments[0]['full_name'] == 'teacher'

    def test_is_course_staff(self):
        assert api.is_course_staff(self.teacher, self.course_id)
        assert not api.is_course_staff(self.students[0], self.course_id)
        assert not api.is_course_staff(self.teacher, 'course-v1:testX+other+2019')
        self.students[0].is_staff = True
        assert api.is_course_staff(self.students[0], 'course-v1:testX+other+2019')


class TestMarkComplete(BaseTests):
    """
    Tests of marking activities complete for learners.
    """

    def test_mark_complete(self):
        block = self._make_block()
        page = self._make_activity('page1', completion_mode='manual', module_type='page')
        saved = api.mark_complete(str(page.usage_key), [self.students[0].id, self.students[1].id])
        assert saved == 2
        assert BlockCompletion.objects.filter(block_key=page.usage_key, completion=1.0).count() == 2

        progress = api.CompletionProgress(self.course_id).for_user(self.students[1]).for_block_instance(block)
        assert progress.get_completions() == {str(page.usage_key): COMPLETION_COMPLETE}

    def test_automatic_activity_refused(self):
        assign = self._make_activity('assign1')
        with self.assertRaises(ValueError):
            api.mark_complete(assign.usage_key, [self.students[0].id])
        assert not BlockCompletion.objects.exists()
