"""
Tests for the completion progress block content.
"""

import ddt
from django.test import override_settings
from django.urls import reverse
from opaque_keys.edx.keys import CourseKey
from student.models import CourseEnrollment

from completion_progress.api import CompletionProgress
from completion_progress.block import CompletionProgressBlock, on_site_page, render_progress_bar

from .base import BaseTests


@ddt.ddt
class TestOnSitePage(BaseTests):
    """
    Tests of page type classification.
    """

    @ddt.data(
        ('site-index', True),
        ('my-index', True),
        ('course-view', False),
        ('course-view-topics', False),
        ('', False),
        (None, False),
    )
    @ddt.unpack
    def test_on_site_page(self, pagetype, expected):
        assert on_site_page(pagetype) is expected


class TestCourseContent(BaseTests):
    """
    Tests of the block on a course page.
    """

    def test_bar(self):
        block = self._make_block()
        assign = self._make_activity('assign1')
        self._make_activity('assign2')
        self._complete(assign, self.students[0])

        text = CompletionProgressBlock(block, self.students[0], pagetype='course-view').get_content()
        assert text.count('progressBarCell') == 2
        assert 'progressBarCell completed' in text
        assert 'progressBarCell notCompleted' in text
        assert 'progressPercentage' not in text
        assert 'overviewButton' not in text

    def test_percentage(self):
        block = self._make_block(showpercentage=True)
        assign = self._make_activity('assign1')
        self._make_activity('assign2')
        self._complete(assign, self.students[0])
        text = CompletionProgressBlock(block, self.students[0]).get_content()
        assert 'Progress: 50%' in text

    def test_no_activities(self):
        block = self._make_block()
        text = CompletionProgressBlock(block, self.students[0]).get_content()
        assert 'noActivities' in text
        assert 'progressBarCell' not in text

    def test_staff_link(self):
        block = self._make_block()
        self._make_activity('assign1')
        text = CompletionProgressBlock(block, self.teacher).get_content()
        assert reverse('completion_progress:completion_progress.overview', args=[self.course_id, block.id]) in text
        assert 'href="/api/completion_progress/course/%s/overview/%s/"' % (self.course_id, block.id) in text

    def test_icons(self):
        block = self._make_block(progressBarIcons=True)
        assign = self._make_activity('assign1')
        self._complete(assign, self.students[0])
        text = CompletionProgressBlock(block, self.students[0]).get_content()
        assert 'barWithIcons' in text
        assert '✔' in text

    def test_wrap(self):
        block = self._make_block(longbars='wrap')
        for name in ('assign1', 'assign2', 'assign3'):
            self._make_activity(name)
        progress = CompletionProgress(self.course_id).for_user(self.students[0]).for_block_instance(block)
        with override_settings(COMPLETION_PROGRESS={'wrapafter': 2}):
            text = render_progress_bar(progress, self.students[0].id)
        assert 'barContainer wrap' in text
        assert text.count('<tr>') == 2

    def test_escapes_activity_names(self):
        block = self._make_block()
        self._make_activity('assign1', display_name='<b>Essay</b>')
        text = CompletionProgressBlock(block, self.students[0]).get_content()
        assert '<b>' not in text
        assert '&lt;b&gt;Essay&lt;/b&gt;' in text


class TestSiteContent(BaseTests):
    """
    Tests of the block on the site index and dashboard.
    """

    def test_courses(self):
        block = self._make_block(progressTitle='First course')
        self._make_activity('assign1')

        other_course = 'course-v1:testX+cp102+2019'
        other_key = CourseKey.from_string(other_course)
        self._make_block(course_key=other_key)
        self._make_activity('assign1', course_key=other_key)
        CourseEnrollment.objects.create(course_id=other_course, user=self.students[0])

        # Enrolled, but the course has no block.
        CourseEnrollment.objects.create(course_id='course-v1:testX+cp103+2019', user=self.students[0])

        text = CompletionProgressBlock(block, self.students[0], pagetype='my-index').get_content()
        assert 'First course' in text
        assert other_course in text
        assert 'cp103' not in text
        assert text.count('courseProgress') == 2
        assert text.count('progressBarCell') == 2

    def test_no_courses(self):
        block = self._make_block()
        text = CompletionProgressBlock(block, self.students[0], pagetype='site-index').get_content()
        assert 'noCourses' in text
