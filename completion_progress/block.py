"""
Block content: progress bars for a learner, on course pages and site pages.
"""

import logging

from django.apps import apps
from django.urls import reverse
from django.utils.html import format_html, format_html_join
from django.utils.safestring import mark_safe
from django.utils.translation import gettext as _
from opaque_keys.edx.keys import CourseKey

from .api import CompletionProgress, is_course_staff
from .constants import STATE_CSS_CLASSES
from .defaults import plugin_setting
from .models import BlockInstance

log = logging.getLogger(__name__)

SITE_PAGE_TYPES = ('site-index', 'my-index')

ICONS = {
    'completed': '✔',
    'failed': '✖',
    'notCompleted': '',
}


def on_site_page(pagetype):
    """
    Return whether ``pagetype`` is a site-level page (site index or dashboard) rather than a course page.
    """
    return bool(pagetype) and pagetype.startswith(SITE_PAGE_TYPES)


def _uses_icons(config):
    return bool(config.progressBarIcons) or bool(plugin_setting('forceiconsinbar'))


def render_progress_bar(progress, user_id):
    """
    Render the progress bar of one learner as HTML.
    """
    config = progress.config
    completions = progress.get_completions(user_id)
    with_icons = _uses_icons(config)
    cells = []
    for activity in progress.get_visible_activities(user_id):
        state = completions[str(activity.usage_key)]
        css_class = STATE_CSS_CLASSES[state]
        cells.append(format_html(
            '<td class="progressBarCell {}" data-activity="{}" title="{}">{}</td>',
            css_class,
            activity.usage_key,
            activity.display_name,
            ICONS[css_class] if with_icons else '',
        ))

    if config.longbars == 'wrap':
        wrap_after = plugin_setting('wrapafter')
        rows = [cells[i:i + wrap_after] for i in range(0, len(cells), wrap_after)]
    else:
        rows = [cells]
    table_class = 'progressBarProgressTable barWithIcons' if with_icons else 'progressBarProgressTable'
    return format_html(
        '<div class="barContainer {}"><table class="{}">{}</table></div>',
        config.longbars,
        table_class,
        format_html_join('', '<tr>{}</tr>', ((mark_safe(''.join(row)),) for row in rows)),
    )


def render_percentage(progress, user_id):
    percentage = progress.get_percentage(user_id)
    if percentage is None:
        return ''
    return format_html('<div class="progressPercentage">{}</div>', _('Progress: {}%').format(percentage))


class CompletionProgressBlock:
    """
    The block as shown to ``user`` on a page of type ``pagetype``.
    """

    def __init__(self, block_instance, user, pagetype=None):
        self.block_instance = block_instance
        self.user = user
        self.pagetype = pagetype

    def get_content(self):
        """
        Return the block body as HTML.
        """
        if on_site_page(self.pagetype):
            return self._site_content()
        return self._course_content()

    def _course_content(self):
        block = self.block_instance
        progress = CompletionProgress(block.course_id).for_user(self.user).for_block_instance(block)
        parts = []
        if not progress.has_visible_activities():
            parts.append(format_html('<div class="noActivities">{}</div>',
                                     _('No activities are being tracked in this course.')))
        else:
            parts.append(render_progress_bar(progress, self.user.id))
            if block.config.showpercentage:
                parts.append(render_percentage(progress, self.user.id))
        if is_course_staff(self.user, block.course_id):
            parts.append(format_html(
                '<a class="overviewButton" href="{}">{}</a>',
                reverse('completion_progress:completion_progress.overview', args=[str(block.course_id), block.id]),
                _('Overview of learners'),
            ))
        log.info('Rendered completion progress block %s for user %s', block.id, self.user.id)
        return mark_safe(''.join(str(part) for part in parts))

    def _site_content(self):
        enrollments = apps.get_model('student', 'CourseEnrollment').objects.filter(
            user=self.user, is_active=True).order_by('course_id')
        parts = []
        for enrollment in enrollments:
            block = BlockInstance.objects.filter(course_id=CourseKey.from_string(enrollment.course_id)).first()
            if block is None:
                continue
            progress = CompletionProgress(block.course_id).for_user(self.user).for_block_instance(block)
            if not progress.has_visible_activities():
                continue
            parts.append(format_html(
                '<div class="courseProgress"><p class="courseTitle">{}</p>{}{}</div>',
                block.config.progressTitle or str(block.course_id),
                render_progress_bar(progress, self.user.id),
                render_percentage(progress, self.user.id) if block.config.showpercentage else '',
            ))
        if not parts:
            return format_html('<div class="noCourses">{}</div>',
                               _('None of your courses track completion progress.'))
        return mark_safe(''.join(str(part) for part in parts))
