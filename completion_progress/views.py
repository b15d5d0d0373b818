"""
Views for the completion progress block and its overview.
"""

import datetime
import logging

from django.http import HttpResponse, HttpResponseForbidden, JsonResponse, StreamingHttpResponse
from django.middleware.csrf import get_token
from django.shortcuts import get_object_or_404
from django.utils.html import format_html, format_html_join
from django.utils.translation import gettext as _
from django.views.generic import View
from opaque_keys.edx.keys import CourseKey

from . import api
from .block import CompletionProgressBlock, on_site_page
from .constants import SORT_ASC, SORT_DESC
from .defaults import plugin_setting
from .models import BlockInstance
from .table import OverviewCSVProcessor, OverviewTable

log = logging.getLogger(__name__)


def _page_size(value):
    """
    Return the requested rows per page, or the configured default when it is not a positive number.
    """
    try:
        page_size = int(value)
    except (TypeError, ValueError):
        return plugin_setting('overview_page_size')
    return page_size if page_size > 0 else plugin_setting('overview_page_size')


class BlockContentView(View):
    """
    Body of a completion progress block for the requesting user.
    """

    def get(self, request, block_id):
        """
        Render the block.

        GET arguments:
        pagetype: type of the page the block is shown on, e.g. course-view or my-index
        """
        if not request.user.is_authenticated:
            return HttpResponseForbidden()
        block_instance = get_object_or_404(BlockInstance, id=block_id)
        pagetype = request.GET.get('pagetype')
        course_id = block_instance.course_id
        if not on_site_page(pagetype) and not (
            api.is_enrolled(request.user, course_id) or api.is_course_staff(request.user, course_id)
        ):
            log.info('Refused block %s of %s to user %s', block_id, course_id, request.user.id)
            return HttpResponseForbidden()
        block = CompletionProgressBlock(block_instance, request.user, pagetype=pagetype)
        return HttpResponse(block.get_content())


class OverviewMixin:
    """
    Shared setup for views over every learner of a course.
    """

    def dispatch(self, request, course_id, block_id, *args, **kwargs):  # pylint: disable=arguments-differ
        """
        Dispatch django request, for course staff only.
        """
        if not request.user.is_authenticated or not api.is_course_staff(request.user, course_id):
            log.info('Refused overview of %s to user %s', course_id, request.user.id)
            return HttpResponseForbidden()
        self.block_instance = get_object_or_404(BlockInstance, id=block_id, course_id=CourseKey.from_string(course_id))
        self.progress = api.CompletionProgress(course_id).for_overview().for_block_instance(self.block_instance)
        return super().dispatch(request, course_id, block_id, *args, **kwargs)

    def get_table(self, request, bulk_operations=True):
        """
        Build the overview table from GET arguments.

        GET arguments:
        sort: fullname, timeaccess or progress
        order: asc or desc
        role: course role whose holders are listed instead of learners
        """
        roles = request.GET.getlist('role')
        table = OverviewTable(self.progress, roles=roles or None, bulk_operations=bulk_operations)
        sortby = request.GET.get('sort')
        if sortby:
            order = SORT_ASC if request.GET.get('order') == 'asc' else SORT_DESC
            table.set_sortdata([{'sortby': sortby, 'sortorder': order}])
        table.define_baseurl(request.path)
        return table


class OverviewView(OverviewMixin, View):
    """
    Overview of every learner's progress, with a bulk "mark complete" action.
    """

    # pylint: disable=unused-argument
    def get(self, request, course_id, block_id):
        """
        Render a page of the overview table.

        GET arguments:
        page: page number, from 1
        perpage: rows per page
        """
        table = self.get_table(request)
        page_size = _page_size(request.GET.get('perpage'))
        manual_activities = [
            activity for activity in self.progress.get_activities() if activity.completion_mode == 'manual'
        ]
        options = format_html_join(
            '', '<option value="{}">{}</option>',
            ((activity.usage_key, activity.display_name) for activity in manual_activities),
        )
        return HttpResponse(format_html(
            '<form method="post" class="overviewForm">'
            '<input type="hidden" name="csrfmiddlewaretoken" value="{}">{}'
            '<select name="activity">{}</select><button type="submit">{}</button></form>',
            get_token(request),
            table.out(page_size, request.GET.get('page') or 1),
            options,
            _('Mark as complete'),
        ))

    # pylint: disable=unused-argument
    def post(self, request, course_id, block_id):
        """
        Mark an activity complete for the selected learners.

        POST arguments:
        activity: usage key of a manually-completed activity
        user<id>: one per selected learner
        """
        user_ids = [
            int(value) for key, value in request.POST.items()
            if key.startswith('user') and value.isdigit()
        ]
        activity = request.POST.get('activity', '')
        included = {str(item.usage_key): item for item in self.progress.get_activities()}
        if activity not in included or included[activity].completion_mode != 'manual':
            return JsonResponse({'error': _('Choose an activity that learners complete manually.')}, status=400)
        enrolled = {enrollment['user_id'] for enrollment in api.get_enrollments(course_id)}
        saved = api.mark_complete(activity, [user_id for user_id in user_ids if user_id in enrolled])
        log.info('User %s marked %s complete for %s learners in %s', request.user.id, activity, saved, course_id)
        return JsonResponse({'saved': saved, 'activity': activity})


class OverviewExport(OverviewMixin, View):
    """
    CSV export of the overview table.
    """

    # pylint: disable=unused-argument
    def get(self, request, course_id, block_id):
        """
        Export every learner's progress in CSV format.
        """
        processor = OverviewCSVProcessor(table=self.get_table(request, bulk_operations=False))
        filename = [course_id, 'completion-progress', datetime.datetime.utcnow().isoformat()]

        response = StreamingHttpResponse(processor.get_iterator(), content_type='text/csv')
        response['Content-Disposition'] = 'attachment; filename="%s.csv"' % '-'.join(filename)

        log.info('Exporting %s CSV for %s', course_id, self.__class__)
        return response
