"""
Overview table of every learner's completion progress.
"""

import logging

from django.core.paginator import Paginator
from django.utils.html import format_html, format_html_join
from django.utils.http import urlencode
from django.utils.safestring import mark_safe
from django.utils.translation import gettext as _
from super_csv.csv_processor import CSVProcessor

from .api import get_enrollments
from .block import render_progress_bar
from .clients import LearnerAPIClient
from .constants import COMPLETED_STATES, SORT_ASC, SORT_DESC
from .defaults import plugin_setting

__all__ = ('OverviewTable', 'OverviewCSVProcessor')

log = logging.getLogger(__name__)

SORTABLE_COLUMNS = ('fullname', 'timeaccess', 'progress')
DEFAULT_SORTDATA = [{'sortby': 'progress', 'sortorder': SORT_DESC}]


class OverviewTable:
    """
    Sortable, paginated table of learners and their progress bars.
    """

    def __init__(self, progress, roles=None, bulk_operations=True):
        self.progress = progress
        self.roles = roles
        self.bulk_operations = bulk_operations
        self.show_last_access = plugin_setting('showlastincourse')
        self.baseurl = ''
        self.sortdata = list(DEFAULT_SORTDATA)
        self._rows = None

    @property
    def columns(self):
        """
        Return (column name, header) pairs of the visible columns.
        """
        columns = []
        if self.bulk_operations:
            columns.append(('select', _('Select')))
        columns.append(('fullname', _('Learner')))
        if self.show_last_access:
            columns.append(('timeaccess', _('Last in course')))
        columns.append(('progressbar', _('Progress bar')))
        columns.append(('progress', _('Progress')))
        return columns

    def define_baseurl(self, url):
        self.baseurl = url

    def set_sortdata(self, sortdata):
        """
        Set the sort order, as a list of {'sortby': column, 'sortorder': SORT_ASC|SORT_DESC}.

        Unknown columns are ignored; the first sort is the primary one.
        Without any known column the default progress-descending sort is kept.
        """
        sortdata = [sort for sort in sortdata if sort.get('sortby') in SORTABLE_COLUMNS]
        self.sortdata = sortdata or list(DEFAULT_SORTDATA)
        self._rows = None

    def _users(self):
        if self.roles:
            return list(get_enrollments(
                self.progress.course_key,
                active_only=not plugin_setting('showinactive'),
                roles=self.roles,
            ))
        return self.progress.get_users()

    def get_rows(self):
        """
        Return the ordered row dictionaries of every learner in the table.
        """
        if self._rows is not None:
            return self._rows
        last_access = {}
        if self.show_last_access:
            last_access = LearnerAPIClient().last_access(self.progress.course_key)
        rows = []
        for enrollment in self._users():
            completions = self.progress.get_completions(enrollment['user_id'])
            rows.append({
                'user_id': enrollment['user_id'],
                'username': enrollment['username'],
                'full_name': enrollment['full_name'],
                'enrolled': enrollment['enrolled'],
                'timeaccess': last_access.get(enrollment['username']),
                'completed': sum(1 for state in completions.values() if state in COMPLETED_STATES),
                'total': len(completions),
                'percentage': self.progress.get_percentage(enrollment['user_id']),
            })
        # Apply the least significant sort first; list.sort is stable.
        for sort in reversed(self.sortdata):
            rows.sort(key=_sort_keys[sort['sortby']], reverse=sort.get('sortorder') == SORT_DESC)
        self._rows = rows
        log.debug('Built %d overview rows for %s', len(rows), self.progress.course_key)
        return rows

    def _sort_link(self, column, header):
        current = self.sortdata[0] if self.sortdata else {}
        order = 'desc'
        if current.get('sortby') == column and current.get('sortorder') == SORT_DESC:
            order = 'asc'
        separator = '&' if '?' in self.baseurl else '?'
        return format_html(
            '<a href="{}{}{}">{}</a>',
            self.baseurl, separator, urlencode({'sort': column, 'order': order}), header,
        )

    def _render_header(self):
        cells = []
        for column, header in self.columns:
            if column in SORTABLE_COLUMNS:
                header = self._sort_link(column, header)
            cells.append((column, header))
        return format_html_join('', '<th class="header col-{}" scope="col">{}</th>', cells)

    def _render_cell(self, column, row):
        if column == 'select':
            return format_html(
                '<input id="user{}" type="checkbox" class="usercheckbox" name="user{}" value="{}">',
                row['user_id'], row['user_id'], row['user_id'],
            )
        if column == 'fullname':
            return row['full_name']
        if column == 'timeaccess':
            return row['timeaccess'] or _('Never')
        if column == 'progressbar':
            return render_progress_bar(self.progress, row['user_id'])
        if row['percentage'] is None:
            return '-'
        return f"{row['percentage']}%"

    def _render_row(self, row):
        cells = format_html_join(
            '', '<td class="cell col-{}">{}</td>',
            ((column, self._render_cell(column, row)) for column, _header in self.columns),
        )
        return format_html('<tr class="{}">{}</tr>', '' if row['enrolled'] else 'dimmed_text', cells)

    def _render_paging(self, page):
        if page.paginator.num_pages < 2:
            return ''
        current = self.sortdata[0] if self.sortdata else {'sortby': 'progress', 'sortorder': SORT_DESC}
        separator = '&' if '?' in self.baseurl else '?'
        links = []
        for number in page.paginator.page_range:
            query = urlencode({
                'sort': current['sortby'],
                'order': 'asc' if current['sortorder'] == SORT_ASC else 'desc',
                'page': number,
            })
            css_class = 'page-item active' if number == page.number else 'page-item'
            links.append((css_class, self.baseurl, separator, query, number))
        return format_html(
            '<nav class="paging"><ul class="pagination">{}</ul></nav>',
            format_html_join('', '<li class="{}"><a href="{}{}{}">{}</a></li>', links),
        )

    def out(self, page_size, page=1):
        """
        Render one page of the table as HTML.
        """
        paginator = Paginator(self.get_rows(), page_size)
        page = paginator.get_page(page)
        body = mark_safe(''.join(self._render_row(row) for row in page.object_list))
        if not page.object_list:
            body = format_html('<tr><td class="cell emptyrow" colspan="{}">{}</td></tr>',
                               len(self.columns), _('Nothing to display'))
        log.info('Rendered overview page %s of %s for %s',
                 page.number, paginator.num_pages, self.progress.course_key)
        return format_html(
            '<table class="generaltable overviewTable" id="completion-progress-overview">'
            '<thead><tr>{}</tr></thead><tbody>{}</tbody></table>{}',
            self._render_header(),
            body,
            self._render_paging(page),
        )


_sort_keys = {
    'fullname': lambda row: row['full_name'].lower(),
    'timeaccess': lambda row: row['timeaccess'] or '',
    'progress': lambda row: (-1 if row['percentage'] is None else row['percentage'], row['completed']),
}


class OverviewCSVProcessor(CSVProcessor):
    """
    CSV export of the overview table.
    """

    columns = ['user_id', 'username', 'full_name', 'enrolled', 'last_access', 'completed', 'total', 'progress']

    def __init__(self, **kwargs):
        """
        Create an OverviewCSVProcessor for the given ``table``.
        """
        self.table = None
        super().__init__(**kwargs)

    def get_rows_to_export(self):
        """
        Return iterator of rows for file export.
        """
        for row in self.table.get_rows():
            yield {
                'user_id': row['user_id'],
                'username': row['username'],
                'full_name': row['full_name'],
                'enrolled': row['enrolled'],
                'last_access': row['timeaccess'],
                'completed': row['completed'],
                'total': row['total'],
                'progress': row['percentage'],
            }
