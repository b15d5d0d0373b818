"""
URLs for completion_progress.
"""

from django.conf import settings
from django.urls import re_path

from . import views

app_name = 'completion_progress'

urlpatterns = [
    re_path(
        r'^completion_progress/block/(?P<block_id>\d+)/$',
        views.BlockContentView.as_view(),
        name='completion_progress.block'
    ),
    re_path(
        fr'^completion_progress/course/{settings.COURSE_ID_PATTERN}/overview/(?P<block_id>\d+)/$',
        views.OverviewView.as_view(),
        name='completion_progress.overview'
    ),
    re_path(
        fr'^completion_progress/course/{settings.COURSE_ID_PATTERN}/overview/(?P<block_id>\d+)/csv/$',
        views.OverviewExport.as_view(),
        name='completion_progress.overview.csv'
    ),
]
