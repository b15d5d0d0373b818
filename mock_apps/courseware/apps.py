# -*- coding: utf-8 -*-
"""
courseware Django application initialization.
"""

from django.apps import AppConfig


class CoursewareConfig(AppConfig):
    """
    Configuration for the courseware Django application.
    """

    name = 'courseware'
    default_auto_field = 'django.db.models.AutoField'
