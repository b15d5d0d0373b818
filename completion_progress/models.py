"""
Database models for completion_progress.
"""

import json
import logging

from django.db import models
from django.utils.functional import cached_property
from model_utils.models import TimeStampedModel
from opaque_keys.edx.django.models import CourseKeyField

from . import defaults

log = logging.getLogger(__name__)

CHOICES = {
    'orderby': (defaults.ORDERBY_CHOICES, defaults.ORDERBY),
    'longbars': (defaults.LONGBARS_CHOICES, defaults.LONGBARS),
    'activitiesincluded': (defaults.ACTIVITIESINCLUDED_CHOICES, defaults.ACTIVITIESINCLUDED),
}


class BlockConfig:
    """
    Per-instance block configuration, with every key defaulted.

    A choice setting holding an unknown value falls back to its default.
    """

    def __init__(self, **kwargs):
        self.orderby = defaults.ORDERBY
        self.longbars = defaults.LONGBARS
        self.progressBarIcons = defaults.PROGRESSBARICONS  # pylint: disable=invalid-name
        self.showpercentage = defaults.SHOWPERCENTAGE
        self.progressTitle = defaults.PROGRESSTITLE  # pylint: disable=invalid-name
        self.activitiesincluded = defaults.ACTIVITIESINCLUDED
        self.selectactivities = []
        for key, value in kwargs.items():
            if key in CHOICES and value not in CHOICES[key][0]:
                log.warning('Ignoring unknown %s value %r in block configuration', key, value)
                value = CHOICES[key][1]
            setattr(self, key, value)

    def to_dict(self):
        return dict(self.__dict__)


class BlockInstance(TimeStampedModel):
    """
    A completion progress block placed on a course page.

    .. no_pii:
    """

    course_id = CourseKeyField(max_length=255, db_index=True)
    page_type_pattern = models.CharField(max_length=64, default='course-view-*')
    region = models.CharField(max_length=16, default='side-post')
    weight = models.IntegerField(default=0)
    config_data = models.TextField(blank=True, default='')

    class Meta:
        """Django model meta."""

        app_label = 'completion_progress'
        ordering = ('weight', 'id')

    def __str__(self):
        """Return string representation."""
        return f'BlockInstance({self.course_id}, {self.page_type_pattern})'

    @cached_property
    def config(self):
        """
        Return the decoded configuration as a BlockConfig.
        """
        return BlockConfig(**json.loads(self.config_data or '{}'))

    def set_config(self, **values):
        """
        Merge ``values`` into the stored configuration.
        """
        config = self.config.to_dict()
        config.update(values)
        self.config_data = json.dumps(config)
        self.__dict__.pop('config', None)
