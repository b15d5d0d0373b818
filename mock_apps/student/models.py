# -*- coding: utf-8 -*-
"""
Enrollment and role models standing in for the host platform.
"""

from django.contrib.auth import get_user_model
from django.db import models


class CourseEnrollment(models.Model):
    """
    Represents a Student's Enrollment record for a single Course.

    .. no_pii:
    """

    user = models.ForeignKey(get_user_model(), on_delete=models.CASCADE)

    course_id = models.CharField(max_length=255, db_index=True)

    created = models.DateTimeField(auto_now_add=True, null=True, db_index=True)

    # If is_active is False, then the student is not considered to be enrolled
    # in the course (is_enrolled() will return False)
    is_active = models.BooleanField(default=True)

    mode = models.CharField(default='audit', max_length=100)

    class Meta(object):
        unique_together = (('user', 'course_id'),)
        ordering = ('user', 'course_id')


class CourseAccessRole(models.Model):
    user = models.ForeignKey(get_user_model(), on_delete=models.CASCADE)
    course_id = models.CharField(max_length=255, db_index=True, blank=True)
    role = models.CharField(max_length=64, db_index=True)

    class Meta(object):
        unique_together = ('user', 'course_id', 'role')


class Profile(models.Model):
    user = models.OneToOneField(get_user_model(), on_delete=models.CASCADE)
    name = models.CharField(max_length=100)
