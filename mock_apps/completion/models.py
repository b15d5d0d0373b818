"""
Block completion records standing in for the host completion service.
"""

from django.contrib.auth import get_user_model
from django.db import models
from opaque_keys.edx.django.models import CourseKeyField, UsageKeyField


class BlockCompletionManager(models.Manager):

    def submit_completion(self, user, block_key, completion):
        """
        Create or update the completion record for ``user`` on ``block_key``.
        """
        if not 0.0 <= completion <= 1.0:
            raise ValueError('completion must be between 0.0 and 1.0')
        return self.update_or_create(
            user=user,
            context_key=block_key.course_key,
            block_key=block_key,
            defaults={'block_type': block_key.block_type, 'completion': completion},
        )


class BlockCompletion(models.Model):
    """
    Tracks the completion of one block for one user.

    .. no_pii:
    """
    user = models.ForeignKey(get_user_model(), on_delete=models.CASCADE)
    context_key = CourseKeyField(max_length=255, db_index=True)
    block_key = UsageKeyField(max_length=255)
    block_type = models.CharField(max_length=64)
    completion = models.FloatField()
    modified = models.DateTimeField(auto_now=True)

    objects = BlockCompletionManager()

    class Meta:
        app_label = "completion"
        unique_together = (('context_key', 'block_key', 'user'),)
