"""
completion_progress Django application initialization.
"""

from django.apps import AppConfig


class CompletionProgressConfig(AppConfig):
    """
    Configuration for the completion_progress Django application.
    """

    name = 'completion_progress'
    default_auto_field = 'django.db.models.AutoField'
    plugin_app = {
        'url_config': {
            'lms.djangoapp': {
                'namespace': 'completion_progress',
                'regex': '^api/',
                'relative_path': 'urls',
            },
        },
        'settings_config': {
            'lms.djangoapp': {
                'common': {'relative_path': 'settings.common'},
                'production': {'relative_path': 'settings.production'},
            },
        },
    }
