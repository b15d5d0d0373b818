"""
Default values for block instance configuration and plugin settings.
"""

from django.conf import settings

# Block instance configuration.
ORDERBY = 'orderbytime'
LONGBARS = 'squeeze'
PROGRESSBARICONS = False
SHOWPERCENTAGE = False
PROGRESSTITLE = ''
ACTIVITIESINCLUDED = 'activitycompletion'

ORDERBY_CHOICES = ('orderbytime', 'orderbycourse')
LONGBARS_CHOICES = ('squeeze', 'scroll', 'wrap')
ACTIVITIESINCLUDED_CHOICES = ('activitycompletion', 'selectedactivities')

# Plugin-wide settings, overridden through settings.COMPLETION_PROGRESS.
PLUGIN_SETTINGS = {
    'showinactive': False,
    'showlastincourse': True,
    'forceiconsinbar': False,
    'wrapafter': 16,
    'overview_page_size': 20,
}


def plugin_setting(name):
    """
    Return the plugin-wide setting ``name``, falling back to its default.
    """
    return getattr(settings, 'COMPLETION_PROGRESS', {}).get(name, PLUGIN_SETTINGS[name])
