"""
Completion states and table sort orders.
"""

COMPLETION_INCOMPLETE = 0
COMPLETION_COMPLETE = 1
COMPLETION_COMPLETE_PASS = 2
COMPLETION_COMPLETE_FAIL = 3

COMPLETED_STATES = (COMPLETION_COMPLETE, COMPLETION_COMPLETE_PASS)

# CSS class of a progress bar cell, per state.
STATE_CSS_CLASSES = {
    COMPLETION_INCOMPLETE: 'notCompleted',
    COMPLETION_COMPLETE: 'completed',
    COMPLETION_COMPLETE_PASS: 'completed',
    COMPLETION_COMPLETE_FAIL: 'failed',
}

SORT_ASC = 4
SORT_DESC = 3

STAFF_ROLES = ('staff', 'instructor')
