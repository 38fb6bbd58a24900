from django import template

from itlog.apps.maintenance.records import LogStatus

register = template.Library()

# Five statuses, four visual buckets: finished work shares one look.
_STATUS_BUCKETS = {
    LogStatus.REPORTED.value: "reported",
    LogStatus.IN_PROGRESS.value: "in-progress",
    LogStatus.PENDING_PARTS.value: "pending",
    LogStatus.RESOLVED.value: "done",
    LogStatus.CLOSED.value: "done",
}


@register.filter
def status_bucket(status):
    """Return the visual bucket for a maintenance log status.

    Usage:
        {{ entry.status|status_bucket }}
    """
    return _STATUS_BUCKETS.get(str(status), "neutral")
