from django import template
from django.utils import timezone
from django.utils.html import format_html

register = template.Library()


@register.filter
def smart_date(value):
    """Render a datetime in the viewer's locale via the <time> element.

    Usage:
        {{ entry.log_date|smart_date }}
    """
    if not value:
        return ""
    local = timezone.localtime(value) if timezone.is_aware(value) else value
    return format_html(
        '<time datetime="{}">{}</time>',
        value.isoformat(),
        local.strftime("%b %d, %Y %I:%M %p"),
    )


@register.inclusion_tag("components/empty_state.html")
def empty_state(empty_message: str, hint: str = ""):
    """Render an empty state message.

    Usage:
        {% empty_state empty_message="No maintenance logs found." hint="Create one to get started." %}
    """
    return {"empty_message": empty_message, "hint": hint}


@register.inclusion_tag("components/pill.html")
def pill(label: str, variant: str = "neutral"):
    """Render a status pill.

    Usage:
        {% pill label=entry.status_label variant=entry.status|status_bucket %}
    """
    return {"label": label, "variant": variant}


@register.inclusion_tag("components/form_field.html")
def form_field(field):
    """Render label, widget, and errors of one bound field."""
    return {"field": field}
