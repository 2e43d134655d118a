from django import template

from apps.core.api import get_image_url
from apps.core.formatting import format_rupiah, format_thousands

register = template.Library()


@register.filter
def rupiah(value):
    return format_rupiah(value)


@register.filter
def thousands(value):
    return format_thousands(value)


@register.filter
def image_url(photo):
    return get_image_url(photo)
