"""
URLs for middleware and template tag tests
"""

from django.http import HttpResponse, JsonResponse
from django.template import RequestContext, Template
from django.urls import path


PAGE = (
    '<html><head><title>Test</title></head><body>'
    '<img src="/wp-content/uploads/logo.png" alt="Logo">'
    '<a href="/wp-content/uploads/report.pdf">Report</a>'
    '</body></html>'
)

TAGGED_PAGE = (
    '{% load cdn_tags %}'
    '<html><head>{% cdn_config_script %}{% cdn_style "css/site.css" %}</head><body>'
    '{% cdn_script "js/app.js" defer=True %}'
    '<img src="{% cdn_url "/wp-content/uploads/a.png" %}">'
    '{% cdn_rewrite %}<img src="/wp-content/uploads/b.png">{% endcdn_rewrite %}'
    '</body></html>'
)


def page(request):
    return HttpResponse(PAGE)


def tagged_page(request):
    return HttpResponse(Template(TAGGED_PAGE).render(RequestContext(request)))


def data(request):
    return JsonResponse({'logo': '/wp-content/uploads/logo.png'})


urlpatterns = [
    path('', page),
    path('tagged/', tagged_page),
    path('data/', data),
    path('wp-admin/page/', page),
]
