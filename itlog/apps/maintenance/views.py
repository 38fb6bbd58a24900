"""Maintenance log page: entry form and history list."""

from __future__ import annotations

from django.contrib import messages
from django.shortcuts import redirect, render
from django.views import View

from itlog.apps.maintenance.controller import LogFormController
from itlog.apps.maintenance.forms import MaintenanceLogForm
from itlog.apps.maintenance.gateway import get_gateway
from itlog.apps.maintenance.logbook import LogBook
from itlog.apps.maintenance.records import DRAFT_FIELDS


def build_controller(form: MaintenanceLogForm) -> LogFormController:
    """Load whatever the bound form could clean into a fresh draft."""
    controller = LogFormController()
    cleaned = getattr(form, "cleaned_data", {})
    for name in DRAFT_FIELDS:
        if name in cleaned:
            controller.set_field(name, cleaned[name])
    image = cleaned.get("image")
    if image is not None:
        controller.select_image(image)
    return controller


class MaintenanceLogView(View):
    """Single page: GET shows the form and history, POST saves a new entry."""

    template_name = "maintenance/log_home.html"

    def get(self, request):
        logbook = LogBook(get_gateway())
        logbook.load()
        return self.render_page(request, logbook, MaintenanceLogForm(), LogFormController())

    def post(self, request):
        form = MaintenanceLogForm(request.POST, request.FILES)
        logbook = LogBook(get_gateway())
        is_valid = form.is_valid()
        controller = build_controller(form)

        if not is_valid:
            logbook.load()
            return self.render_page(request, logbook, form, controller)

        outcome = controller.submit(logbook.submit)
        if not outcome.ok:
            messages.error(request, outcome.notice)
            logbook.load()
            return self.render_page(request, logbook, form, controller, status=502)

        messages.success(request, "Log entry saved.")
        return redirect("maintenance:log-home")

    def render_page(self, request, logbook, form, controller, status=200):
        context = {
            "form": form,
            "preview": controller.preview,
            "image_name": controller.image.name if controller.image else "",
            "log_entries": logbook.records,
            "load_error": logbook.last_error,
        }
        return render(request, self.template_name, context, status=status)
