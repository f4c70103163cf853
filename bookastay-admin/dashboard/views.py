from dataclasses import asdict
from importlib import import_module

from django.conf import settings
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.http import require_http_methods, require_POST

from .forms import BlockDateForm
from .services import (
    ERROR,
    BlockForm,
    TAB_BOOKINGS,
    DashboardController,
    SharedGenerations,
    load_state,
    save_state,
)


def get_controller(request) -> DashboardController:
    state = load_state(request.session)
    if request.session.session_key is None:
        # номер загрузки привязан к ключу сессии, он нужен сразу
        request.session.create()
    generations = SharedGenerations(request.session.session_key, start=state.generation)
    return DashboardController(state=state, generations=generations)


def store_state(controller, request):
    """
    Сохраняет состояние в сессию. Если пока шёл этот запрос другой запрос
    той же сессии начал более новую загрузку, её записи не затираем.
    """
    if controller.is_superseded():
        engine = import_module(settings.SESSION_ENGINE)
        fresh = engine.SessionStore(session_key=request.session.session_key)
        controller.adopt_newer(load_state(fresh))
    save_state(request.session, controller.state)


def back_to_dashboard(controller, request):
    store_state(controller, request)
    url = reverse("dashboard:index")
    return redirect(f"{url}?tab={controller.state.active_tab}")


@require_http_methods(["GET"])
def index(request):
    controller = get_controller(request)
    controller.select_tab(request.GET.get("tab"))
    controller.mount()

    controller.current_message()
    store_state(controller, request)

    state = controller.state
    form = BlockDateForm(initial=asdict(state.form))
    message = controller.current_message()

    context = {
        "state": state,
        "form": form,
        "message": message,
        "message_remaining_ms": (
            max(0, int((message.expires_at - controller.clock()) * 1000)) if message else 0
        ),
        "admin_blocks": state.admin_blocks,
        "user_bookings": state.user_bookings,
    }
    return render(request, "dashboard/index.html", context)


@require_POST
def refresh(request):
    controller = get_controller(request)
    controller.refresh()
    return back_to_dashboard(controller, request)


@require_POST
def block_date(request):
    controller = get_controller(request)
    form = BlockDateForm(request.POST)

    if form.is_valid():
        controller.block_date(form.cleaned_data)
    else:
        # неизвестный room_type и т.п. — запрос не отправляем, введённое сохраняем
        controller.state.form = BlockForm.from_data(request.POST)
        errors = [error for field_errors in form.errors.values() for error in field_errors]
        controller.show_message(ERROR, errors[0])

    return back_to_dashboard(controller, request)


@require_http_methods(["GET", "POST"])
def delete_booking(request, booking_id):
    """
    GET  — страница подтверждения.
    POST с confirm=yes — удаление через API.
    """
    controller = get_controller(request)

    if request.method == "GET":
        record = next(
            (r for r in controller.state.records if str(r.id) == str(booking_id)),
            None,
        )
        return render(
            request,
            "dashboard/confirm_delete.html",
            {"booking_id": booking_id, "record": record},
        )

    controller.select_tab(TAB_BOOKINGS)
    controller.delete_booking(booking_id, confirmed=request.POST.get("confirm") == "yes")
    return back_to_dashboard(controller, request)
