import logging
from functools import wraps

from django.http import JsonResponse

from .exceptions import ServiceError

logger = logging.getLogger(__name__)


def error_response(code: str, message: str, status: int, **extra):
    payload = {"error": code, "message": message}
    payload.update(extra)
    return JsonResponse(payload, status=status)


def invalid_input_response(errors):
    return error_response("BAD_REQUEST", "Invalid input.", 400, errors=errors)


def invalid_form_response(form):
    return invalid_input_response(form.errors.get_json_data())


def invalid_formset_response(formset, prefix: str):
    errors = {
        f"{prefix}-{index}": form.errors.get_json_data()
        for index, form in enumerate(formset.forms)
        if form.errors
    }
    if formset.non_form_errors():
        errors[prefix] = formset.non_form_errors().get_json_data()
    return invalid_input_response(errors)


def staff_required(view_func):
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        user = request.user
        if not user.is_authenticated:
            return error_response("UNAUTHORIZED", "Sign in to continue.", 401)
        if not (user.is_staff or user.is_superuser):
            return error_response("FORBIDDEN", "Staff access is required.", 403)
        return view_func(request, *args, **kwargs)

    return _wrapped


def json_endpoint(view_func):
    """Staff-only view whose service errors become JSON error responses."""

    @wraps(view_func)
    @staff_required
    def _wrapped(request, *args, **kwargs):
        try:
            return view_func(request, *args, **kwargs)
        except ServiceError as exc:
            if exc.status >= 500:
                logger.exception("%s failed: %s", request.path, exc.message)
            else:
                logger.info("%s rejected (%s): %s", request.path, exc.code, exc.message)
            return error_response(exc.code, exc.message, exc.status)

    return _wrapped


def list_response(results):
    return JsonResponse({"results": list(results)})
