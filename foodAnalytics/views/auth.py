"""
Account endpoints: register, login, current user and logout.
"""

import logging

from django.contrib.auth import authenticate, get_user_model
from django.db import IntegrityError, transaction
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from foodAnalytics.exceptions import AuthError, ConflictError
from foodAnalytics.forms import LoginForm, RegisterForm, raise_for_form
from foodAnalytics.utils.http import parse_json_body, user_payload
from foodAnalytics.utils.tokens import issue_token, revoke_token

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "User with this email already exists"


@csrf_exempt
@require_POST
def register_view(request):
    """Create an account and return it together with a fresh token."""
    form = RegisterForm(parse_json_body(request))
    if not form.is_valid():
        raise_for_form(form)

    email = form.cleaned_data["email"]
    User = get_user_model()
    if User.objects.filter(username=email).exists() or User.objects.filter(email__iexact=email).exists():
        raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=email,
                email=email,
                password=form.cleaned_data["password"],
                first_name=form.cleaned_data["name"],
            )
    except IntegrityError as exc:
        # Lost a race with a concurrent registration for the same email.
        raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from exc

    logger.info("Registered user %s", user.pk)
    return JsonResponse({**user_payload(user), "token": issue_token(user.pk)})


@csrf_exempt
@require_POST
def login_view(request):
    form = LoginForm(parse_json_body(request))
    if not form.is_valid():
        raise_for_form(form)

    user = authenticate(
        request,
        username=form.cleaned_data["email"],
        password=form.cleaned_data["password"],
    )
    if user is None:
        raise AuthError("Invalid credentials")

    logger.info("User %s logged in", user.pk)
    return JsonResponse({**user_payload(user), "token": issue_token(user.pk)})


@require_GET
def me_view(request):
    return JsonResponse(user_payload(request.api_user))


@csrf_exempt
@require_POST
def logout_view(request):
    revoke_token(request.api_token)
    return JsonResponse({"message": "Logged out successfully"})
