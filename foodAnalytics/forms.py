from pathlib import Path

from django import forms
from django.conf import settings

from foodAnalytics.exceptions import ValidationError

MISSING_FIELDS_MESSAGE = "Please enter all fields"
CSV_CONTENT_TYPES = {"text/csv", "application/csv", "application/vnd.ms-excel"}


class RegisterForm(forms.Form):
    name = forms.CharField(max_length=150)
    email = forms.EmailField(max_length=150)
    password = forms.CharField(strip=False)

    def clean_email(self):
        return self.cleaned_data["email"].lower()


class LoginForm(forms.Form):
    email = forms.EmailField()
    password = forms.CharField(strip=False)

    def clean_email(self):
        return self.cleaned_data["email"].lower()


class OrderUploadForm(forms.Form):
    file = forms.FileField(
        allow_empty_file=True,
        error_messages={"required": "No file uploaded."},
    )

    def clean_file(self):
        uploaded = self.cleaned_data["file"]
        suffix = Path(uploaded.name or "").suffix.lower()
        content_type = (getattr(uploaded, "content_type", "") or "").lower()
        if suffix != ".csv" and content_type not in CSV_CONTENT_TYPES:
            raise forms.ValidationError("Only CSV files are allowed.", code="invalid_type")

        max_bytes = settings.ORDER_UPLOAD_MAX_BYTES
        if uploaded.size > max_bytes:
            raise forms.ValidationError(
                f"File too large. Maximum size is {max_bytes // (1024 * 1024)} MB.",
                code="too_large",
            )
        return uploaded


def raise_for_form(form, missing_message=MISSING_FIELDS_MESSAGE):
    """Raise an API ``ValidationError`` describing the first problem on ``form``.

    A missing required field always reports ``missing_message`` so clients see
    one stable wording for incomplete submissions.
    """
    errors = form.errors.as_data()
    for field_errors in errors.values():
        if any(error.code == "required" for error in field_errors) and missing_message:
            raise ValidationError(missing_message)
    for field_errors in errors.values():
        for error in field_errors:
            raise ValidationError(" ".join(error.messages))
    raise ValidationError()
