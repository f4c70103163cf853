from django import forms
from django.utils import timezone

from api.records import DEFAULT_ROOM_TYPE, ROOM_TYPE_CHOICES


class BlockDateForm(forms.Form):
    """
    Форма блокировки дат.
    Наличие дат проверяет DashboardController, порядок дат не проверяется нигде.
    min у календарей — только подсказка для браузера.
    """

    room_type = forms.ChoiceField(
        label="Room Type",
        choices=ROOM_TYPE_CHOICES,
        initial=DEFAULT_ROOM_TYPE,
    )
    check_in_date = forms.CharField(
        label="Check-in Date",
        required=False,
        widget=forms.DateInput(attrs={"type": "date"}),
    )
    check_out_date = forms.CharField(
        label="Check-out Date",
        required=False,
        widget=forms.DateInput(attrs={"type": "date"}),
    )
    reason = forms.CharField(
        label="Reason (Optional)",
        required=False,
        widget=forms.TextInput(attrs={"placeholder": "e.g., Maintenance, Cleaning"}),
    )

    def __init__(self, *args, today=None, **kwargs):
        super().__init__(*args, **kwargs)

        today_str = (today or timezone.now().date()).isoformat()
        check_in = self._raw_value("check_in_date")

        self.fields["check_in_date"].widget.attrs["min"] = today_str
        self.fields["check_out_date"].widget.attrs["min"] = check_in or today_str

    def _raw_value(self, name):
        if self.is_bound:
            return self.data.get(self.add_prefix(name)) or ""
        return self.initial.get(name) or ""
