from django import forms
from django.utils.translation import gettext_lazy as _


class CustomerForm(forms.Form):
    name = forms.CharField(
        label=_('Name'),
        max_length=200,
        widget=forms.TextInput(attrs={'class': 'form-control', 'autofocus': True}),
        error_messages={'required': _('Name is required')},
    )

    phone = forms.CharField(
        label=_('Phone'),
        max_length=20,
        widget=forms.TextInput(attrs={'class': 'form-control', 'dir': 'ltr'}),
        error_messages={'required': _('Phone number is required')},
    )

    location = forms.CharField(
        label=_('Location'),
        max_length=200,
        required=False,
        widget=forms.TextInput(attrs={'class': 'form-control'}),
    )

    def __init__(self, *args, **kwargs):
        disabled = kwargs.pop('disabled', False)
        super().__init__(*args, **kwargs)

        if disabled:
            for field in self.fields.values():
                field.disabled = True
